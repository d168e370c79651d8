"""
storage.py
======================

状態保存用のキー・バリューストア。

ブラウザ版で localStorage に置いていた 3 つのキーを、
差し替え可能な「ストレージ」として扱う。

- quizState   : {"historyIds": [...], "currentIndex": n}
- showCounts  : {qid: 出題回数}
- wrongCounts : {qid: 誤答回数}

どの実装も set() は値全体の置き換えで、部分更新はしない。
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from .config import AppConfig

logger = logging.getLogger(__name__)

STATE_KEY = "quizState"
SHOW_COUNTS_KEY = "showCounts"
WRONG_COUNTS_KEY = "wrongCounts"


class Storage(ABC):
    """get / set だけを持つストレージのインタフェース。"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """値が無ければ None"""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """値全体を置き換える"""


class JsonFileStorage(Storage):
    """
    ディレクトリ配下に <key>.json を 1 キー 1 ファイルで保存する。

    書き込みは一時ファイル + os.replace による丸ごと差し替え。
    読めないファイルは「値なし」として扱う（呼び出し側で初期化される）。
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        try:
            return AppConfig.read_json(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable stored value %s: %s", path, e)
            return None

    def set(self, key: str, value: Any) -> None:
        AppConfig.write_json(self._path(key), value)


class MemoryStorage(Storage):
    """
    プロセス内のストレージ。値は JSON 文字列で持つので、
    オブジェクトのキーが文字列になる点もファイル版と同じになる。
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)

    def raw(self, key: str) -> Optional[str]:
        """保存されている JSON 文字列そのもの（テスト・デバッグ用）"""
        return self._data.get(key)
