"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
問題バンクのパス、状態保存ディレクトリ、出題ポリシー、ログ出力先など
すべてこのクラスを通じて取得する。

設定の優先順位:
1. 環境変数 (QUIZ_BANK_PATH / QUIZ_STORAGE_DIR)
2. ルートの config.toml
3. AppConfig のデフォルト値
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT_DIR / "data"
CONFIG_PATH = ROOT_DIR / "config.toml"

POLICY_NAMES = ("weighted", "least_shown")


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - 問題バンク / 状態保存先のパス
    - 出題ポリシー ("weighted" または "least_shown")
    - ログ設定
    """

    # ---------- アプリ ----------
    app_name: str = "Drill-Quiz"

    # ---------- ファイルパス ----------
    question_bank_path: Path = DATA_DIR / "merged_questions.json"
    storage_dir: Path = ROOT_DIR / ".quiz_state"

    # ---------- 出題 ----------
    selection_policy: str = "weighted"

    # ---------- ログ ----------
    log_dir: Path = ROOT_DIR / "log"
    log_file: str = "drill_quiz.log"
    log_level: str = "INFO"

    def __post_init__(self):
        self.question_bank_path = Path(self.question_bank_path)
        self.storage_dir = Path(self.storage_dir)
        self.log_dir = Path(self.log_dir)

        if self.selection_policy not in POLICY_NAMES:
            logger.warning(
                "Unknown selection policy %r, falling back to 'weighted'",
                self.selection_policy,
            )
            self.selection_policy = "weighted"

    # ============================================================
    # 読み込み
    # ============================================================

    @classmethod
    def from_toml(cls, path: Optional[Path] = None) -> "AppConfig":
        """
        config.toml を読み込んで AppConfig を作る。
        ファイルが無い・壊れている場合はデフォルト値で動く。
        """
        path = Path(path) if path is not None else CONFIG_PATH
        raw: Dict[str, Any] = {}

        if path.exists():
            try:
                raw = toml.load(path)
            except (ValueError, OSError) as e:
                logger.warning("Failed to read %s, using defaults: %s", path, e)
                raw = {}

        kwargs: Dict[str, Any] = {}

        app = _section(raw, "app")
        if isinstance(app.get("name"), str):
            kwargs["app_name"] = app["name"]

        quiz = _section(raw, "quiz")
        if isinstance(quiz.get("bank_path"), str):
            kwargs["question_bank_path"] = _resolve(path.parent, quiz["bank_path"])
        if isinstance(quiz.get("policy"), str):
            kwargs["selection_policy"] = quiz["policy"]

        storage = _section(raw, "storage")
        if isinstance(storage.get("dir"), str):
            kwargs["storage_dir"] = _resolve(path.parent, storage["dir"])

        log = _section(raw, "logging")
        if isinstance(log.get("dir"), str):
            kwargs["log_dir"] = _resolve(path.parent, log["dir"])
        if isinstance(log.get("file"), str):
            kwargs["log_file"] = log["file"]
        if isinstance(log.get("level"), str):
            kwargs["log_level"] = log["level"].upper()

        # 環境変数が最優先
        env_bank = os.environ.get("QUIZ_BANK_PATH")
        if env_bank:
            kwargs["question_bank_path"] = Path(env_bank)
        env_storage = os.environ.get("QUIZ_STORAGE_DIR")
        if env_storage:
            kwargs["storage_dir"] = Path(env_storage)

        return cls(**kwargs)

    # ============================================================
    # JSON 読み取りユーティリティ
    # ============================================================

    @staticmethod
    def read_json(path: Path):
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def write_json(path: Path, data: Any) -> None:
        """
        一時ファイルに書いてから os.replace で差し替える。
        途中までしか書かれていないファイルが残ることはない。
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


# ------------------------------------------------------------
# 内部関数
# ------------------------------------------------------------

def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name)
    return value if isinstance(value, dict) else {}


def _resolve(base: Path, value: str) -> Path:
    p = Path(value)
    return p if p.is_absolute() else base / p
