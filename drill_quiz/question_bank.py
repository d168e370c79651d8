"""
question_bank.py
===========================

問題バンクを読み込み、id 検索のための QuestionBank を提供するモジュール。

対応フォーマット:
- JSON  : 問題オブジェクトの配列（data/merged_questions.json）
- JSONL : 1 行 1 問（拡張子 .jsonl）

方針:
- 壊れた問題レコードは警告を出して skip
- ファイルが無い・全体が読めない・有効な問題が 0 件 → 致命的エラー
- 1 セッションにつき 1 回だけ読み込む（リトライはしない）
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .models import Question, QuestionId

logger = logging.getLogger(__name__)


class QuestionBankError(Exception):
    """問題バンクの取得・解析に失敗した（セッションを開始できない）。"""


class EmptyQuestionBankError(QuestionBankError):
    """有効な問題が 1 問もない。"""


# ----------------------------------------------------------------------
#  QuestionBank
# ----------------------------------------------------------------------
class QuestionBank:
    """
    読み込み済みの問題一覧（順序付き・不変）。

    JSON のオブジェクトキーは文字列になるため、
    get() は 1 と "1" のどちらでも同じ問題を返す。
    """

    def __init__(self, questions: Iterable[Question]):
        self._questions: List[Question] = []
        self._by_key: Dict[str, Question] = {}

        for q in questions:
            key = id_key(q.id)
            if key in self._by_key:
                logger.warning("Duplicate question id %r skipped", q.id)
                continue
            self._by_key[key] = q
            self._questions.append(q)

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __contains__(self, qid: object) -> bool:
        return isinstance(qid, (int, str)) and id_key(qid) in self._by_key

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    def ids(self) -> List[QuestionId]:
        return [q.id for q in self._questions]

    def get(self, qid: QuestionId) -> Optional[Question]:
        """id で 1問取得"""
        return self._by_key.get(id_key(qid))


def id_key(qid: QuestionId) -> str:
    """カウンタ保存・照合に使う正規化済み id"""
    return str(qid)


# ----------------------------------------------------------------------
#  読み込み
# ----------------------------------------------------------------------
def load_question_bank(path: Path) -> QuestionBank:
    """
    問題バンクファイルを読み込んで QuestionBank を返す。

    - .jsonl なら 1 行ずつ、それ以外は JSON 配列として読む
    - 壊れたレコードは警告を出してスキップ
    """
    path = Path(path)
    if not path.exists():
        raise QuestionBankError(f"問題バンクが見つかりません: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise QuestionBankError(f"問題バンクを読み込めません: {path}: {e}") from e

    if path.suffix == ".jsonl":
        records = list(_iter_jsonl(text))
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise QuestionBankError(f"問題バンクの JSON が不正です: {path}: {e}") from e
        if not isinstance(data, list):
            raise QuestionBankError(f"問題バンクは配列である必要があります: {path}")
        records = data

    bank = QuestionBank(_parse_records(records))
    if len(bank) == 0:
        raise EmptyQuestionBankError(f"問題バンクが空です: {path}")

    logger.info("Loaded %d questions from %s", len(bank), path)
    return bank


def _iter_jsonl(text: str) -> Iterator[Any]:
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError:
            # 壊れた行は無視する
            logger.warning("Skipping unparseable line %d", lineno)


def _parse_records(records: Iterable[Any]) -> Iterator[Question]:
    for i, data in enumerate(records):
        try:
            yield Question.from_dict(data)
        except ValueError as e:
            logger.warning("Skipping malformed question record #%d: %s", i, e)
