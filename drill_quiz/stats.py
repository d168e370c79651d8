"""
stats.py
======================

問題ごとの「出題回数 (showCounts)」と「誤答回数 (wrongCounts)」を管理する。

保存形式（ストレージの showCounts / wrongCounts キー）:

{
  "1": 3,
  "2": 0,
  ...
}

JSON のキーは文字列なので、カウンタは str(qid) をキーに持つ。

このモジュールの役割:
- 起動時に保存済みカウンタを現在の問題バンクに合わせて補正する
  (足りない id は 0、バンクに無い id は捨てる、壊れた値は 0)
- 出題・誤答のたびに +1 して、そのマッピング全体を保存する
- 出題ポリシーが使う重み (wrong+1)/(show+1) を計算する
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .models import QuestionId
from .question_bank import QuestionBank, id_key
from .storage import SHOW_COUNTS_KEY, WRONG_COUNTS_KEY, Storage

logger = logging.getLogger(__name__)

Counts = Dict[str, int]


class StatisticsStore:
    """
    showCounts / wrongCounts をラップして扱うクラス。
    値を書き換えるのはセッションコントローラだけ。
    """

    def __init__(self, storage: Storage):
        self.storage = storage
        self.show_count: Counts = {}
        self.wrong_count: Counts = {}

    # ------------------------------------------------------------------
    # 初期化・補正
    # ------------------------------------------------------------------
    def initialize(
        self,
        bank: QuestionBank,
        restored_show: Optional[Any] = None,
        restored_wrong: Optional[Any] = None,
    ) -> Tuple[Counts, Counts]:
        """
        保存済みカウンタを問題バンクに合わせて補正し、メモリ上に持つ。
        同じ入力で何度呼んでも結果は同じ。
        """
        self.show_count = reconcile(bank, restored_show, label=SHOW_COUNTS_KEY)
        self.wrong_count = reconcile(bank, restored_wrong, label=WRONG_COUNTS_KEY)
        return dict(self.show_count), dict(self.wrong_count)

    def load(self, bank: QuestionBank) -> Tuple[Counts, Counts]:
        """ストレージから読み込み、補正後の値を書き戻す。"""
        result = self.initialize(
            bank,
            self.storage.get(SHOW_COUNTS_KEY),
            self.storage.get(WRONG_COUNTS_KEY),
        )
        self.storage.set(SHOW_COUNTS_KEY, self.show_count)
        self.storage.set(WRONG_COUNTS_KEY, self.wrong_count)
        return result

    # ------------------------------------------------------------------
    # 更新
    # ------------------------------------------------------------------
    def record_shown(self, qid: QuestionId) -> int:
        """新しく出題したときに呼ぶ。showCounts を保存する。"""
        key = id_key(qid)
        self.show_count[key] = self.show_count.get(key, 0) + 1
        self.storage.set(SHOW_COUNTS_KEY, self.show_count)
        return self.show_count[key]

    def record_wrong(self, qid: QuestionId) -> int:
        """誤答したときに呼ぶ。wrongCounts を保存する。"""
        key = id_key(qid)
        self.wrong_count[key] = self.wrong_count.get(key, 0) + 1
        self.storage.set(WRONG_COUNTS_KEY, self.wrong_count)
        return self.wrong_count[key]

    # ------------------------------------------------------------------
    # 参照
    # ------------------------------------------------------------------
    def shows(self, qid: QuestionId) -> int:
        return self.show_count.get(id_key(qid), 0)

    def wrongs(self, qid: QuestionId) -> int:
        return self.wrong_count.get(id_key(qid), 0)

    def weight(self, qid: QuestionId) -> float:
        """
        (誤答回数 + 1) / (出題回数 + 1)

        +1 により 0 除算を避け、1 回の誤答がいつまでも支配しないようにする。
        """
        return (self.wrongs(qid) + 1) / (self.shows(qid) + 1)

    def rows(self, bank: QuestionBank) -> List[Dict[str, Any]]:
        """統計画面用に問題ごとの数値を並べる。"""
        return [
            {
                "id": q.id,
                "question": q.prompt,
                "shown": self.shows(q.id),
                "wrong": self.wrongs(q.id),
                "weight": round(self.weight(q.id), 3),
            }
            for q in bank
        ]


# ----------------------------------------------------------------------
# ユーティリティ
# ----------------------------------------------------------------------
def reconcile(bank: QuestionBank, restored: Optional[Any], label: str = "counts") -> Counts:
    """
    保存済みのカウンタを現在のバンクの全 id に揃える。
    """
    if restored is not None and not isinstance(restored, dict):
        logger.warning("Discarding malformed %s (%s)", label, type(restored).__name__)
        restored = None

    source: Dict[str, Any] = {}
    if restored:
        source = {id_key(k): v for k, v in restored.items()}

    counts: Counts = {}
    for qid in bank.ids():
        key = id_key(qid)
        value = source.get(key, 0)
        if not _is_count(value):
            logger.warning("Resetting malformed %s[%s]=%r to 0", label, key, value)
            value = 0
        counts[key] = value

    dropped = set(source) - set(counts)
    if dropped:
        logger.info("Dropped %d stale ids from %s", len(dropped), label)

    return counts


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
