"""
history.py
=====================================

このセッションで表示した問題の履歴と、いま見ている位置（カーソル）を管理する。

- 履歴は「初めて表示した順」に末尾へ追加されるだけ（並べ替え・削除なし）
- カーソルを前後に動かすことで、新しい問題を引かずに見直しができる
- cursor == -1 は「まだ何も表示していない」状態

保存形式は models.Snapshot を参照。
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import Question, Snapshot
from .question_bank import QuestionBank

logger = logging.getLogger(__name__)


class SessionHistory:
    """
    表示済み問題の列とカーソル。
    """

    def __init__(self, questions: Optional[List[Question]] = None, cursor: int = -1):
        self.questions: List[Question] = list(questions or [])
        self.cursor = cursor

    def __len__(self) -> int:
        return len(self.questions)

    # ---------------------------------------------------------
    # 状態
    # ---------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.questions or self.cursor < 0

    def current(self) -> Optional[Question]:
        if self.is_empty:
            return None
        return self.questions[self.cursor]

    def has_next(self) -> bool:
        """カーソルより後ろに、すでに表示済みの問題があるか"""
        return self.cursor < len(self.questions) - 1

    def can_retreat(self) -> bool:
        return self.cursor > 0

    # ---------------------------------------------------------
    # 移動
    # ---------------------------------------------------------
    def step_forward(self) -> Question:
        if not self.has_next():
            raise IndexError("no history entry after the cursor")
        self.cursor += 1
        return self.questions[self.cursor]

    def step_back(self) -> Question:
        if not self.can_retreat():
            raise IndexError("already at the first history entry")
        self.cursor -= 1
        return self.questions[self.cursor]

    def append(self, question: Question) -> Question:
        """新しい問題を末尾に追加し、カーソルを末尾へ"""
        self.questions.append(question)
        self.cursor = len(self.questions) - 1
        return question

    # ---------------------------------------------------------
    # 保存 / 復元
    # ---------------------------------------------------------
    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            history_ids=[q.id for q in self.questions],
            current_index=self.cursor,
        )

    @classmethod
    def restore(
        cls, snapshot: Optional[Snapshot], bank: QuestionBank
    ) -> Optional["SessionHistory"]:
        """
        保存済みスナップショットを問題オブジェクトに解決する。

        次の場合は None（呼び出し側で新規開始する）:
        - スナップショットが無い・空
        - バンクに存在しない id が含まれる
        - currentIndex が履歴の範囲外
        """
        if snapshot is None or not snapshot.history_ids:
            return None

        questions: List[Question] = []
        for qid in snapshot.history_ids:
            q = bank.get(qid)
            if q is None:
                logger.warning("Snapshot rejected: unknown question id %r", qid)
                return None
            questions.append(q)

        if not 0 <= snapshot.current_index < len(questions):
            logger.warning(
                "Snapshot rejected: index %d out of range for %d entries",
                snapshot.current_index,
                len(questions),
            )
            return None

        return cls(questions, snapshot.current_index)
