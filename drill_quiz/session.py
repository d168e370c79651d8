"""
session.py
======================

クイズ 1 セッション分の状態を持ち、外部からの 3 つの操作を処理するコントローラ。

- on_advance_requested()  : 次へ
- on_retreat_requested()  : 前へ
- on_answer_submitted(key): 解答送信

画面側 (renderer) へは display_question() だけを呼ぶ。
統計・履歴・保存はすべてこのオブジェクトが所有し、グローバル変数は使わない。
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

from .history import SessionHistory
from .models import (
    ALREADY_ANSWERED,
    INVALID_OPTION,
    NO_SELECTION,
    AnswerResult,
    Question,
)
from .persistence import SnapshotStore
from .question_bank import EmptyQuestionBankError, QuestionBank
from .selection import get_policy
from .stats import StatisticsStore
from .storage import Storage

logger = logging.getLogger(__name__)


class Renderer(ABC):
    """画面側が実装するインタフェース。"""

    @abstractmethod
    def display_question(self, question: Question, *, can_retreat: bool) -> None:
        """問題を 1 問表示する。can_retreat が False なら「前へ」を出さない。"""


class QuizSession:
    """
    セッションコントローラ。

    start() を 1 回呼んでから各操作を使う。
    """

    def __init__(
        self,
        bank: QuestionBank,
        storage: Storage,
        renderer: Renderer,
        rng: Optional[random.Random] = None,
        policy: str = "weighted",
    ):
        if len(bank) == 0:
            raise EmptyQuestionBankError("問題バンクが空です。")

        self.bank = bank
        self.renderer = renderer
        self.rng = rng if rng is not None else random.Random()
        self.select = get_policy(policy)

        self.stats = StatisticsStore(storage)
        self.snapshots = SnapshotStore(storage)
        self.history = SessionHistory()

        self.answered = False
        self.last_result: Optional[AnswerResult] = None

    # ------------------------------------------------------------------
    # 起動
    # ------------------------------------------------------------------
    def start(self) -> Question:
        """
        カウンタを読み込み、保存済みの閲覧位置を復元する。
        復元できなければ新しい問題から始める。
        """
        self.stats.load(self.bank)

        restored = SessionHistory.restore(self.snapshots.load(), self.bank)
        if restored is None:
            logger.info("Starting a fresh session")
            return self.advance()

        # 復元した表示は「新しい出題」ではないので showCounts は増やさない
        self.history = restored
        logger.info(
            "Restored session at %d/%d", restored.cursor + 1, len(restored)
        )
        self._display()
        return self.current_question

    # ------------------------------------------------------------------
    # 外部からの操作
    # ------------------------------------------------------------------
    def on_advance_requested(self) -> Question:
        return self.advance()

    def on_retreat_requested(self) -> bool:
        return self.retreat()

    def on_answer_submitted(self, selected_key: Optional[str]) -> AnswerResult:
        return self.submit_answer(selected_key)

    # ------------------------------------------------------------------
    # 次へ / 前へ
    # ------------------------------------------------------------------
    def advance(self) -> Question:
        if self.history.has_next():
            # 見直し中: 表示済みの次の問題へ進むだけ
            question = self.history.step_forward()
            logger.debug("Moved forward to %r", question.id)
        else:
            question = self.select(self.bank, self.stats, self.rng)
            self.stats.record_shown(question.id)
            self.history.append(question)
            logger.debug(
                "Selected %r (weight %.3f)", question.id, self.stats.weight(question.id)
            )

        self._display()
        self.snapshots.save(self.history)
        return question

    def retreat(self) -> bool:
        """先頭にいるときは何もしない（False を返す）"""
        if not self.history.can_retreat():
            return False

        self.history.step_back()
        self._display()
        self.snapshots.save(self.history)
        return True

    # ------------------------------------------------------------------
    # 解答
    # ------------------------------------------------------------------
    def submit_answer(self, selected_key: Optional[str]) -> AnswerResult:
        question = self.current_question
        if question is None:
            raise RuntimeError("session has not been started")

        if selected_key is None or selected_key == "":
            return AnswerResult(accepted=False, question_id=question.id, reason=NO_SELECTION)

        if selected_key not in question.options:
            logger.warning(
                "Rejected option %r for question %r", selected_key, question.id
            )
            return AnswerResult(
                accepted=False,
                question_id=question.id,
                selected_key=selected_key,
                reason=INVALID_OPTION,
            )

        if self.answered:
            return AnswerResult(
                accepted=False,
                question_id=question.id,
                selected_key=selected_key,
                reason=ALREADY_ANSWERED,
            )

        is_correct = selected_key == question.correct_key
        if not is_correct:
            self.stats.record_wrong(question.id)

        self.answered = True
        self.last_result = AnswerResult(
            accepted=True,
            question_id=question.id,
            selected_key=selected_key,
            correct_key=question.correct_key,
            is_correct=is_correct,
            correct_text=question.options[question.correct_key],
        )
        self.snapshots.save(self.history)
        logger.info(
            "Answered %r with %r (%s)",
            question.id,
            selected_key,
            "correct" if is_correct else "wrong",
        )
        return self.last_result

    # ------------------------------------------------------------------
    # 参照
    # ------------------------------------------------------------------
    @property
    def current_question(self) -> Optional[Question]:
        return self.history.current()

    @property
    def can_retreat(self) -> bool:
        return self.history.can_retreat()

    @property
    def position(self) -> int:
        """1 始まりの現在位置（未開始なら 0）"""
        return self.history.cursor + 1

    def _display(self) -> None:
        # 表示が変わったら再び解答できる
        self.answered = False
        self.last_result = None
        self.renderer.display_question(
            self.history.current(), can_retreat=self.history.can_retreat()
        )
