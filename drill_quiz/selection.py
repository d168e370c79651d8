"""
selection.py
======================

次に出す「新しい問題」を 1 問決める出題ポリシー。

- weighted_priority : weight = (誤答+1)/(出題+1) が最大の問題から選ぶ（標準）
- least_shown       : 出題回数が最小の問題から選ぶ

どちらも候補が複数あれば乱数で一様に選ぶ。
先頭固定で選ぶと後ろの候補がいつまでも出ないため、必ずランダムにする。
乱数源は引数で受け取る（テストでは seed 付き random.Random を渡す）。

ここでは選ぶだけで、出題回数の加算や履歴への追加はセッション側で行う。
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List

from .models import Question
from .question_bank import EmptyQuestionBankError, QuestionBank
from .stats import StatisticsStore

Policy = Callable[[QuestionBank, StatisticsStore, random.Random], Question]


def weighted_priority(
    bank: QuestionBank, stats: StatisticsStore, rng: random.Random
) -> Question:
    """
    重み最大の問題を選ぶ。

    例: wrong={1: 3, 2: 0}, show={1: 1, 2: 1}
        → weight(1)=4/2=2.0, weight(2)=1/2=0.5 → 必ず 1
    """
    questions = _require_questions(bank)

    # 同じ有理数は IEEE 除算でも同じ float になるので == で比較できる
    weights = [stats.weight(q.id) for q in questions]
    max_weight = max(weights)
    candidates = [q for q, w in zip(questions, weights) if w == max_weight]

    return rng.choice(candidates)


def least_shown(
    bank: QuestionBank, stats: StatisticsStore, rng: random.Random
) -> Question:
    """出題回数が最小の問題から一様に選ぶ。"""
    questions = _require_questions(bank)

    min_total = min(stats.shows(q.id) for q in questions)
    candidates = [q for q in questions if stats.shows(q.id) == min_total]

    return rng.choice(candidates)


POLICIES: Dict[str, Policy] = {
    "weighted": weighted_priority,
    "least_shown": least_shown,
}


def get_policy(name: str) -> Policy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(
            f"unknown selection policy {name!r} (choose from {sorted(POLICIES)})"
        ) from None


def _require_questions(bank: QuestionBank) -> List[Question]:
    questions = bank.questions
    if not questions:
        raise EmptyQuestionBankError("問題バンクが空のため出題できません。")
    return questions
