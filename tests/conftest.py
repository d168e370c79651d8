import os
import random
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from drill_quiz.models import Question
from drill_quiz.question_bank import QuestionBank
from drill_quiz.session import QuizSession, Renderer
from drill_quiz.storage import MemoryStorage


def _make_question(qid, correct="A"):
    return Question(
        id=qid,
        prompt=f"Question {qid}",
        options={"A": "alpha", "B": "beta", "C": "gamma"},
        correct_key=correct,
    )


class RecordingRenderer(Renderer):
    """Keeps every display_question call for assertions."""

    def __init__(self):
        self.shown = []
        self.retreat_flags = []

    def display_question(self, question, *, can_retreat):
        self.shown.append(question)
        self.retreat_flags.append(can_retreat)


@pytest.fixture
def make_question():
    return _make_question


@pytest.fixture
def bank():
    return QuestionBank([_make_question(i) for i in (1, 2, 3)])


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def new_renderer():
    return RecordingRenderer


@pytest.fixture
def make_session(bank, storage, renderer):
    def _make(seed=0, policy="weighted", quiz_bank=None, quiz_renderer=None):
        return QuizSession(
            quiz_bank if quiz_bank is not None else bank,
            storage,
            quiz_renderer if quiz_renderer is not None else renderer,
            rng=random.Random(seed),
            policy=policy,
        )

    return _make
