"""
drill_quiz パッケージ
======================

このパッケージは、間違えた問題ほど再出題される復習クイズの内部ロジックを提供する。

主な役割:
- 設定管理（config）
- 問題バンクの読み込み（question_bank）
- 出題回数・誤答回数の管理（stats）
- 次の問題を決める出題ポリシー（selection）
- セッション内の履歴と前後移動（history）
- 閲覧状態の保存・復元（persistence, storage）
- 操作を受け付けるセッションコントローラ（session）
- Streamlit の UI コンポーネント（ui）

app.py は Streamlit の画面構成のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
ui は streamlit を import するため、ここでは読み込まない。
"""

from .config import AppConfig
from .history import SessionHistory
from .models import AnswerResult, Question, Snapshot
from .persistence import SnapshotStore
from .question_bank import (
    EmptyQuestionBankError,
    QuestionBank,
    QuestionBankError,
    load_question_bank,
)
from .selection import least_shown, weighted_priority
from .session import QuizSession, Renderer
from .stats import StatisticsStore
from .storage import JsonFileStorage, MemoryStorage, Storage

__all__ = [
    "AppConfig",
    "SessionHistory",
    "AnswerResult",
    "Question",
    "Snapshot",
    "SnapshotStore",
    "EmptyQuestionBankError",
    "QuestionBank",
    "QuestionBankError",
    "load_question_bank",
    "least_shown",
    "weighted_priority",
    "QuizSession",
    "Renderer",
    "StatisticsStore",
    "JsonFileStorage",
    "MemoryStorage",
    "Storage",
]
