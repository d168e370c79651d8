"""
models.py
======================

クイズで扱うデータモデル。

- Question     : 問題バンクの 1 問（不変）
- Snapshot     : 「いまどこを見ているか」の永続化用レコード
- AnswerResult : 解答送信 1 回分の結果

問題バンク（JSON）の 1 レコードの形:

{
  "id": 1,
  "question": "問題文",
  "options": {"A": "選択肢A", "B": "選択肢B", "C": "選択肢C", "D": "選択肢D"},
  "answer": "B"
}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

QuestionId = Union[int, str]


# ----------------------------------------------------------------------
#  Question
# ----------------------------------------------------------------------
@dataclass(frozen=True, eq=False)
class Question:
    """
    多肢選択問題 1 問。

    options は「選択肢キー → 選択肢テキスト」。
    dict の挿入順（= ファイル上の順）がそのまま表示順になる。
    生成時に読み取り専用の MappingProxyType へ包み直す。
    """

    id: QuestionId
    prompt: str
    options: Mapping[str, str]
    correct_key: str
    explanation: str = ""

    def __post_init__(self):
        if self.id is None or self.id == "" or isinstance(self.id, bool):
            raise ValueError("question id is required")
        if not self.options:
            raise ValueError(f"question {self.id!r} has no options")
        if self.correct_key not in self.options:
            raise ValueError(
                f"question {self.id!r}: correct key {self.correct_key!r} "
                f"is not one of {list(self.options)}"
            )
        # 呼び出し元の dict とは切り離す
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        """
        問題バンクの dict から Question を作る。

        元の JSON のキー (question / answer) と
        こちら側の名前 (prompt / correct_key) の両方を受け付ける。
        """
        if not isinstance(data, dict):
            raise ValueError("question record must be an object")

        qid = data.get("id")
        if not isinstance(qid, (int, str)):
            raise ValueError(f"invalid question id: {qid!r}")

        raw_options = data.get("options")
        if not isinstance(raw_options, dict):
            raise ValueError(f"question {qid!r}: options must be an object")
        options = {str(k): str(v) for k, v in raw_options.items()}

        prompt = data.get("prompt", data.get("question", ""))
        correct = data.get("correct_key", data.get("answer"))

        return cls(
            id=qid,
            prompt=str(prompt),
            options=options,
            correct_key=str(correct) if correct is not None else "",
            explanation=str(data.get("explanation", "") or ""),
        )

    def label(self) -> str:
        """画面表示用の見出し（例: "12. 問題文"）"""
        return f"{self.id}. {self.prompt}"

    def option_keys(self) -> List[str]:
        return list(self.options.keys())


# ----------------------------------------------------------------------
#  Snapshot
# ----------------------------------------------------------------------
@dataclass
class Snapshot:
    """
    永続化される閲覧状態。

    保存形式: {"historyIds": [qid, ...], "currentIndex": n}
    """

    history_ids: List[QuestionId] = field(default_factory=list)
    current_index: int = -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "historyIds": list(self.history_ids),
            "currentIndex": self.current_index,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Snapshot"]:
        """
        壊れた保存データは例外にせず None を返す。
        """
        if not isinstance(data, dict):
            return None

        ids = data.get("historyIds")
        index = data.get("currentIndex", data.get("cursorIndex"))

        if not isinstance(ids, list):
            return None
        if not all(isinstance(i, (int, str)) and not isinstance(i, bool) for i in ids):
            return None
        if not isinstance(index, int) or isinstance(index, bool):
            return None

        return cls(history_ids=list(ids), current_index=index)


# ----------------------------------------------------------------------
#  AnswerResult
# ----------------------------------------------------------------------
NO_SELECTION = "no_selection"
INVALID_OPTION = "invalid_option"
ALREADY_ANSWERED = "already_answered"


@dataclass
class AnswerResult:
    """解答送信の結果。accepted=False のときは状態は何も変わっていない。"""

    accepted: bool
    question_id: Optional[QuestionId] = None
    selected_key: Optional[str] = None
    correct_key: Optional[str] = None
    is_correct: Optional[bool] = None
    reason: Optional[str] = None
    correct_text: str = ""

    def message(self) -> str:
        if not self.accepted:
            if self.reason == NO_SELECTION:
                return "先に答えを選んでください。"
            if self.reason == ALREADY_ANSWERED:
                return "この問題はすでに解答済みです。"
            return "選択肢が正しくありません。"
        if self.is_correct:
            return "正解です！"
        return f"不正解です。正解: {self.correct_key}. {self.correct_text}"
