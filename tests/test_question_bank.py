import json
from pathlib import Path

import pytest

from drill_quiz.models import AnswerResult, Question
from drill_quiz.question_bank import (
    EmptyQuestionBankError,
    QuestionBank,
    QuestionBankError,
    load_question_bank,
)

SAMPLE_BANK = Path(__file__).resolve().parent.parent / "data" / "merged_questions.json"


def _record(qid, answer="A", **extra):
    data = {
        "id": qid,
        "question": f"Question {qid}",
        "options": {"A": "alpha", "B": "beta"},
        "answer": answer,
    }
    data.update(extra)
    return data


def _write(tmp_path, records, name="bank.json"):
    path = tmp_path / name
    path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
    return path


class TestQuestion:

    def test_from_bank_record(self):
        q = Question.from_dict(
            {"id": 7, "question": "Pick one", "options": {"B": "b", "A": "a"}, "answer": "A"}
        )

        assert q.id == 7
        assert q.prompt == "Pick one"
        assert q.correct_key == "A"
        assert q.option_keys() == ["B", "A"]
        assert q.label() == "7. Pick one"

    def test_from_python_names(self):
        q = Question.from_dict(
            {"id": "q1", "prompt": "P", "options": {"x": "1"}, "correct_key": "x"}
        )

        assert q.prompt == "P"
        assert q.correct_key == "x"

    @pytest.mark.parametrize(
        "data",
        [
            {"id": 1, "question": "q", "options": {"A": "a"}, "answer": "B"},
            {"id": 1, "question": "q", "options": {}, "answer": "A"},
            {"id": 1, "question": "q", "options": ["a", "b"], "answer": "A"},
            {"question": "q", "options": {"A": "a"}, "answer": "A"},
            {"id": True, "question": "q", "options": {"A": "a"}, "answer": "A"},
            "not a record",
        ],
    )
    def test_invalid_records(self, data):
        with pytest.raises(ValueError):
            Question.from_dict(data)

    def test_answer_messages(self):
        wrong = AnswerResult(
            accepted=True, question_id=1, selected_key="B",
            correct_key="A", is_correct=False, correct_text="alpha",
        )

        assert wrong.message() == "不正解です。正解: A. alpha"


class TestLoadQuestionBank:

    def test_loads_json_array_in_order(self, tmp_path):
        path = _write(tmp_path, [_record(3), _record(1), _record(2, answer="B")])

        bank = load_question_bank(path)

        assert bank.ids() == [3, 1, 2]
        assert bank.get(2).correct_key == "B"
        assert bank.get("2") is bank.get(2)
        assert 1 in bank and "1" in bank and 9 not in bank

    def test_malformed_records_are_skipped(self, tmp_path):
        path = _write(tmp_path, [_record(1), _record(2, answer="Z"), "junk", _record(3)])

        assert load_question_bank(path).ids() == [1, 3]

    def test_duplicate_ids_keep_first(self, tmp_path):
        path = _write(tmp_path, [_record(1), _record(1, answer="B")])

        bank = load_question_bank(path)

        assert len(bank) == 1
        assert bank.get(1).correct_key == "A"

    def test_jsonl_with_broken_line(self, tmp_path):
        path = tmp_path / "bank.jsonl"
        lines = [json.dumps(_record(1)), "{broken", "", json.dumps(_record(2))]
        path.write_text("\n".join(lines), encoding="utf-8")

        assert load_question_bank(path).ids() == [1, 2]

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(QuestionBankError):
            load_question_bank(tmp_path / "nope.json")

    def test_invalid_json_is_fatal(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(QuestionBankError):
            load_question_bank(path)

    def test_top_level_must_be_list(self, tmp_path):
        path = _write(tmp_path, {"questions": []})

        with pytest.raises(QuestionBankError):
            load_question_bank(path)

    @pytest.mark.parametrize("records", [[], ["junk", {"id": 1}]])
    def test_empty_bank_is_fatal(self, tmp_path, records):
        path = _write(tmp_path, records)

        with pytest.raises(EmptyQuestionBankError):
            load_question_bank(path)

    def test_bundled_sample_bank(self):
        bank = load_question_bank(SAMPLE_BANK)

        assert len(bank) == 4
        assert all(q.correct_key in q.options for q in bank)


def test_bank_from_questions(make_question):
    bank = QuestionBank([make_question(1), make_question(2)])

    assert len(bank) == 2
    assert [q.id for q in bank] == [1, 2]
    assert bank.get(5) is None


def test_options_are_read_only_and_detached():
    source = {"A": "alpha", "B": "beta"}
    q = Question(id=1, prompt="P", options=source, correct_key="A")

    with pytest.raises(TypeError):
        q.options["A"] = "changed"

    source["A"] = "changed"
    source["Z"] = "zeta"

    assert q.options["A"] == "alpha"
    assert q.option_keys() == ["A", "B"]
