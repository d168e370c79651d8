import pytest

from drill_quiz.history import SessionHistory
from drill_quiz.models import Snapshot
from drill_quiz.persistence import SnapshotStore
from drill_quiz.storage import STATE_KEY, JsonFileStorage, MemoryStorage, Storage


class TestJsonFileStorage:

    def test_round_trip(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "state")

        storage.set("showCounts", {"1": 2, "2": 0})

        assert storage.get("showCounts") == {"1": 2, "2": 0}
        assert (tmp_path / "state" / "showCounts.json").exists()

    def test_missing_key_reads_as_none(self, tmp_path):
        assert JsonFileStorage(tmp_path).get("quizState") is None

    def test_set_replaces_whole_value_without_leftovers(self, tmp_path):
        storage = JsonFileStorage(tmp_path)

        storage.set("wrongCounts", {"1": 1, "2": 5})
        storage.set("wrongCounts", {"1": 2})

        assert storage.get("wrongCounts") == {"1": 2}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["wrongCounts.json"]

    def test_corrupt_file_reads_as_none(self, tmp_path):
        (tmp_path / "quizState.json").write_text("{not json", encoding="utf-8")

        assert JsonFileStorage(tmp_path).get("quizState") is None


class TestMemoryStorage:

    def test_values_go_through_json(self):
        storage = MemoryStorage()

        storage.set("showCounts", {1: 3})

        assert storage.get("showCounts") == {"1": 3}
        assert storage.raw("showCounts") == '{"1": 3}'

    def test_initial_values(self):
        storage = MemoryStorage({"quizState": {"historyIds": [1], "currentIndex": 0}})

        assert storage.get("quizState") == {"historyIds": [1], "currentIndex": 0}
        assert storage.get("other") is None


class TestSnapshotStore:

    def test_save_writes_single_state_record(self, bank):
        storage = MemoryStorage()
        history = SessionHistory([bank.get(1), bank.get(3)], cursor=1)

        SnapshotStore(storage).save(history)

        assert storage.get(STATE_KEY) == {"historyIds": [1, 3], "currentIndex": 1}

    def test_load_round_trip(self, bank):
        store = SnapshotStore(MemoryStorage())
        store.save(SessionHistory([bank.get(2)], cursor=0))

        assert store.load() == Snapshot(history_ids=[2], current_index=0)

    def test_missing_and_malformed_state(self):
        assert SnapshotStore(MemoryStorage()).load() is None

        for raw in (
            [1, 2],
            {"historyIds": "1,2", "currentIndex": 0},
            {"historyIds": [1], "currentIndex": "0"},
            {"historyIds": [1], "currentIndex": True},
            {"historyIds": [1, None], "currentIndex": 0},
        ):
            storage = MemoryStorage({STATE_KEY: raw})
            assert SnapshotStore(storage).load() is None

    def test_cursor_index_key_is_accepted(self):
        snapshot = Snapshot.from_dict({"historyIds": [4, 5], "cursorIndex": 1})

        assert snapshot == Snapshot(history_ids=[4, 5], current_index=1)


def test_storage_interface_is_abstract():
    with pytest.raises(TypeError):
        Storage()

    class GetOnly(Storage):
        def get(self, key):
            return None

    with pytest.raises(TypeError):
        GetOnly()
