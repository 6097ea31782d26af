"""Tests for the JSONL history backend."""

import threading

import pytest

from kota.core.exceptions import PersistenceError
from kota.core.history import HistoryStore, HistoryTurn


def turn(content: str, role: str = "user") -> HistoryTurn:
    return HistoryTurn(role=role, content=content)


class TestHistoryTurn:
    def test_from_message_with_tool_calls(self):
        message = {
            "role": "assistant",
            "content": None,
            "tool_calls": [
                {"id": "c1", "function": {"name": "read_file", "arguments": "{}"}}
            ],
        }

        result = HistoryTurn.from_message(message)

        assert result.content == ""
        assert result.tool_calls == [
            {
                "id": "c1",
                "type": "function",
                "function": {"name": "read_file", "arguments": "{}"},
            }
        ]

    def test_to_message_roundtrip_for_tool_result(self):
        message = {"role": "tool", "content": "{}", "tool_call_id": "c1"}

        assert HistoryTurn.from_message(message).to_message() == message

    def test_user_message_omits_tool_fields(self):
        assert turn("hi").to_message() == {"role": "user", "content": "hi"}


class TestSessions:
    def test_create_or_open_is_idempotent(self, history_store):
        first = history_store.create_or_open("s1")
        second = history_store.create_or_open("s1")

        assert first == second
        assert history_store.list() == ["s1"]

    def test_layout(self, history_store):
        history_store.create_or_open("s1")

        assert (history_store.sessions_path / "session-s1.jsonl").exists()
        assert history_store.index_path.exists()

    def test_invalid_id_rejected(self, history_store):
        with pytest.raises(PersistenceError):
            history_store.create_or_open("../escape")

    def test_list_sessions_most_recent_first(self, history_store):
        history_store.append("old", turn("a"))
        history_store.append("new", turn("b"))
        history_store.append("old", turn("c"))

        assert history_store.list() == ["old", "new"]

    def test_metadata_tracks_title_and_count(self, history_store):
        history_store.append("s1", turn("x" * 60))
        history_store.append("s1", turn("reply", role="assistant"))

        session = history_store.get_session("s1")

        assert session.message_count == 2
        assert session.title == "x" * 50 + "..."

    def test_title_comes_from_first_user_turn(self, history_store):
        history_store.append("s1", turn("system text", role="system"))
        history_store.append("s1", turn("question"))

        assert history_store.get_session("s1").title == "question"

    def test_delete(self, history_store):
        history_store.append("s1", turn("a"))
        history_store.append("s2", turn("b"))

        assert history_store.delete("s1") is True

        assert history_store.list() == ["s2"]
        assert history_store.load("s1") == []
        assert not history_store.exists("s1")

    def test_delete_unknown(self, history_store):
        assert history_store.delete("nope") is False


class TestAppendLoad:
    def test_load_unknown_session_is_empty(self, history_store):
        assert history_store.load("missing") == []

    def test_turns_load_in_order(self, history_store):
        for i in range(5):
            history_store.append("s1", turn(f"m{i}"))

        assert [t.content for t in history_store.load("s1")] == [
            "m0",
            "m1",
            "m2",
            "m3",
            "m4",
        ]

    def test_get_messages_limits_to_recent(self, history_store):
        for i in range(5):
            history_store.append("s1", turn(f"m{i}"))

        recent = history_store.get_messages("s1", max_history=2)

        assert [t.content for t in recent] == ["m3", "m4"]

    def test_survives_new_store_instance(self, history_store):
        history_store.append("s1", turn("persisted"))

        reopened = HistoryStore(history_store.base_path)

        assert [t.content for t in reopened.load("s1")] == ["persisted"]

    def test_no_temp_index_left_behind(self, history_store):
        history_store.append("s1", turn("a"))

        assert not list(history_store.base_path.glob("*.tmp"))


class TestTornTail:
    def write_torn_tail(self, store: HistoryStore, session_id: str) -> None:
        path = store.sessions_path / f"session-{session_id}.jsonl"
        with open(path, "ab") as f:
            f.write(b'{"role": "user", "content": "half wri')

    def test_torn_tail_ignored_on_load(self, history_store):
        history_store.append("s1", turn("complete"))
        self.write_torn_tail(history_store, "s1")

        assert [t.content for t in history_store.load("s1")] == ["complete"]

    def test_append_after_torn_tail_recovers(self, history_store):
        history_store.append("s1", turn("first"))
        self.write_torn_tail(history_store, "s1")

        history_store.append("s1", turn("second"))

        assert [t.content for t in history_store.load("s1")] == ["first", "second"]
        path = history_store.sessions_path / "session-s1.jsonl"
        assert b"half wri" not in path.read_bytes()

    def test_torn_only_line(self, history_store):
        history_store.create_or_open("s1")
        self.write_torn_tail(history_store, "s1")

        assert history_store.load("s1") == []

        history_store.append("s1", turn("fresh"))
        assert [t.content for t in history_store.load("s1")] == ["fresh"]


class TestConcurrency:
    def test_parallel_appends_to_one_session(self, history_store):
        def writer(n: int) -> None:
            for i in range(10):
                history_store.append("shared", turn(f"{n}-{i}"))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        turns = history_store.load("shared")
        assert len(turns) == 40
        assert history_store.get_session("shared").message_count == 40
        for n in range(4):
            mine = [t.content for t in turns if t.content.startswith(f"{n}-")]
            assert mine == [f"{n}-{i}" for i in range(10)]

    def test_parallel_sessions(self, history_store):
        def writer(session_id: str) -> None:
            for i in range(5):
                history_store.append(session_id, turn(str(i)))

        threads = [
            threading.Thread(target=writer, args=(f"s{n}",)) for n in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(history_store.list()) == ["s0", "s1", "s2", "s3"]
        for n in range(4):
            assert len(history_store.load(f"s{n}")) == 5
