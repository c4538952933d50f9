"""Tests for appupdater.core.state."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from appupdater.core.state import (
    LAST_CHECKED_KEY, LAST_DISMISSED_KEY,
    JsonCheckStateStore, MemoryCheckStateStore, as_utc,
)

from conftest import NOW


class TestAsUtc:
    def test_naive_gets_utc(self):
        assert as_utc(datetime(2026, 3, 1, 12, 0)) == NOW

    def test_aware_unchanged(self):
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2026, 3, 1, 14, 0, tzinfo=plus_two)
        assert as_utc(moment) is moment
        assert as_utc(moment) == NOW


class TestMemoryStore:
    def test_empty_state(self, store):
        state = store.load()
        assert state.last_checked_at is None
        assert state.last_dismissed_at is None

    def test_marks_are_iso_strings(self, store):
        store.mark_checked(NOW)
        store.mark_dismissed(NOW - timedelta(hours=1))
        assert store.get(LAST_CHECKED_KEY) == "2026-03-01T12:00:00+00:00"
        assert store.get(LAST_DISMISSED_KEY) == "2026-03-01T11:00:00+00:00"

    def test_round_trip(self, store):
        store.mark_checked(NOW)
        assert store.load().last_checked_at == NOW

    def test_naive_stored_value_read_as_utc(self):
        store = MemoryCheckStateStore({LAST_CHECKED_KEY: "2026-03-01T12:00:00"})
        assert store.load().last_checked_at == NOW

    def test_unparseable_value_ignored(self, caplog):
        store = MemoryCheckStateStore({LAST_DISMISSED_KEY: "yesterday"})
        assert store.load().last_dismissed_at is None
        assert "unparseable" in caplog.text


class TestJsonStore:
    def test_missing_file(self, tmp_path):
        store = JsonCheckStateStore(str(tmp_path / "state.json"))
        assert store.load().last_checked_at is None

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "nested" / "state.json")
        JsonCheckStateStore(path).mark_checked(NOW)
        JsonCheckStateStore(path).mark_dismissed(NOW)

        state = JsonCheckStateStore(path).load()
        assert state.last_checked_at == NOW
        assert state.last_dismissed_at == NOW
        with open(path, encoding='utf-8') as f:
            assert set(json.load(f)) == {LAST_CHECKED_KEY, LAST_DISMISSED_KEY}

    def test_keeps_unrelated_keys(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"other": "value"}), encoding='utf-8')
        JsonCheckStateStore(str(path)).mark_checked(NOW)
        assert json.loads(path.read_text(encoding='utf-8'))["other"] == "value"

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2, 3]"],
        ids=["corrupt", "not-an-object"],
    )
    def test_bad_file_treated_as_empty(self, tmp_path, content):
        path = tmp_path / "state.json"
        path.write_text(content, encoding='utf-8')
        store = JsonCheckStateStore(str(path))
        assert store.load().last_checked_at is None

        store.mark_checked(NOW)
        assert store.load().last_checked_at == NOW

    def test_non_string_value_ignored(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({LAST_CHECKED_KEY: 12345}), encoding='utf-8')
        assert JsonCheckStateStore(str(path)).load().last_checked_at is None

    def test_write_error_propagates(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding='utf-8')
        store = JsonCheckStateStore(str(blocker / "state.json"))
        with pytest.raises(OSError):
            store.mark_checked(NOW)
