"""
Unit tests for the Lead Runtime Store
Tests seeding, append-only journal, task toggles, reset and the journal view
"""
import pytest
from datetime import datetime, timezone

from helios.domain.models.conversation import ConversationEntry, Speaker
from helios.domain.services.runtime_store import (
    LeadRuntimeStore,
    build_initial_runtime,
)


NOW = datetime(2024, 5, 1, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(catalog):
    return LeadRuntimeStore(catalog, clock=lambda: NOW)


class TestInitialRuntime:
    """Tests for build_initial_runtime"""

    def test_seeded_conversation(self, lead_factory):
        """Runtime starts with one readiness entry"""
        lead = lead_factory("lead-9")
        runtime = build_initial_runtime(lead, NOW)

        assert len(runtime.conversation) == 1
        entry = runtime.conversation[0]
        assert entry.speaker == Speaker.SYSTEM
        assert entry.text == "Prepared to connect with Name lead-9 (Company lead-9)."
        assert entry.timestamp == NOW

    def test_notes_joined_from_lead(self, lead_factory):
        runtime = build_initial_runtime(lead_factory(), NOW)
        assert runtime.notes == "Expanding this year.\nContract ends in September."

    def test_tasks_objectives_then_preparation(self, lead_factory):
        """Objectives are open, preparation items are done"""
        runtime = build_initial_runtime(lead_factory("lead-1"), NOW)

        assert [(t.id, t.done) for t in runtime.tasks] == [
            ("lead-1-objective-0", False),
            ("lead-1-objective-1", False),
            ("lead-1-prep-0", True),
        ]
        assert runtime.tasks[0].label == "Confirm budget"

    def test_empty_wrap_summary_and_cursor(self, lead_factory):
        runtime = build_initial_runtime(lead_factory(), NOW)
        assert runtime.wrap_summary == ""
        assert runtime.script_cursor == 0


class TestGetOrCreate:
    """Tests for lazy creation"""

    def test_get_creates_once(self, store):
        first = store.get("lead-1")
        second = store.get("lead-1")
        assert first is second

    def test_unknown_lead_raises(self, store):
        with pytest.raises(KeyError):
            store.get("nobody")

    def test_initialize_all(self, store, catalog):
        store.initialize_all()
        assert set(store.snapshot()) == {lead.id for lead in catalog.list_leads()}


class TestAppendConversation:
    """Tests for the append-only journal"""

    def test_append_is_additive(self, store):
        before = list(store.get("lead-1").conversation)

        entry = ConversationEntry(id="x-1", speaker=Speaker.AGENT, text="Hello", timestamp=NOW)
        runtime = store.append_conversation("lead-1", [entry])

        assert runtime.conversation[:len(before)] == before
        assert runtime.conversation[-1] == entry

    def test_append_does_not_touch_other_leads(self, store):
        other = store.get("lead-2")
        store.log("lead-1", Speaker.SYSTEM, "note", "manual")
        assert store.get("lead-2") is other

    def test_log_ids_are_unique(self, store):
        for _ in range(5):
            store.log("lead-1", Speaker.AGENT, "same text", "manual")

        ids = [entry.id for entry in store.get("lead-1").conversation]
        assert len(ids) == len(set(ids))


class TestJournalView:
    """Tests for the recent-window projection"""

    def test_newest_first(self, store):
        store.log("lead-1", Speaker.AGENT, "first", "manual")
        store.log("lead-1", Speaker.LEAD, "second", "manual")

        view = store.journal_view("lead-1")
        assert [e.text for e in view[:2]] == ["second", "first"]

    def test_window_limits_without_trimming(self, store):
        for i in range(20):
            store.log("lead-1", Speaker.AGENT, f"line {i}", "manual")

        view = store.journal_view("lead-1", limit=14)
        full = store.get("lead-1").conversation

        assert len(view) == 14
        assert view == list(reversed(full[-14:]))
        assert len(full) == 21

    def test_zero_limit(self, store):
        assert store.journal_view("lead-1", limit=0) == []


class TestTaskToggle:
    """Tests for task toggles"""

    def test_toggle_twice_restores(self, store):
        task_id = "lead-1-objective-0"
        original = store.get("lead-1").find_task(task_id).done

        assert store.toggle_task("lead-1", task_id) is True
        assert store.get("lead-1").find_task(task_id).done is (not original)

        store.toggle_task("lead-1", task_id)
        assert store.get("lead-1").find_task(task_id).done is original

    def test_only_matching_task_changes(self, store):
        before = store.get("lead-1").tasks
        store.toggle_task("lead-1", "lead-1-prep-0")
        after = store.get("lead-1").tasks

        assert [t.done for t in after] == [False, False, False]
        assert [t.done for t in before] == [False, False, True]

    def test_unknown_task_is_noop(self, store):
        runtime = store.get("lead-1")
        assert store.toggle_task("lead-1", "missing") is False
        assert store.get("lead-1") is runtime


class TestReset:
    """Tests for runtime reset"""

    def test_reset_preserves_notes(self, store):
        store.set_notes("lead-1", "Custom research")
        store.set_wrap_summary("lead-1", "Booked a demo")
        store.toggle_task("lead-1", "lead-1-objective-0")
        store.set_script_cursor("lead-1", 2)
        store.log("lead-1", Speaker.AGENT, "hello", "manual")

        runtime = store.reset("lead-1")

        assert runtime.notes == "Custom research"
        assert runtime.wrap_summary == ""
        assert runtime.script_cursor == 0
        assert len(runtime.conversation) == 1
        assert [(t.id, t.done) for t in runtime.tasks] == [
            ("lead-1-objective-0", False),
            ("lead-1-objective-1", False),
            ("lead-1-prep-0", True),
        ]


class TestScriptCursor:
    """Tests for cursor clamping"""

    def test_clamped_to_script_length(self, store):
        assert store.set_script_cursor("lead-1", 10).script_cursor == 3

    def test_clamped_to_zero(self, store):
        assert store.set_script_cursor("lead-1", -1).script_cursor == 0
