"""
Unit tests for session models and the Session State Machine
"""
import pytest
from datetime import datetime, timedelta, timezone

from helios.domain.models.conversation import Speaker
from helios.domain.models.session import CallSession, CallState, format_duration
from helios.domain.services.runtime_store import LeadRuntimeStore
from helios.domain.services.session_machine import SessionStateMachine


class TestCallState:
    """Tests for CallState enum"""

    def test_call_state_values(self):
        assert CallState.IDLE == "idle"
        assert CallState.DIALING == "dialing"
        assert CallState.ACTIVE == "active"
        assert CallState.WRAP_UP == "wrap-up"

    def test_call_state_count(self):
        assert len(CallState) == 4


class TestCallSession:
    """Tests for CallSession"""

    def test_defaults(self):
        session = CallSession(selected_lead_id="lead-1")

        assert session.state == CallState.IDLE
        assert session.call_started_at is None
        assert session.elapsed_seconds == 0
        assert session.auto_advance is True
        assert session.is_speaking is False

    def test_compute_elapsed(self):
        start = datetime(2024, 5, 1, 15, 0, tzinfo=timezone.utc)
        session = CallSession(selected_lead_id="lead-1", call_started_at=start)
        assert session.compute_elapsed(start + timedelta(seconds=75.9)) == 75

    def test_compute_elapsed_frozen_without_start(self):
        session = CallSession(selected_lead_id="lead-1", elapsed_seconds=42)
        assert session.compute_elapsed(datetime.now(timezone.utc)) == 42

    def test_elapsed_validation(self):
        with pytest.raises(ValueError):
            CallSession(selected_lead_id="lead-1", elapsed_seconds=-1)

    def test_clear(self):
        session = CallSession(
            selected_lead_id="lead-1",
            state=CallState.ACTIVE,
            call_started_at=datetime.now(timezone.utc),
            elapsed_seconds=12,
            auto_advance=False,
            is_speaking=True,
        )
        session.clear()

        assert session.state == CallState.IDLE
        assert session.call_started_at is None
        assert session.elapsed_seconds == 0
        assert session.auto_advance is True
        assert session.is_speaking is False
        assert session.selected_lead_id == "lead-1"


class TestFormatDuration:
    """Tests for the call clock formatter"""

    def test_format(self):
        assert format_duration(0) == "00:00"
        assert format_duration(75) == "01:15"
        assert format_duration(3600) == "60:00"


@pytest.fixture
def machine(catalog, vtime):
    store = LeadRuntimeStore(catalog, clock=vtime.now)
    session = CallSession(selected_lead_id="lead-1")
    return SessionStateMachine(session, catalog, store, clock=vtime.now)


def _last_entry(machine):
    return machine._store.get("lead-1").conversation[-1]


class TestSessionStateMachine:
    """Tests for lifecycle transitions"""

    def test_start_call_from_idle(self, machine):
        assert machine.start_call() is True
        assert machine.state == CallState.DIALING

        entry = _last_entry(machine)
        assert entry.speaker == Speaker.SYSTEM
        assert entry.text == "Dialing Name lead-1..."

    def test_start_call_rejected_when_dialing_or_active(self, machine):
        machine.start_call()
        before = len(machine._store.get("lead-1").conversation)

        assert machine.start_call() is False
        machine.connect()
        assert machine.start_call() is False
        # only the connect entry was added
        assert len(machine._store.get("lead-1").conversation) == before + 1

    def test_connect_sets_clock(self, machine, vtime):
        machine.start_call()
        vtime.advance(1.4)
        assert machine.connect() is True

        assert machine.state == CallState.ACTIVE
        assert machine.session.call_started_at == vtime.now()
        assert machine.session.elapsed_seconds == 0
        assert _last_entry(machine).text == "Connected with Name lead-1."

    def test_connect_only_from_dialing(self, machine):
        assert machine.connect() is False
        assert machine.state == CallState.IDLE

    def test_tick_recomputes_from_start(self, machine, vtime):
        machine.start_call()
        machine.connect()
        vtime.advance(7.5)
        assert machine.tick() == 7

    def test_pause_freezes_clock(self, machine, vtime):
        machine.start_call()
        machine.connect()
        vtime.advance(30)

        assert machine.pause() is True
        assert machine.state == CallState.WRAP_UP
        assert machine.session.call_started_at is None
        assert machine.session.elapsed_seconds == 30
        assert _last_entry(machine).text == "Call placed on hold for wrap-up."

        vtime.advance(30)
        assert machine.tick() == 30

    def test_pause_rejected_when_not_active(self, machine):
        assert machine.pause() is False
        machine.start_call()
        assert machine.pause() is False
        assert machine.state == CallState.DIALING

    def test_start_call_from_wrap_up(self, machine):
        machine.start_call()
        machine.connect()
        machine.pause()
        assert machine.start_call() is True
        assert machine.state == CallState.DIALING

    def test_reset(self, machine):
        machine.start_call()
        machine.connect()
        machine.session.auto_advance = False
        machine.session.is_speaking = True

        machine.reset()

        assert machine.state == CallState.IDLE
        assert machine.session.call_started_at is None
        assert machine.session.auto_advance is True
        assert machine.session.is_speaking is False
