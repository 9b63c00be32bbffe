"""
Call Console
Selection controller and action surface for the single-call session.

Owns the catalog, the runtime store, the session state machine, the
script driver, the announcement sink and the three lifecycle timers.
"""
import logging
from typing import Any, Dict, Hashable, Optional

from helios.core.config import SessionTiming
from helios.domain.models.conversation import Speaker
from helios.domain.models.session import CallSession, CallState, format_duration
from helios.domain.services.announcement import AnnouncementSink
from helios.domain.services.lead_catalog import LeadCatalog
from helios.domain.services.runtime_store import LeadRuntimeStore
from helios.domain.services.script_driver import ScriptDriver
from helios.domain.services.session_machine import SessionStateMachine
from helios.domain.services.timers import CallLater, ConditionTimer, loop_call_later
from helios.utils.clock import Clock, format_time, utc_now

logger = logging.getLogger(__name__)

WRAP_UP_SAVED = "Wrap-up saved and contact marked as completed."


class CallConsole:
    """
    Action surface for one agent's call console.

    All actions run synchronously on the event loop thread and return
    whether they were applied. Invalid actions are suppressed, never
    raised. After each action the timers are re-synced against the new
    state so no timer outlives the condition that started it.

    Usage:
        console = CallConsole(catalog)
        console.start_call()          # dialing; settles to active
        console.advance_script()      # push current step to the journal
        console.pause_call()          # wrap-up
        console.edit_wrap_summary("Booked walkthrough")
        console.complete_wrap_up()    # lead completed, session idle
    """

    def __init__(
        self,
        catalog: LeadCatalog,
        timing: Optional[SessionTiming] = None,
        sink: Optional[AnnouncementSink] = None,
        clock: Clock = utc_now,
        call_later: CallLater = loop_call_later,
        eager_runtimes: bool = True,
    ):
        self.timing = timing or SessionTiming()
        self.catalog = catalog
        self.store = LeadRuntimeStore(catalog, clock=clock)
        if eager_runtimes:
            self.store.initialize_all()

        self.session = CallSession(selected_lead_id=catalog.first_id)
        self.machine = SessionStateMachine(self.session, catalog, self.store, clock=clock)
        self.driver = ScriptDriver(
            catalog, self.store, clock=clock, reply_offset_ms=self.timing.lead_reply_offset_ms
        )

        self.sink = sink or AnnouncementSink()
        self.sink.on_busy_change = self._on_speaking_change

        self._dial_timer = ConditionTimer(
            "dial-settle", self.timing.dial_settle_seconds, self._on_dial_settled,
            call_later=call_later,
        )
        self._clock_timer = ConditionTimer(
            "elapsed-clock", self.timing.elapsed_tick_seconds, self._on_clock_tick,
            repeat=True, call_later=call_later,
        )
        self._auto_timer = ConditionTimer(
            "auto-advance", self.timing.auto_advance_seconds, self._on_auto_advance,
            repeat=True, call_later=call_later,
        )

    @property
    def selected_lead_id(self) -> str:
        return self.session.selected_lead_id

    @property
    def timers(self) -> Dict[str, ConditionTimer]:
        return {
            timer.name: timer
            for timer in (self._dial_timer, self._clock_timer, self._auto_timer)
        }

    # ========== Timer wiring ==========

    def _sync_timers(self) -> None:
        """Start, keep or cancel each timer according to the current state"""
        state = self.session.state
        lead_id = self.session.selected_lead_id

        dial_key: Optional[Hashable] = (lead_id,) if state == CallState.DIALING else None
        clock_key: Optional[Hashable] = None
        auto_key: Optional[Hashable] = None
        if state == CallState.ACTIVE:
            clock_key = (lead_id, self.session.call_started_at)
            if self.session.auto_advance:
                auto_key = (lead_id,)

        self._dial_timer.sync(dial_key)
        self._clock_timer.sync(clock_key)
        self._auto_timer.sync(auto_key)

    def _on_dial_settled(self) -> None:
        if self.machine.connect():
            self._sync_timers()

    def _on_clock_tick(self) -> None:
        self.machine.tick()

    def _on_auto_advance(self) -> None:
        if self.session.state == CallState.ACTIVE and self.session.auto_advance:
            self.driver.advance(self.session.selected_lead_id, auto=True)

    def _on_speaking_change(self, speaking: bool) -> None:
        self.session.is_speaking = speaking

    def _reset_session(self) -> None:
        self.sink.cancel()
        self.machine.reset()
        self._sync_timers()

    # ========== User actions ==========

    def select_lead(self, lead_id: str) -> bool:
        """Focus another lead; an in-progress call is reset first"""
        if lead_id == self.session.selected_lead_id:
            return False
        if lead_id not in self.catalog:
            logger.debug(f"Select ignored, unknown lead {lead_id}")
            return False

        self._reset_session()
        self.session.selected_lead_id = lead_id
        self.store.get(lead_id)
        self._sync_timers()
        logger.info(f"Selected lead {lead_id}")
        return True

    def start_call(self) -> bool:
        applied = self.machine.start_call()
        self._sync_timers()
        return applied

    def pause_call(self) -> bool:
        applied = self.machine.pause()
        self._sync_timers()
        return applied

    def reset_session(self) -> bool:
        """
        Back to idle and re-seed the selected lead's runtime, keeping notes.

        Not available while connected; an active call is paused into
        wrap-up instead.
        """
        if self.session.state == CallState.ACTIVE:
            logger.debug("Reset ignored while the call is active")
            return False

        self._reset_session()
        self.store.reset(self.session.selected_lead_id)
        return True

    def toggle_auto_advance(self) -> bool:
        self.session.auto_advance = not self.session.auto_advance
        self._sync_timers()
        logger.info(f"Auto-advance {'enabled' if self.session.auto_advance else 'disabled'}")
        return self.session.auto_advance

    def advance_script(self) -> bool:
        """Manual push of the current step for the selected lead"""
        return bool(self.driver.advance(self.session.selected_lead_id))

    def toggle_task(self, task_id: str) -> bool:
        return self.store.toggle_task(self.session.selected_lead_id, task_id)

    def edit_notes(self, notes: str) -> None:
        self.store.set_notes(self.session.selected_lead_id, notes)

    def edit_wrap_summary(self, summary: str) -> None:
        self.store.set_wrap_summary(self.session.selected_lead_id, summary)

    def log_manual_entry(self, speaker: Speaker, text: str) -> bool:
        if not text.strip():
            logger.debug("Manual journal entry rejected: blank text")
            return False
        try:
            speaker = Speaker(speaker)
        except ValueError:
            logger.debug(f"Manual journal entry rejected: unknown speaker {speaker!r}")
            return False

        self.store.log(self.session.selected_lead_id, speaker, text, "manual")
        return True

    def complete_wrap_up(self) -> bool:
        """Mark the lead completed once a wrap-up summary exists"""
        lead_id = self.session.selected_lead_id
        if not self.store.get(lead_id).wrap_summary.strip():
            logger.debug(f"Wrap-up rejected for {lead_id}: summary is blank")
            return False

        self.catalog.mark_completed(lead_id)
        self.store.log(lead_id, Speaker.SYSTEM, WRAP_UP_SAVED, "wrap-up")
        self._reset_session()
        return True

    def voice_cue(self) -> bool:
        """Read the active step aloud"""
        step = self.driver.active_step(self.session.selected_lead_id)
        if step is None:
            return False
        return self.sink.speak(f"{step.title}. {step.agent_prompt}")

    # ========== Views ==========

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the console for the selected lead"""
        lead_id = self.session.selected_lead_id
        lead = self.catalog.require(lead_id)
        runtime = self.store.get(lead_id)
        active_step = self.driver.active_step(lead_id)

        return {
            "session": self.session.model_dump(mode="json"),
            "call_clock": format_duration(self.session.elapsed_seconds),
            "leads": [
                {
                    "id": item.id,
                    "name": item.name,
                    "company": item.company,
                    "title": item.title,
                    "status": item.status.value,
                    "next_action": item.next_action,
                }
                for item in self.catalog.list_leads()
            ],
            "lead": lead.model_dump(mode="json"),
            "runtime": {
                "notes": runtime.notes,
                "wrap_summary": runtime.wrap_summary,
                "tasks": [task.model_dump(mode="json") for task in runtime.tasks],
                "script_cursor": runtime.script_cursor,
                "conversation_length": len(runtime.conversation),
            },
            "journal": [
                {**entry.model_dump(mode="json"), "time": format_time(entry.timestamp)}
                for entry in self.store.journal_view(lead_id, self.timing.journal_window)
            ],
            "script": {
                "progress": self.driver.call_progress(lead_id),
                "confidence": self.driver.confidence_score(lead_id),
                "complete": self.driver.is_complete(lead_id),
                "active_step": active_step.model_dump(mode="json") if active_step else None,
                "upcoming_steps": [
                    step.model_dump(mode="json") for step in self.driver.upcoming_steps(lead_id)
                ],
            },
            "voice_available": self.sink.available,
        }

    async def shutdown(self) -> None:
        """Cancel every timer and any voice cue"""
        for timer in self.timers.values():
            timer.cancel()
        await self.sink.close()
        logger.info("CallConsole shut down")
