"""
Session State Machine
Drives the call lifecycle: idle -> dialing -> active -> wrap-up -> idle
"""
import logging
from typing import Dict, FrozenSet

from helios.domain.models.conversation import Speaker
from helios.domain.models.session import CallSession, CallState
from helios.domain.services.lead_catalog import LeadCatalog
from helios.domain.services.runtime_store import LeadRuntimeStore
from helios.utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)


# Source states each user-triggered transition accepts
ALLOWED_SOURCES: Dict[str, FrozenSet[CallState]] = {
    "start_call": frozenset({CallState.IDLE, CallState.WRAP_UP}),
    "connect": frozenset({CallState.DIALING}),
    "pause": frozenset({CallState.ACTIVE}),
}


class SessionStateMachine:
    """
    Owns the CallSession and applies lifecycle transitions to it.

    Every method returns True when the transition happened and False
    when it was suppressed. Journal side effects go to the currently
    selected lead.
    """

    def __init__(
        self,
        session: CallSession,
        catalog: LeadCatalog,
        store: LeadRuntimeStore,
        clock: Clock = utc_now,
    ):
        self.session = session
        self._catalog = catalog
        self._store = store
        self._clock = clock

    @property
    def state(self) -> CallState:
        return self.session.state

    def _can(self, transition: str) -> bool:
        allowed = self.session.state in ALLOWED_SOURCES[transition]
        if not allowed:
            logger.debug(f"Transition '{transition}' suppressed in state {self.session.state.value}")
        return allowed

    def _log_system(self, text: str, kind: str) -> None:
        self._store.log(self.session.selected_lead_id, Speaker.SYSTEM, text, kind)

    def start_call(self) -> bool:
        """idle/wrap-up -> dialing"""
        if not self._can("start_call"):
            return False

        lead = self._catalog.require(self.session.selected_lead_id)
        self.session.state = CallState.DIALING
        self._log_system(f"Dialing {lead.name}...", "dialing")
        logger.info(f"Session: dialing {lead.id}")
        return True

    def connect(self) -> bool:
        """dialing -> active, fired by the settle timer"""
        if not self._can("connect"):
            return False

        lead = self._catalog.require(self.session.selected_lead_id)
        self.session.state = CallState.ACTIVE
        self.session.call_started_at = self._clock()
        self.session.elapsed_seconds = 0
        self._log_system(f"Connected with {lead.name}.", "connected")
        logger.info(f"Session: connected with {lead.id}")
        return True

    def pause(self) -> bool:
        """active -> wrap-up, freezing the call clock"""
        if not self._can("pause"):
            return False

        self.session.elapsed_seconds = self.session.compute_elapsed(self._clock())
        self.session.state = CallState.WRAP_UP
        self.session.call_started_at = None
        self._log_system("Call placed on hold for wrap-up.", "paused")
        logger.info(f"Session: {self.session.selected_lead_id} on hold for wrap-up")
        return True

    def tick(self) -> int:
        """Recompute the derived call clock while active"""
        if self.session.state == CallState.ACTIVE:
            self.session.elapsed_seconds = self.session.compute_elapsed(self._clock())
        return self.session.elapsed_seconds

    def reset(self) -> None:
        """any -> idle; auto-advance back on, speaking flag cleared"""
        previous = self.session.state
        self.session.clear()
        if previous != CallState.IDLE:
            logger.info(f"Session: reset from {previous.value} to idle")
