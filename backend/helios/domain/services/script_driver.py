"""
Script Driver
Pushes scripted talking points into a lead's journal, one step at a time.
"""
from datetime import timedelta
from typing import List, Optional
import logging

from helios.domain.models.conversation import ConversationEntry, Speaker
from helios.domain.models.lead import Lead, ScriptStep
from helios.domain.services.lead_catalog import LeadCatalog
from helios.domain.services.runtime_store import LeadRuntimeStore
from helios.utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)

FALLBACK_SIGNAL = "Sounds good, please continue."


def pick_customer_signal(step: ScriptStep, cursor: int) -> str:
    """Rotate through the step's signals by cursor position"""
    if not step.customer_signals:
        return FALLBACK_SIGNAL
    return step.customer_signals[cursor % len(step.customer_signals)]


class ScriptDriver:
    """
    Advances a lead's script cursor and synthesizes the matching
    agent/lead exchange.

    Usage:
        driver = ScriptDriver(catalog, store)
        driver.advance("lead-ava")             # manual push
        driver.advance("lead-ava", auto=True)  # from the auto-advance ticker
    """

    def __init__(
        self,
        catalog: LeadCatalog,
        store: LeadRuntimeStore,
        clock: Clock = utc_now,
        reply_offset_ms: int = 400,
    ):
        self._catalog = catalog
        self._store = store
        self._clock = clock
        self._reply_offset = timedelta(milliseconds=reply_offset_ms)

    def advance(self, lead_id: str, auto: bool = False) -> List[ConversationEntry]:
        """
        Append the current step's prompt and a customer reply, then move the cursor.

        Args:
            lead_id: Lead whose script to advance
            auto: True when invoked by the timer (logging only)

        Returns:
            The two appended entries, or an empty list when the script is done
        """
        lead = self._catalog.get(lead_id)
        if lead is None:
            logger.debug(f"Advance ignored, unknown lead {lead_id}")
            return []

        runtime = self._store.get(lead_id)
        cursor = runtime.script_cursor
        step = self.step_at(lead, cursor)
        if step is None:
            logger.debug(f"Advance ignored, script complete for lead {lead_id}")
            return []

        now = self._clock()
        agent_entry = ConversationEntry(
            id=self._store.next_entry_id(lead_id, f"agent-{step.id}"),
            speaker=Speaker.AGENT,
            text=step.agent_prompt,
            timestamp=now,
        )
        lead_entry = ConversationEntry(
            id=self._store.next_entry_id(lead_id, f"lead-{step.id}", offset=1),
            speaker=Speaker.LEAD,
            text=pick_customer_signal(step, cursor),
            timestamp=now + self._reply_offset,
        )

        self._store.append_conversation(lead_id, [agent_entry, lead_entry])
        self._store.set_script_cursor(lead_id, cursor + 1)

        logger.info(
            f"ScriptDriver: lead={lead_id} step={step.id} "
            f"cursor={cursor}->{min(cursor + 1, lead.script_length)} "
            f"({'auto' if auto else 'manual'})"
        )
        return [agent_entry, lead_entry]

    @staticmethod
    def step_at(lead: Lead, cursor: int) -> Optional[ScriptStep]:
        if 0 <= cursor < lead.script_length:
            return lead.call_script[cursor]
        return None

    # ========== Derived progress (display only) ==========

    def is_complete(self, lead_id: str) -> bool:
        lead = self._catalog.require(lead_id)
        return self._store.get(lead_id).script_cursor >= lead.script_length

    def call_progress(self, lead_id: str) -> int:
        """Percent of script steps consumed"""
        lead = self._catalog.require(lead_id)
        if not lead.script_length:
            return 0
        return round(self._store.get(lead_id).script_cursor / lead.script_length * 100)

    def confidence_score(self, lead_id: str) -> int:
        """Static fit blended with live progress; not used for any decision"""
        lead = self._catalog.require(lead_id)
        return round((lead.confidence + self.call_progress(lead_id) / 100) * 50)

    def active_step(self, lead_id: str) -> Optional[ScriptStep]:
        """Current step, or the last one once the script is complete"""
        lead = self._catalog.require(lead_id)
        step = self.step_at(lead, self._store.get(lead_id).script_cursor)
        if step is None and lead.call_script:
            return lead.call_script[-1]
        return step

    def upcoming_steps(self, lead_id: str) -> List[ScriptStep]:
        lead = self._catalog.require(lead_id)
        return lead.call_script[self._store.get(lead_id).script_cursor:]
