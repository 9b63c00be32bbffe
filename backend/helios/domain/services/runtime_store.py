"""
Lead Runtime Store
Keyed store of per-lead runtime records with get-or-create semantics
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from helios.domain.models.conversation import ConversationEntry, FollowUpTask, Speaker
from helios.domain.models.lead import Lead
from helios.domain.models.runtime import LeadRuntime
from helios.domain.services.lead_catalog import LeadCatalog
from helios.utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_JOURNAL_WINDOW = 14


def build_tasks(lead: Lead) -> List[FollowUpTask]:
    """Objectives start open, preparation items start done"""
    return [
        *(
            FollowUpTask(id=f"{lead.id}-objective-{index}", label=objective, done=False)
            for index, objective in enumerate(lead.objectives)
        ),
        *(
            FollowUpTask(id=f"{lead.id}-prep-{index}", label=prep, done=True)
            for index, prep in enumerate(lead.preparation)
        ),
    ]


def build_initial_runtime(lead: Lead, timestamp: datetime) -> LeadRuntime:
    """Fresh runtime: readiness entry, seeded notes and tasks, cursor at 0"""
    return LeadRuntime(
        lead_id=lead.id,
        conversation=[
            ConversationEntry(
                id=f"{lead.id}-ready-0",
                speaker=Speaker.SYSTEM,
                text=f"Prepared to connect with {lead.name} ({lead.company}).",
                timestamp=timestamp,
            )
        ],
        notes="\n".join(lead.notes),
        wrap_summary="",
        tasks=build_tasks(lead),
        script_cursor=0,
    )


class LeadRuntimeStore:
    """
    Single-writer store for LeadRuntime records.

    Every write reads the latest record, builds an updated copy and swaps
    it in. No operation touches more than one lead.
    """

    def __init__(self, catalog: LeadCatalog, clock: Clock = utc_now):
        self._catalog = catalog
        self._clock = clock
        self._runtimes: Dict[str, LeadRuntime] = {}

    def initialize_all(self) -> None:
        """Eagerly create a runtime for every catalog lead"""
        for lead in self._catalog.list_leads():
            self.get(lead.id)

    def initialize(self, lead: Lead) -> LeadRuntime:
        runtime = build_initial_runtime(lead, self._clock())
        self._runtimes[lead.id] = runtime
        return runtime

    def get(self, lead_id: str) -> LeadRuntime:
        """Get the runtime for a lead, creating it on first access"""
        runtime = self._runtimes.get(lead_id)
        if runtime is None:
            runtime = self.initialize(self._catalog.require(lead_id))
        return runtime

    def _replace(self, lead_id: str, **updates) -> LeadRuntime:
        runtime = self.get(lead_id).model_copy(update=updates)
        self._runtimes[lead_id] = runtime
        return runtime

    # ========== Journal ==========

    def next_entry_id(self, lead_id: str, kind: str, offset: int = 0) -> str:
        """Id for an entry about to be appended; unique because the log only grows"""
        return f"{lead_id}-{kind}-{len(self.get(lead_id).conversation) + offset}"

    def append_conversation(self, lead_id: str, entries: Iterable[ConversationEntry]) -> LeadRuntime:
        runtime = self.get(lead_id)
        return self._replace(lead_id, conversation=[*runtime.conversation, *entries])

    def log(
        self,
        lead_id: str,
        speaker: Speaker,
        text: str,
        kind: str,
        timestamp: Optional[datetime] = None,
    ) -> ConversationEntry:
        """Append a single entry and return it"""
        entry = ConversationEntry(
            id=self.next_entry_id(lead_id, kind),
            speaker=speaker,
            text=text,
            timestamp=timestamp or self._clock(),
        )
        self.append_conversation(lead_id, [entry])
        return entry

    def journal_view(self, lead_id: str, limit: int = DEFAULT_JOURNAL_WINDOW) -> List[ConversationEntry]:
        """Newest `limit` entries, newest first. The stored log is untouched."""
        if limit <= 0:
            return []
        return list(reversed(self.get(lead_id).conversation[-limit:]))

    # ========== User edits ==========

    def toggle_task(self, lead_id: str, task_id: str) -> bool:
        runtime = self.get(lead_id)
        if runtime.find_task(task_id) is None:
            logger.debug(f"Toggle ignored, no task {task_id} for lead {lead_id}")
            return False

        self._replace(
            lead_id,
            tasks=[
                task.model_copy(update={"done": not task.done}) if task.id == task_id else task
                for task in runtime.tasks
            ],
        )
        return True

    def set_notes(self, lead_id: str, notes: str) -> LeadRuntime:
        return self._replace(lead_id, notes=notes)

    def set_wrap_summary(self, lead_id: str, summary: str) -> LeadRuntime:
        return self._replace(lead_id, wrap_summary=summary)

    def set_script_cursor(self, lead_id: str, cursor: int) -> LeadRuntime:
        lead = self._catalog.require(lead_id)
        return self._replace(lead_id, script_cursor=min(max(cursor, 0), lead.script_length))

    def reset(self, lead_id: str) -> LeadRuntime:
        """Re-seed the runtime, carrying the notes over and dropping the wrap summary"""
        notes = self.get(lead_id).notes
        fresh = build_initial_runtime(self._catalog.require(lead_id), self._clock())
        runtime = fresh.model_copy(update={"notes": notes, "wrap_summary": ""})
        self._runtimes[lead_id] = runtime
        logger.info(f"Runtime reset for lead {lead_id}")
        return runtime

    def snapshot(self) -> Dict[str, LeadRuntime]:
        """Shallow copy of all records; records themselves are immutable"""
        return dict(self._runtimes)
