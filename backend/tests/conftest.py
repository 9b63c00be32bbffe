"""
Shared fixtures: a virtual clock/scheduler and a small lead catalog
"""
import heapq
import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Tuple

import pytest

from helios.core.config import SessionTiming
from helios.domain.models.lead import Lead, LeadStatus, ScriptStep
from helios.domain.services.call_console import CallConsole
from helios.domain.services.lead_catalog import LeadCatalog


class _Handle:
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualTime:
    """Deterministic stand-in for the event loop clock and call_later"""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 15, 0, tzinfo=timezone.utc)):
        self._now = start
        self._queue: List[Tuple[datetime, int, _Handle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Handle:
        handle = _Handle()
        heapq.heappush(self._queue, (self._now + timedelta(seconds=delay), next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback that comes due"""
        target = self._now + timedelta(seconds=seconds)
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback = heapq.heappop(self._queue)
            self._now = when
            if not handle.cancelled:
                callback()
        self._now = target


def make_lead(lead_id: str = "lead-1", steps: int = 3, **overrides) -> Lead:
    data = dict(
        id=lead_id,
        name=f"Name {lead_id}",
        company=f"Company {lead_id}",
        title="Director",
        confidence=0.6,
        status=LeadStatus.NEW,
        next_action="Intro call",
        objectives=["Confirm budget", "Find evaluator"],
        preparation=["Read press release"],
        notes=["Expanding this year.", "Contract ends in September."],
        call_script=[
            ScriptStep(
                id=f"step-{i}",
                title=f"Step {i}",
                agent_prompt=f"Prompt {i}",
                customer_signals=[f"Signal {i}a", f"Signal {i}b"],
            )
            for i in range(steps)
        ],
    )
    data.update(overrides)
    return Lead(**data)


@pytest.fixture
def vtime():
    return VirtualTime()


@pytest.fixture
def catalog():
    return LeadCatalog([
        make_lead("lead-1", steps=3),
        make_lead("lead-2", steps=2),
        make_lead("lead-empty", steps=0, objectives=[], preparation=[], notes=[]),
    ])


@pytest.fixture
def timing():
    return SessionTiming()


@pytest.fixture
def console(catalog, timing, vtime):
    return CallConsole(catalog, timing=timing, clock=vtime.now, call_later=vtime.call_later)


@pytest.fixture
def lead_factory():
    return make_lead
