"""
Condition-scoped timers
One-shot and repeating timers that live exactly as long as the state
condition that started them.
"""
import asyncio
import logging
from typing import Callable, Hashable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


CallLater = Callable[[float, Callable[[], None]], TimerHandle]


def loop_call_later(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule on the running asyncio loop"""
    return asyncio.get_running_loop().call_later(delay, callback)


class CancellationToken:
    """Flipped once when the owning condition ends"""
    __slots__ = ("cancelled",)

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ConditionTimer:
    """
    Timer bound to a condition key.

    Call sync(key) after every state change with the key the timer should
    run under, or None when its condition does not hold. A different key
    cancels the current schedule and starts a new one; the same key leaves
    it alone. A one-shot timer fires once per key.

    Usage:
        timer = ConditionTimer("dial-settle", 1.4, on_settled)
        timer.sync(("lead-ava",))   # armed
        timer.sync(None)            # cancelled
    """

    def __init__(
        self,
        name: str,
        interval: float,
        callback: Callable[[], None],
        repeat: bool = False,
        call_later: CallLater = loop_call_later,
    ):
        self.name = name
        self.interval = interval
        self.repeat = repeat
        self._callback = callback
        self._call_later = call_later
        self._key: Optional[Hashable] = None
        self._token: Optional[CancellationToken] = None
        self._handle: Optional[TimerHandle] = None
        self.fire_count = 0

    @property
    def key(self) -> Optional[Hashable]:
        return self._key

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    def sync(self, key: Optional[Hashable]) -> None:
        if key == self._key:
            return

        self.cancel()
        if key is None:
            return

        self._key = key
        self._arm()
        logger.debug(f"Timer {self.name} started (key={key})")

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()
        if self._handle is not None:
            self._handle.cancel()
            logger.debug(f"Timer {self.name} cancelled (key={self._key})")
        self._token = None
        self._handle = None
        self._key = None

    def _arm(self) -> None:
        token = CancellationToken()
        self._token = token
        self._handle = self._call_later(self.interval, lambda: self._fire(token))

    def _fire(self, token: CancellationToken) -> None:
        if token.cancelled:
            return

        if self.repeat:
            self._arm()
        else:
            # Spent: keep the key so the same condition does not re-arm it
            self._token = None
            self._handle = None

        self.fire_count += 1
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Timer {self.name} callback failed: {e}", exc_info=True)
