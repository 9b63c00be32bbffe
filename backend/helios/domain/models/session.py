"""
Session Models
Defines CallSession and CallState for the single active call console
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class CallState(str, Enum):
    """Call session state"""
    IDLE = "idle"              # No call in progress
    DIALING = "dialing"        # Waiting for the line to settle
    ACTIVE = "active"          # Call in progress, clock running
    WRAP_UP = "wrap-up"        # On hold, agent composing wrap-up


class CallSession(BaseModel):
    """
    Runtime state for the console's one call.

    Not per-lead: switching leads resets it. The authoritative timing
    value is call_started_at; elapsed_seconds is a derived display value.
    """
    model_config = ConfigDict(validate_assignment=True)

    # ========== Lifecycle ==========
    state: CallState = Field(default=CallState.IDLE, description="Current call state")
    selected_lead_id: str = Field(..., description="Lead currently in focus")

    # ========== Timing ==========
    call_started_at: Optional[datetime] = Field(None, description="Set while the call clock runs")
    elapsed_seconds: int = Field(default=0, ge=0, description="Derived call clock")

    # ========== Flags ==========
    auto_advance: bool = Field(default=True, description="Push script steps on a timer")
    is_speaking: bool = Field(default=False, description="Announcement in progress")

    @property
    def in_call(self) -> bool:
        """Dialing or connected"""
        return self.state in (CallState.DIALING, CallState.ACTIVE)

    def compute_elapsed(self, now: datetime) -> int:
        """Whole seconds since the call started, or the frozen value when not timed"""
        if self.call_started_at is None:
            return self.elapsed_seconds
        return max(0, int((now - self.call_started_at).total_seconds()))

    def clear(self) -> None:
        """Return to idle with default flags"""
        self.state = CallState.IDLE
        self.call_started_at = None
        self.elapsed_seconds = 0
        self.auto_advance = True
        self.is_speaking = False


def format_duration(seconds: int) -> str:
    """Render a call clock as MM:SS"""
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins:02d}:{secs:02d}"
