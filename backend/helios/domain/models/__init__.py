"""Domain models"""

# Lead catalog models
from .lead import (
    LeadStatus,
    ScriptStep,
    Lead,
)

# Journal models
from .conversation import (
    Speaker,
    ConversationEntry,
    FollowUpTask,
    AudioChunk,
)

# Runtime + session models
from .runtime import LeadRuntime
from .session import (
    CallState,
    CallSession,
    format_duration,
)

__all__ = [
    # Lead catalog
    "LeadStatus",
    "ScriptStep",
    "Lead",
    # Journal
    "Speaker",
    "ConversationEntry",
    "FollowUpTask",
    "AudioChunk",
    # Runtime + session
    "LeadRuntime",
    "CallState",
    "CallSession",
    "format_duration",
]
