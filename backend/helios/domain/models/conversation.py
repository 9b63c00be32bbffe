"""
Conversation Domain Models
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class Speaker(str, Enum):
    """Who produced a journal entry"""
    AGENT = "agent"
    LEAD = "lead"
    SYSTEM = "system"


class ConversationEntry(BaseModel):
    """Single journal entry. Never mutated once appended."""
    model_config = ConfigDict(frozen=True)

    id: str
    speaker: Speaker
    text: str
    timestamp: datetime


class FollowUpTask(BaseModel):
    """Checklist item derived from lead objectives and preparation"""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    done: bool = False


class AudioChunk(BaseModel):
    """Audio data chunk produced by an announcement"""
    data: bytes
    sample_rate: int = 16000
    channels: int = 1
    timestamp: Optional[datetime] = None
