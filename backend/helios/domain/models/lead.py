"""
Lead Domain Models
Defines Lead, ScriptStep and LeadStatus for the call queue
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from enum import Enum


class LeadStatus(str, Enum):
    """Lead status in the call queue"""
    NEW = "new"
    IN_PROGRESS = "in-progress"
    FOLLOW_UP = "follow-up"
    COMPLETED = "completed"


class ScriptStep(BaseModel):
    """Single scripted talking point"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Step identifier")
    title: str = Field(..., description="Short step title")
    agent_prompt: str = Field(..., description="What the agent says")
    customer_signals: List[str] = Field(
        default_factory=list,
        description="Expected customer responses to listen for"
    )


class Lead(BaseModel):
    """Lead/Contact targeted for an outbound call"""
    id: str
    name: str
    company: str
    title: str = ""

    # Contact fields
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    timezone: Optional[str] = None

    tags: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0, description="Static fit score")
    status: LeadStatus = LeadStatus.NEW
    next_action: str = ""
    last_outcome: str = ""

    objectives: List[str] = Field(default_factory=list)
    preparation: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list, description="Research notes seeding the runtime")
    call_script: List[ScriptStep] = Field(default_factory=list)

    @property
    def script_length(self) -> int:
        return len(self.call_script)
