"""
Lead Runtime Model
Per-lead state kept for the lifetime of the process
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional

from helios.domain.models.conversation import ConversationEntry, FollowUpTask


class LeadRuntime(BaseModel):
    """
    Runtime record for one lead.

    Records are replaced, not edited in place: the store swaps in an
    updated copy for every operation.
    """
    model_config = ConfigDict(frozen=True)

    lead_id: str = Field(..., description="Lead this record belongs to")
    conversation: List[ConversationEntry] = Field(default_factory=list, description="Append-only journal")
    notes: str = Field(default="", description="Free-text research notes")
    wrap_summary: str = Field(default="", description="Wrap-up composer text")
    tasks: List[FollowUpTask] = Field(default_factory=list, description="Follow-up checklist")
    script_cursor: int = Field(default=0, ge=0, description="Index of next unconsumed script step")

    def find_task(self, task_id: str) -> Optional[FollowUpTask]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
