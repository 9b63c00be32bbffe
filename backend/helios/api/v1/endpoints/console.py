"""
Console Endpoints
User action surface for the call console
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from helios.api.v1.dependencies import get_console
from helios.domain.models.conversation import Speaker
from helios.domain.services.call_console import CallConsole

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/console", tags=["console"])


class SelectLeadRequest(BaseModel):
    lead_id: str = Field(..., min_length=1)


class TaskToggleRequest(BaseModel):
    task_id: str = Field(..., min_length=1)


class TextRequest(BaseModel):
    text: str = ""


class ManualEntryRequest(BaseModel):
    speaker: Speaker = Speaker.AGENT
    text: str


class ActionResponse(BaseModel):
    """Outcome of a user action plus the refreshed console view"""
    applied: bool
    console: Dict[str, Any]


def _respond(console: CallConsole, applied: bool) -> ActionResponse:
    return ActionResponse(applied=applied, console=console.snapshot())


@router.get("")
async def get_console_view(console: CallConsole = Depends(get_console)) -> Dict[str, Any]:
    """Current session, selected lead, journal window and script progress"""
    return console.snapshot()


@router.post("/select", response_model=ActionResponse)
async def select_lead(body: SelectLeadRequest, console: CallConsole = Depends(get_console)):
    if body.lead_id not in console.catalog:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lead not found: {body.lead_id}")
    return _respond(console, console.select_lead(body.lead_id))


@router.post("/call/start", response_model=ActionResponse)
async def start_call(console: CallConsole = Depends(get_console)):
    return _respond(console, console.start_call())


@router.post("/call/pause", response_model=ActionResponse)
async def pause_call(console: CallConsole = Depends(get_console)):
    return _respond(console, console.pause_call())


@router.post("/session/reset", response_model=ActionResponse)
async def reset_session(console: CallConsole = Depends(get_console)):
    return _respond(console, console.reset_session())


@router.post("/auto-advance/toggle", response_model=ActionResponse)
async def toggle_auto_advance(console: CallConsole = Depends(get_console)):
    console.toggle_auto_advance()
    return _respond(console, True)


@router.post("/script/advance", response_model=ActionResponse)
async def advance_script(console: CallConsole = Depends(get_console)):
    return _respond(console, console.advance_script())


@router.post("/tasks/toggle", response_model=ActionResponse)
async def toggle_task(body: TaskToggleRequest, console: CallConsole = Depends(get_console)):
    return _respond(console, console.toggle_task(body.task_id))


@router.put("/notes", response_model=ActionResponse)
async def edit_notes(body: TextRequest, console: CallConsole = Depends(get_console)):
    console.edit_notes(body.text)
    return _respond(console, True)


@router.put("/wrap-summary", response_model=ActionResponse)
async def edit_wrap_summary(body: TextRequest, console: CallConsole = Depends(get_console)):
    console.edit_wrap_summary(body.text)
    return _respond(console, True)


@router.post("/journal", response_model=ActionResponse)
async def log_manual_entry(body: ManualEntryRequest, console: CallConsole = Depends(get_console)):
    return _respond(console, console.log_manual_entry(body.speaker, body.text))


@router.post("/wrap-up/complete", response_model=ActionResponse)
async def complete_wrap_up(console: CallConsole = Depends(get_console)):
    return _respond(console, console.complete_wrap_up())


@router.post("/voice-cue", response_model=ActionResponse)
async def voice_cue(console: CallConsole = Depends(get_console)):
    return _respond(console, console.voice_cue())
