"""
API Dependencies
Shared dependencies for the console endpoints
"""
from fastapi import HTTPException, Request, status

from helios.domain.services.call_console import CallConsole


def get_console(request: Request) -> CallConsole:
    """
    Get the process-wide CallConsole created at startup.

    Raises:
        HTTPException: If the application has not finished starting
    """
    console = getattr(request.app.state, "console", None)
    if console is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Call console not initialized",
        )
    return console
