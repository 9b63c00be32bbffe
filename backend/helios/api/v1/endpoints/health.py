"""
Health Check Endpoint
Provides health status for monitoring
"""
from fastapi import APIRouter, Request, status
from datetime import datetime, timezone
from typing import Any, Dict

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Dict with status, timestamp and the console's call state
    """
    console = getattr(request.app.state, "console", None)
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "helios-console",
        "call_state": console.session.state.value if console else None,
    }
