"""
Clock helpers
"""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def format_time(timestamp: datetime) -> str:
    """Render a journal timestamp like `3:07 PM`"""
    return timestamp.strftime("%I:%M %p").lstrip("0")
