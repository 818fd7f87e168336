# chatrelay/services/messages.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from chatrelay.core.config import settings
from chatrelay.models.models import FormattedMessage


def format_time(now: datetime, tz_name: str) -> str:
    """Render a moment as ``h:mm am`` in the given timezone, e.g. ``3:05 pm``."""
    local = now.astimezone(ZoneInfo(tz_name))
    hour = local.hour % 12 or 12
    suffix = "pm" if local.hour >= 12 else "am"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_message(
    username: str,
    text: str,
    now: Optional[datetime] = None,
    tz_name: Optional[str] = None,
) -> FormattedMessage:
    """
    Build the message record sent to clients.

    ``text`` is passed through untouched. ``now`` defaults to the current UTC
    time and ``tz_name`` to the configured chat timezone.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return FormattedMessage(
        username=username,
        text=text,
        time=format_time(now, tz_name or settings.CHAT_TIMEZONE),
    )
