# mesopust/upload_window.py
"""
Photo upload is only open on a carnival event day.

An event day is any event whose date has today's month and day; the year is
ignored because the events recur every season. The event's `event_date` is
used when set, otherwise its `created_at` timestamp.

Timestamps are stored in UTC. They are converted to `config.TIMEZONE` before
the date is taken, so an event stamped late in the evening UTC counts on the
local calendar day. "Today" is read in the same zone.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from mesopust import config
from mesopust.db.repository import SearchRepository
from mesopust.models import Event

logger = logging.getLogger(__name__)

EVENT_COLUMNS = ("id", "title", "title_local", "event_date", "created_at", "parent_event_id", "display_order")


def local_today() -> date:
    return datetime.now(ZoneInfo(config.TIMEZONE)).date()


def _parse_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date, or a timestamp as a local date (naive means UTC)."""
    if not value:
        return None
    v = value.strip()
    try:
        if v.endswith("Z"):
            v = v[:-1] + "+00:00"
        if len(v) == 10:
            return date.fromisoformat(v)
        dt = datetime.fromisoformat(v)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt.astimezone(ZoneInfo(config.TIMEZONE)).date()


def event_day(event: Event) -> Optional[date]:
    return _parse_date(event.event_date) or _parse_date(event.created_at)


def is_event_day(events: Iterable[Event], today: date) -> bool:
    for ev in events:
        d = event_day(ev)
        if d and (d.month, d.day) == (today.month, today.day):
            return True
    return False


def load_upload_window(repository: SearchRepository, today: Optional[date] = None) -> bool:
    """
    Fetch events and decide whether uploads are open today.

    A failed fetch closes the window.
    """
    today = today or local_today()
    try:
        rows = repository.list_rows("events", EVENT_COLUMNS, order_by="display_order")
    except Exception as e:
        logger.error("[upload_window] events fetch failed | %s: %s", type(e).__name__, e)
        return False

    events: list[Event] = []
    for raw in rows:
        try:
            events.append(Event.model_validate(raw))
        except ValidationError:
            logger.warning(
                "[upload_window] SKIP malformed event id=%r",
                raw.get("id") if isinstance(raw, dict) else None,
            )

    return is_event_day(events, today)
