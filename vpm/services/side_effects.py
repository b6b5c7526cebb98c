# Rev 0.2.0
from __future__ import annotations
import logging

from .gateways import CalendarGateway
from .results import OperationResult


def release_calendar_event(
    calendar: CalendarGateway,
    event_id: str,
    result: OperationResult,
    log: logging.Logger,
) -> bool:
    """
    Best-effort calendar delete. Any failure is logged at WARNING and
    recorded on `result`; it never escapes.
    """
    try:
        calendar.delete_event(event_id)
    except Exception as e:
        log.warning("Error deleting calendar event %s: %s", event_id, e)
        result.warn(f"calendar event {event_id} not deleted: {e}")
        return False
    log.debug("Deleted calendar event %s", event_id)
    return True
