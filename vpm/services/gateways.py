# Rev 0.2.0

"""Collaborator interfaces the services depend on (calendar, session identity).

Implementations raise CollaboratorError (or anything else) on failure; the
services treat every call here as best-effort.
"""
from __future__ import annotations
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from ..models.entities import CalendarEvent
from ..utils.config import load_settings


class CalendarGateway(ABC):
    @abstractmethod
    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        """Return the event, or None when the calendar has no such id."""

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        """Delete the event. Raises CollaboratorError when it cannot."""


class IdentityProvider(ABC):
    @abstractmethod
    def current_email(self) -> Optional[str]:
        """Email of the active session user, None if unknown."""


class SettingsIdentity(IdentityProvider):
    """VPM_USER_EMAIL wins; otherwise settings.json identity.email."""

    def __init__(self, settings_loader: Callable[[], Dict[str, Any]] = load_settings):
        self._load = settings_loader

    def current_email(self) -> Optional[str]:
        env = os.environ.get("VPM_USER_EMAIL", "").strip()
        if env:
            return env
        email = (self._load().get("identity") or {}).get("email") or ""
        return email.strip() or None
