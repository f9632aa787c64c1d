from dataclasses import dataclass
from enum import Enum

from src.config.errors import ConfigurationError


class RsvpValidationError(ValueError):
    """Raised when a submitted field fails validation. The message is shown to the visitor."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class SpamDetected(Exception):
    """Raised when the honeypot field was filled in."""


class PersistenceError(RuntimeError):
    """Raised when the RSVP store is unavailable or rejects a statement."""


class AuditResult(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    SPAM = "spam"


@dataclass(frozen=True)
class RsvpSubmissionDTO:
    """Validated and normalized submit payload, ready for the upsert."""

    full_name: str
    email: str
    phone: str | None = None
    major: str | None = None
    grad_year: str | None = None
    notes: str | None = None
    consent: bool = False
    ip: bytes | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class RsvpRecordDTO:
    """Stored RSVP row as returned by the read model."""

    email: str
    full_name: str
    event_slug: str
    latest_event: str | None = None
    phone: str | None = None
    major: str | None = None
    grad_year: str | None = None
    notes: str | None = None
    consent: int = 0

    @property
    def resolved_latest_event(self) -> str | None:
        """Latest event, falling back to the event the record was created for."""
        if self.latest_event:
            return self.latest_event
        return self.event_slug or None


__all__ = [
    "AuditResult",
    "ConfigurationError",
    "PersistenceError",
    "RsvpRecordDTO",
    "RsvpSubmissionDTO",
    "RsvpValidationError",
    "SpamDetected",
]
