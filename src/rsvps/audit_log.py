import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path

from src.rsvps.dtos import AuditResult

logger = logging.getLogger(__name__)


class AuditLog(ABC):
    """Append-only record of every submission attempt."""

    @abstractmethod
    async def record(
        self,
        event_slug: str,
        email: str,
        result: AuditResult,
        code: str = "",
    ) -> None:
        """
        Record one attempt. Implementations must never raise: a failing audit
        log does not abort the request.
        """
        pass


def format_audit_line(
    event_slug: str,
    email: str,
    result: AuditResult,
    code: str = "",
    timestamp: datetime | None = None,
) -> str:
    timestamp = timestamp or datetime.now(UTC)
    fields = [timestamp.isoformat(timespec="seconds"), event_slug, email, result.value, code]
    # Tabs and newlines inside a field would break the line format
    cleaned = [" ".join(str(field).split()) if field else "" for field in fields]
    return "\t".join(cleaned) + "\n"


class FileAuditLog(AuditLog):
    """Tab separated audit lines appended to a file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line)

    async def record(
        self,
        event_slug: str,
        email: str,
        result: AuditResult,
        code: str = "",
    ) -> None:
        line = format_audit_line(event_slug, email, result, code)
        try:
            await asyncio.to_thread(self._append, line)
        except OSError as e:
            logger.error(f"RSVP log failure: {e}")


class NoOpAuditLog(AuditLog):
    """No-op implementation for when audit logging is disabled."""

    async def record(
        self,
        event_slug: str,
        email: str,
        result: AuditResult,
        code: str = "",
    ) -> None:
        pass
