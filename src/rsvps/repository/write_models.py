"""Write model for RSVP submissions.

A submission is a single insert-or-update keyed by email. When the email is
already stored only ``latest_event`` moves; everything captured on the first
submission is kept.
"""

import abc

from sqlalchemy import func
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config.database import async_session_manager
from src.rsvps.dtos import PersistenceError, RsvpSubmissionDTO
from src.rsvps.repository.orm_models import Rsvp


class RsvpWriteModel(abc.ABC):
    @abc.abstractmethod
    async def upsert(self, submission: RsvpSubmissionDTO, event_slug: str) -> None:
        """Create the RSVP for a new email, or move latest_event for a known one."""
        raise NotImplementedError


def build_upsert_statement(dialect_name: str, values: dict):
    """
    Build the conflict-resolving insert for the given SQL dialect.

    PostgreSQL and SQLite resolve on the unique email index, MySQL on any
    duplicate key.
    """
    if dialect_name == "mysql":
        stmt = mysql.insert(Rsvp).values(**values)
        return stmt.on_duplicate_key_update(
            latest_event=stmt.inserted.latest_event,
            updated_at=func.current_timestamp(),
        )

    if dialect_name == "postgresql":
        stmt = postgresql.insert(Rsvp).values(**values)
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(Rsvp).values(**values)
    else:
        raise PersistenceError(f"Unsupported database dialect: {dialect_name}")

    return stmt.on_conflict_do_update(
        index_elements=[Rsvp.email],
        set_={
            "latest_event": stmt.excluded.latest_event,
            "updated_at": func.current_timestamp(),
        },
    )


class SqlRsvpWriteModel(RsvpWriteModel):
    """SQL implementation of RSVP write model."""

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        self.engine = engine

    async def upsert(self, submission: RsvpSubmissionDTO, event_slug: str) -> None:
        values = {
            "event_slug": event_slug,
            "latest_event": event_slug,
            "full_name": submission.full_name,
            "email": submission.email,
            "phone": submission.phone,
            "major": submission.major,
            "grad_year": submission.grad_year,
            "notes": submission.notes,
            "consent": 1 if submission.consent else 0,
            "ip": submission.ip,
            "user_agent": submission.user_agent,
        }

        try:
            async with async_session_manager(engine=self.engine) as session:
                stmt = build_upsert_statement(session.get_bind().dialect.name, values)
                await session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
