import abc

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config.database import async_session_manager
from src.rsvps.dtos import PersistenceError, RsvpRecordDTO
from src.rsvps.repository.orm_models import Rsvp


class RsvpReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_by_email(self, email: str) -> RsvpRecordDTO | None:
        """
        Get the stored RSVP for an exact email.
        Returns None when the email never submitted.
        """
        raise NotImplementedError


class SqlRsvpReadModel(RsvpReadModel):
    """SQL implementation of RSVP read model."""

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        self.engine = engine

    async def get_by_email(self, email: str) -> RsvpRecordDTO | None:
        try:
            async with async_session_manager(auto_commit=False, engine=self.engine) as session:
                result = await session.execute(select(Rsvp).where(Rsvp.email == email).limit(1))
                rsvp = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

        if rsvp is None:
            return None

        return RsvpRecordDTO(
            email=rsvp.email,
            full_name=(rsvp.full_name or "").strip(),
            event_slug=rsvp.event_slug,
            latest_event=rsvp.latest_event,
            phone=rsvp.phone,
            major=rsvp.major,
            grad_year=rsvp.grad_year,
            notes=rsvp.notes,
            consent=int(rsvp.consent or 0),
        )
