from sqlalchemy import LargeBinary, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp, UUIDPrimaryKey


class Rsvp(UUIDPrimaryKey, TimeStamp, Base):
    __tablename__ = TableNames.RSVPS.value

    # Event the record was created for; never updated afterwards
    event_slug: Mapped[str] = mapped_column(String(100), nullable=False)
    # Moved on every resubmission
    latest_event: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    major: Mapped[str | None] = mapped_column(String(120), nullable=True)
    grad_year: Mapped[str | None] = mapped_column(String(4), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    consent: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)

    ip: Mapped[bytes | None] = mapped_column(LargeBinary(16), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Rsvp {self.email} - {self.latest_event}>"
