"""SQLAlchemy ORM model for the TimeEntry entity."""

import datetime as dt

from sqlalchemy import Date, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeledger.infrastructure.database.base import Base, TimestampMixin
from timeledger.infrastructure.database.models.client import ClientModel


class TimeEntryModel(TimestampMixin, Base):
    """ORM model — maps to the 'time_entries' table."""

    __tablename__ = "time_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    client_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("clients.id"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    hours: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    client: Mapped[ClientModel | None] = relationship(lazy="raise")

    __table_args__ = (
        Index("ix_time_entries_user_date", "user_id", "date"),
        Index("ix_time_entries_client", "client_id"),
    )

    def __repr__(self) -> str:
        return f"<TimeEntryModel(id={self.id}, date={self.date}, hours={self.hours})>"
