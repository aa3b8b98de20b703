"""Domain entity — hours worked for a client on one calendar day."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import uuid4

from .client import Client


@dataclass
class TimeEntry:
    """Hours recorded against a client.

    ``client`` is the joined client snapshot when the record store returns
    one; it stays ``None`` for unjoined rows.
    """

    client_id: str
    date: date
    hours: float
    user_id: str
    description: str = ""
    client: Client | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.hours <= 0:
            raise ValueError("hours must be positive")

    @property
    def amount(self) -> float:
        """Billable amount; zero when no client is joined."""
        if self.client is None:
            return 0.0
        return self.hours * self.client.hourly_rate

    def update(
        self,
        *,
        client_id: str | None = None,
        date: date | None = None,
        hours: float | None = None,
        description: str | None = None,
    ) -> None:
        """Update mutable fields and refresh the updated_at timestamp."""
        if client_id is not None and client_id != self.client_id:
            self.client_id = client_id
            self.client = None
        if date is not None:
            self.date = date
        if hours is not None:
            if hours <= 0:
                raise ValueError("hours must be positive")
            self.hours = hours
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(timezone.utc)
