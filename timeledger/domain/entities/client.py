"""Domain entity — a billable client of one account."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


@dataclass
class Client:
    """A client that time is billed against at a fixed hourly rate.

    Clients are never physically removed; ``deactivate`` flips the
    ``is_active`` flag so historical time entries keep their join.
    """

    name: str
    hourly_rate: float
    user_id: str
    currency: str = "USD"
    email: str | None = None
    address: str | None = None
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.hourly_rate < 0:
            raise ValueError("hourly_rate must be non-negative")
        self.currency = self.currency.upper()

    def update(
        self,
        *,
        name: str | None = None,
        hourly_rate: float | None = None,
        currency: str | None = None,
        email: str | None = None,
        address: str | None = None,
        is_active: bool | None = None,
    ) -> None:
        """Update mutable fields and refresh the updated_at timestamp."""
        if name is not None:
            self.name = name
        if hourly_rate is not None:
            if hourly_rate < 0:
                raise ValueError("hourly_rate must be non-negative")
            self.hourly_rate = hourly_rate
        if currency is not None:
            self.currency = currency.upper()
        if email is not None:
            self.email = email
        if address is not None:
            self.address = address
        if is_active is not None:
            self.is_active = is_active
        self.updated_at = datetime.now(timezone.utc)

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = datetime.now(timezone.utc)
