"""Pydantic DTOs for the TimeEntry feature."""

import datetime as dt

from pydantic import BaseModel, Field

from .client import ClientResponse


class TimeEntryCreate(BaseModel):
    """Schema for recording hours against a client."""

    client_id: str = Field(..., min_length=1, max_length=36)
    date: dt.date
    hours: float = Field(..., gt=0, le=24, examples=[7.5])
    description: str = Field("", max_length=2000)


class TimeEntryUpdate(BaseModel):
    """Schema for updating a time entry — all fields optional."""

    client_id: str | None = Field(None, min_length=1, max_length=36)
    date: dt.date | None = None
    hours: float | None = Field(None, gt=0, le=24)
    description: str | None = Field(None, max_length=2000)


class TimeEntryResponse(BaseModel):
    id: str
    user_id: str
    client_id: str
    date: dt.date
    hours: float
    description: str
    created_at: dt.datetime
    updated_at: dt.datetime
    client: ClientResponse | None = None

    model_config = {"from_attributes": True}


class TimeEntryPageResponse(BaseModel):
    items: list[TimeEntryResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int
