"""Pydantic DTOs (Data Transfer Objects) for the Client feature."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ClientCreate(BaseModel):
    """Schema for creating a new client."""

    name: str = Field(..., min_length=1, max_length=255, examples=["TechCorp Solutions"])
    hourly_rate: float = Field(..., ge=0, examples=[85])
    currency: str = Field("USD", min_length=3, max_length=3, examples=["USD"])
    email: str | None = Field(None, max_length=255)
    address: str | None = None

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()


class ClientUpdate(BaseModel):
    """Schema for updating an existing client — all fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    hourly_rate: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    email: str | None = Field(None, max_length=255)
    address: str | None = None
    is_active: bool | None = None

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None


class ClientResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    user_id: str
    name: str
    hourly_rate: float
    currency: str
    email: str | None
    address: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClientPageResponse(BaseModel):
    items: list[ClientResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int
