"""Pydantic schemas for the reports API."""

import datetime as dt

from pydantic import BaseModel


class MonthlyReportSchema(BaseModel):
    month: int
    month_name: str
    total_hours: float
    total_amount: float
    entries_count: int

    model_config = {"from_attributes": True}


class ClientReportSchema(BaseModel):
    client_id: str
    client_name: str
    total_hours: float
    total_amount: float
    entries_count: int

    model_config = {"from_attributes": True}


class ReportSummaryResponse(BaseModel):
    """Aggregate totals plus monthly and per-client breakdowns."""

    total_hours: float
    total_amount: float
    entries_count: int
    monthly_reports: list[MonthlyReportSchema]
    client_reports: list[ClientReportSchema]

    model_config = {"from_attributes": True}


class DetailRowSchema(BaseModel):
    date: dt.date
    client_name: str
    description: str
    hours: float
    amount: float
    currency: str

    model_config = {"from_attributes": True}
