"""Hosted data API infrastructure package."""

from .hosted_record_store import HostedRecordStore

__all__ = ["HostedRecordStore"]
