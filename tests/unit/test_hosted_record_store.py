"""Unit tests for the HostedRecordStore (PostgREST-style data API client)."""

import json
from datetime import date, datetime

import httpx
import pytest

from timeledger.domain.entities import Client, ReportFilters, TimeEntry
from timeledger.domain.exceptions import (
    EntityNotFoundError,
    InvalidPaginationError,
    RecordStoreError,
    ReportGenerationError,
)
from timeledger.application.services import ReportService
from timeledger.infrastructure.hosted_store.hosted_record_store import (
    HostedRecordStore,
    page_total,
    parse_content_range,
)


# ── Helpers ──

_STAMP = "2024-01-15T10:00:00+00:00"


def _client_row(client_id: str = "c1", name: str = "TechCorp", rate: float = 85) -> dict:
    return {
        "id": client_id,
        "user_id": "user-1",
        "name": name,
        "hourly_rate": rate,
        "currency": "USD",
        "email": None,
        "address": None,
        "is_active": True,
        "created_at": _STAMP,
        "updated_at": _STAMP,
    }


def _entry_row(entry_id: str, day: str, hours: float, client: dict | None = None) -> dict:
    return {
        "id": entry_id,
        "user_id": "user-1",
        "client_id": client["id"] if client else "missing",
        "date": day,
        "hours": hours,
        "description": f"Work {entry_id}",
        "created_at": _STAMP,
        "updated_at": _STAMP,
        "client": client,
    }


class _PagedHandler:
    """Serves ``rows`` honoring offset/limit and records every request.

    With ``with_total=False`` the ``Content-Range`` total is ``*``, as when
    the count preference is ignored.
    """

    def __init__(self, rows: list[dict], *, with_total: bool = True):
        self.rows = rows
        self.with_total = with_total
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        offset = int(request.url.params.get("offset", 0))
        limit = int(request.url.params.get("limit", len(self.rows)))
        chunk = self.rows[offset : offset + limit]
        total = len(self.rows) if self.with_total else "*"
        if chunk:
            content_range = f"{offset}-{offset + len(chunk) - 1}/{total}"
        else:
            content_range = f"*/{total}"
        return httpx.Response(200, json=chunk, headers={"Content-Range": content_range})


def _store(handler) -> HostedRecordStore:
    return HostedRecordStore(
        base_url="https://example.supabase.co/rest/v1/",
        api_key="test-key",
        user_id="user-1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


# ── Content-Range ──


@pytest.mark.parametrize(
    "header,expected",
    [("0-9/523", 523), ("*/0", 0), ("0-9/*", None), (None, None), ("garbage", None)],
)
def test_parse_content_range(header: str | None, expected: int | None):
    assert parse_content_range(header) == expected


@pytest.mark.parametrize(
    "header,page,rows,expected",
    [
        ("0-9/523", 1, 10, 523),
        ("0-9/*", 1, 10, 11),
        (None, 3, 10, 31),
        ("20-23/*", 3, 4, 24),
        ("*/*", 4, 0, 30),
    ],
)
def test_page_total_keeps_paging_while_total_unknown(header: str | None, page: int, rows: int, expected: int):
    assert page_total(header, page, 10, rows) == expected


@pytest.mark.asyncio
async def test_report_without_row_total_still_reads_every_page():
    client = _client_row()
    handler = _PagedHandler(
        [_entry_row(f"e{i}", "2024-03-01", 1, client) for i in range(250)], with_total=False
    )

    summary = await ReportService(_store(handler), page_size=100).generate_report(ReportFilters(year=2024))

    assert [r.url.params["offset"] for r in handler.requests] == ["0", "100", "200"]
    assert summary.entries_count == 250
    assert summary.total_hours == 250


@pytest.mark.asyncio
async def test_full_last_page_without_row_total_costs_one_empty_request():
    client = _client_row()
    handler = _PagedHandler(
        [_entry_row(f"e{i}", "2024-03-01", 1, client) for i in range(20)], with_total=False
    )

    entries = await ReportService(_store(handler), page_size=10).fetch_all_time_entries()

    assert len(entries) == 20
    assert len(handler.requests) == 3


@pytest.mark.asyncio
async def test_fetch_clients_without_row_total_reports_more_pages():
    handler = _PagedHandler([_client_row(f"c{i}", f"Client {i}") for i in range(5)], with_total=False)
    store = _store(handler)

    first = await store.fetch_clients(page=1, page_size=5)
    second = await store.fetch_clients(page=2, page_size=5)

    assert first.has_more
    assert second.items == []
    assert second.total_count == 5
    assert not second.has_more


# ── Reads ──


@pytest.mark.asyncio
async def test_fetch_time_entries_sends_scoped_paged_query():
    client = _client_row()
    handler = _PagedHandler([_entry_row(f"e{i}", "2024-01-15", 1, client) for i in range(25)])
    store = _store(handler)

    page = await store.fetch_time_entries(page=2, page_size=10)

    request = handler.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/time_entries"
    assert request.url.params["user_id"] == "eq.user-1"
    assert request.url.params["offset"] == "10"
    assert request.url.params["limit"] == "10"
    assert request.url.params["order"] == "date.desc,created_at.desc"
    assert request.headers["apikey"] == "test-key"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert "count=exact" in request.headers["Prefer"]

    assert page.total_count == 25
    assert page.total_pages == 3
    assert page.has_more
    assert [e.id for e in page.items] == [f"e{i}" for i in range(10, 20)]
    assert page.items[0].client.name == "TechCorp"
    assert page.items[0].amount == 85


@pytest.mark.asyncio
async def test_entry_without_client_parses_with_no_join():
    handler = _PagedHandler([_entry_row("e1", "2024-02-01", 3, None)])
    page = await _store(handler).fetch_time_entries()
    assert page.items[0].client is None
    assert page.items[0].date == date(2024, 2, 1)


@pytest.mark.asyncio
async def test_report_service_pages_through_hosted_store():
    client = _client_row()
    handler = _PagedHandler([_entry_row(f"e{i}", "2024-03-01", 2, client) for i in range(23)])
    service = ReportService(_store(handler), page_size=10)

    summary = await service.generate_report(ReportFilters(year=2024))

    assert len(handler.requests) == 3
    assert summary.entries_count == 23
    assert summary.total_hours == 46
    assert summary.total_amount == 46 * 85


@pytest.mark.asyncio
async def test_fetch_clients_active_only_filter():
    handler = _PagedHandler([_client_row("c1", "Alpha"), _client_row("c2", "Beta")])
    page = await _store(handler).fetch_clients(include_inactive=False)

    params = handler.requests[0].url.params
    assert params["is_active"] == "is.true"
    assert params["order"] == "name.asc"
    assert [c.name for c in page.items] == ["Alpha", "Beta"]


@pytest.mark.asyncio
async def test_get_client_missing_returns_none():
    store = _store(lambda request: httpx.Response(200, json=[]))
    assert await store.get_client("nope") is None


@pytest.mark.asyncio
async def test_page_zero_rejected_before_any_request():
    handler = _PagedHandler([])
    with pytest.raises(InvalidPaginationError):
        await _store(handler).fetch_time_entries(page=0)
    assert handler.requests == []


# ── Writes ──


@pytest.mark.asyncio
async def test_create_time_entry_posts_owned_row():
    captured: list[httpx.Request] = []
    client = _client_row()

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        body = json.loads(request.content)
        return httpx.Response(201, json=[{**_entry_row(body["id"], body["date"], body["hours"], client)}])

    entry = TimeEntry(client_id="c1", date=date(2024, 4, 2), hours=1.5, user_id="someone-else")
    created = await _store(handler).create_time_entry(entry)

    body = json.loads(captured[0].content)
    assert captured[0].method == "POST"
    assert body["user_id"] == "user-1"
    assert body["date"] == "2024-04-02"
    assert "return=representation" in captured[0].headers["Prefer"]
    assert created.id == entry.id
    assert created.client.name == "TechCorp"


@pytest.mark.asyncio
async def test_deactivate_client_patches_flag():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[{**_client_row(), "is_active": False}])

    assert await _store(handler).deactivate_client("c1") is True
    assert captured[0].method == "PATCH"
    assert captured[0].url.params["id"] == "eq.c1"
    body = json.loads(captured[0].content)
    assert body["is_active"] is False
    assert datetime.fromisoformat(body["updated_at"]).tzinfo is not None


@pytest.mark.asyncio
async def test_delete_missing_entry_returns_false():
    store = _store(lambda request: httpx.Response(200, json=[]))
    assert await store.delete_time_entry("nope") is False


@pytest.mark.asyncio
async def test_update_of_vanished_rows_raises_not_found():
    store = _store(lambda request: httpx.Response(200, json=[]))
    entry = TimeEntry(client_id="c1", date=date(2024, 4, 2), hours=1.5, user_id="user-1")

    with pytest.raises(EntityNotFoundError) as exc_info:
        await store.update_time_entry(entry)
    assert exc_info.value.entity_type == "TimeEntry"

    with pytest.raises(EntityNotFoundError):
        await store.update_client(Client(name="Gone", hourly_rate=10, user_id="user-1"))


# ── Errors ──


@pytest.mark.asyncio
async def test_http_error_raises_record_store_error():
    store = _store(lambda request: httpx.Response(401, json={"message": "Invalid API key"}))
    with pytest.raises(RecordStoreError) as exc_info:
        await store.fetch_time_entries()
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid API key"
    assert exc_info.value.backend == "hosted"


@pytest.mark.asyncio
async def test_transport_error_raises_record_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RecordStoreError):
        await _store(handler).fetch_time_entries()


@pytest.mark.asyncio
async def test_failure_mid_pagination_fails_whole_report():
    client = _client_row()
    rows = [_entry_row(f"e{i}", "2024-03-01", 2, client) for i in range(15)]
    paged = _PagedHandler(rows)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("offset") == "10":
            return httpx.Response(503, text="upstream unavailable")
        return paged(request)

    with pytest.raises(ReportGenerationError):
        await ReportService(_store(handler), page_size=10).generate_report(ReportFilters(year=2024))
