"""Hosted record store client — implements the RecordStoreGateway interface.

Talks to a PostgREST-compatible hosted data API (e.g. a Supabase project's
``/rest/v1`` endpoint) using httpx. Every request carries a ``user_id``
filter so an instance only ever sees the rows of the account it was built for.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any

import httpx

from timeledger.application.interfaces import RecordStoreGateway, check_pagination
from timeledger.domain.entities import Client, Page, TimeEntry
from timeledger.domain.exceptions import EntityNotFoundError, RecordStoreError

logger = logging.getLogger(__name__)

_ENTRY_SELECT = "*,client:clients(*)"


def parse_content_range(header: str | None) -> int | None:
    """Extract the total row count from a ``Content-Range`` header.

    PostgREST answers ``0-99/523`` for a populated range and ``*/0`` for an
    empty one. A missing header or a ``*`` total returns None.
    """
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return None
    return int(total)


def page_total(header: str | None, page: int, page_size: int, row_count: int) -> int:
    """Total row count for a page response.

    Without a usable total, a full page counts one extra row so callers
    keep paging until a short page arrives.
    """
    total = parse_content_range(header)
    if total is not None:
        return total
    seen = (page - 1) * page_size + row_count
    if row_count == page_size:
        logger.debug("No row total in Content-Range %r; assuming page %d is not the last", header, page)
        return seen + 1
    return seen


class HostedRecordStore(RecordStoreGateway):
    """Infrastructure adapter — connects to the hosted data API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_id: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._user_id = user_id
        self._timeout = timeout
        self._http_client = http_client

    @property
    def backend_name(self) -> str:
        return "hosted"

    def _get_headers(self, *, count: bool = False, representation: bool = False) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        prefer: list[str] = []
        if count:
            prefer.append("count=exact")
        if representation:
            prefer.append("return=representation")
        if prefer:
            headers["Prefer"] = ",".join(prefer)
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        count: bool = False,
        representation: bool = False,
    ) -> httpx.Response:
        """Send one request; any transport or HTTP error becomes RecordStoreError."""
        url = f"{self._base_url}/{table}"
        client = self._http_client or httpx.AsyncClient(timeout=self._timeout)
        should_close = self._http_client is None

        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._get_headers(count=count, representation=representation),
            )
        except httpx.HTTPError as exc:
            raise RecordStoreError(self.backend_name, f"{method} {table} failed: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            self._raise_store_error(response)
        return response

    def _raise_store_error(self, response: httpx.Response) -> None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or response.text
        else:
            message = response.text or "Unknown error"
        logger.warning("Hosted store error %d: %s", response.status_code, message)
        raise RecordStoreError(self.backend_name, message, status_code=response.status_code)

    # ── Mapping ─────────────────────────────────────────────────────

    @staticmethod
    def _parse_client(row: dict[str, Any]) -> Client:
        return Client(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            hourly_rate=float(row.get("hourly_rate") or 0),
            currency=row.get("currency") or "USD",
            email=row.get("email"),
            address=row.get("address"),
            is_active=bool(row.get("is_active", True)),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _parse_entry(self, row: dict[str, Any]) -> TimeEntry:
        client_row = row.get("client")
        return TimeEntry(
            id=row["id"],
            user_id=row["user_id"],
            client_id=row["client_id"],
            date=date.fromisoformat(row["date"]),
            hours=float(row["hours"]),
            description=row.get("description") or "",
            client=self._parse_client(client_row) if client_row else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _serialize_client(client: Client) -> dict[str, Any]:
        return {
            "name": client.name,
            "hourly_rate": client.hourly_rate,
            "currency": client.currency,
            "email": client.email,
            "address": client.address,
            "is_active": client.is_active,
        }

    @staticmethod
    def _serialize_entry(entry: TimeEntry) -> dict[str, Any]:
        return {
            "client_id": entry.client_id,
            "date": entry.date.isoformat(),
            "hours": entry.hours,
            "description": entry.description,
        }

    def _scoped(self, **filters: str) -> dict[str, str]:
        params = {"user_id": f"eq.{self._user_id}"}
        params.update(filters)
        return params

    # ── Time entries ────────────────────────────────────────────────

    async def fetch_time_entries(self, page: int = 1, page_size: int = 10) -> Page[TimeEntry]:
        check_pagination(page, page_size)
        params = self._scoped(
            select=_ENTRY_SELECT,
            order="date.desc,created_at.desc",
            offset=str((page - 1) * page_size),
            limit=str(page_size),
        )
        response = await self._request("GET", "time_entries", params=params, count=True)
        rows = response.json()
        total = page_total(response.headers.get("content-range"), page, page_size, len(rows))
        return Page(
            items=[self._parse_entry(row) for row in rows],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def get_time_entry(self, entry_id: str) -> TimeEntry | None:
        params = self._scoped(select=_ENTRY_SELECT, id=f"eq.{entry_id}")
        rows = (await self._request("GET", "time_entries", params=params)).json()
        return self._parse_entry(rows[0]) if rows else None

    async def create_time_entry(self, entry: TimeEntry) -> TimeEntry:
        body = {"id": entry.id, "user_id": self._user_id, **self._serialize_entry(entry)}
        response = await self._request(
            "POST",
            "time_entries",
            params={"select": _ENTRY_SELECT},
            json=body,
            representation=True,
        )
        return self._parse_entry(response.json()[0])

    async def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        params = self._scoped(select=_ENTRY_SELECT, id=f"eq.{entry.id}")
        response = await self._request(
            "PATCH",
            "time_entries",
            params=params,
            json=self._serialize_entry(entry),
            representation=True,
        )
        rows = response.json()
        if not rows:
            raise EntityNotFoundError("TimeEntry", entry.id)
        return self._parse_entry(rows[0])

    async def delete_time_entry(self, entry_id: str) -> bool:
        params = self._scoped(id=f"eq.{entry_id}")
        response = await self._request(
            "DELETE", "time_entries", params=params, representation=True
        )
        return bool(response.json())

    # ── Clients ─────────────────────────────────────────────────────

    async def fetch_clients(
        self, page: int = 1, page_size: int = 100, *, include_inactive: bool = True
    ) -> Page[Client]:
        check_pagination(page, page_size)
        params = self._scoped(
            select="*",
            order="name.asc",
            offset=str((page - 1) * page_size),
            limit=str(page_size),
        )
        if not include_inactive:
            params["is_active"] = "is.true"
        response = await self._request("GET", "clients", params=params, count=True)
        rows = response.json()
        total = page_total(response.headers.get("content-range"), page, page_size, len(rows))
        return Page(
            items=[self._parse_client(row) for row in rows],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def get_client(self, client_id: str) -> Client | None:
        params = self._scoped(select="*", id=f"eq.{client_id}")
        rows = (await self._request("GET", "clients", params=params)).json()
        return self._parse_client(rows[0]) if rows else None

    async def create_client(self, client: Client) -> Client:
        body = {"id": client.id, "user_id": self._user_id, **self._serialize_client(client)}
        response = await self._request("POST", "clients", json=body, representation=True)
        return self._parse_client(response.json()[0])

    async def update_client(self, client: Client) -> Client:
        params = self._scoped(id=f"eq.{client.id}")
        response = await self._request(
            "PATCH",
            "clients",
            params=params,
            json=self._serialize_client(client),
            representation=True,
        )
        rows = response.json()
        if not rows:
            raise EntityNotFoundError("Client", client.id)
        return self._parse_client(rows[0])

    async def deactivate_client(self, client_id: str) -> bool:
        params = self._scoped(id=f"eq.{client_id}")
        response = await self._request(
            "PATCH",
            "clients",
            params=params,
            json={"is_active": False, "updated_at": datetime.now(timezone.utc).isoformat()},
            representation=True,
        )
        return bool(response.json())
