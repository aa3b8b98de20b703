"""Application service (use case) for Client operations."""

from timeledger.application.interfaces import RecordStoreGateway
from timeledger.application.schemas.client import ClientCreate, ClientUpdate
from timeledger.domain.entities import Client, Page
from timeledger.domain.exceptions import EntityNotFoundError


class ClientService:
    """Orchestrates client CRUD logic. Depends on the record store port (DI)."""

    def __init__(self, gateway: RecordStoreGateway, user_id: str):
        self._gateway = gateway
        self._user_id = user_id

    async def get_client(self, client_id: str) -> Client:
        client = await self._gateway.get_client(client_id)
        if client is None:
            raise EntityNotFoundError("Client", client_id)
        return client

    async def list_clients(
        self, page: int = 1, page_size: int = 100, *, include_inactive: bool = True
    ) -> Page[Client]:
        return await self._gateway.fetch_clients(
            page, page_size, include_inactive=include_inactive
        )

    async def create_client(self, data: ClientCreate) -> Client:
        client = Client(
            name=data.name,
            hourly_rate=data.hourly_rate,
            currency=data.currency,
            email=data.email,
            address=data.address,
            user_id=self._user_id,
        )
        return await self._gateway.create_client(client)

    async def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        client = await self.get_client(client_id)
        client.update(**data.model_dump(exclude_unset=True, exclude_none=True))
        return await self._gateway.update_client(client)

    async def deactivate_client(self, client_id: str) -> None:
        """Soft delete — the client row stays so its time entries keep their join."""
        if not await self._gateway.deactivate_client(client_id):
            raise EntityNotFoundError("Client", client_id)
