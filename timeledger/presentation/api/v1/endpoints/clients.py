"""Client CRUD endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from timeledger.application.schemas.client import (
    ClientCreate,
    ClientPageResponse,
    ClientResponse,
    ClientUpdate,
)
from timeledger.application.services import ClientService
from timeledger.domain.exceptions import EntityNotFoundError, InvalidPaginationError
from timeledger.infrastructure.dependencies import get_client_service, get_current_user_id

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("", response_model=ClientPageResponse)
async def list_clients(
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=500),
    include_inactive: bool = Query(True, description="Include deactivated clients"),
    service: ClientService = Depends(get_client_service),
) -> ClientPageResponse:
    """Retrieve one page of the caller's clients, ordered by name."""
    try:
        result = await service.list_clients(page, page_size, include_inactive=include_inactive)
    except InvalidPaginationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return ClientPageResponse(
        items=[ClientResponse.model_validate(c, from_attributes=True) for c in result.items],
        total_count=result.total_count,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    try:
        client = await service.get_client(client_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ClientResponse.model_validate(client, from_attributes=True)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    data: ClientCreate,
    service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    """Create a new client."""
    client = await service.create_client(data)
    return ClientResponse.model_validate(client, from_attributes=True)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    """Update an existing client."""
    try:
        client = await service.update_client(client_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ClientResponse.model_validate(client, from_attributes=True)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_client(
    client_id: str,
    service: ClientService = Depends(get_client_service),
) -> None:
    """Deactivate a client; its time entries are kept."""
    try:
        await service.deactivate_client(client_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
