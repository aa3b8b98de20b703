"""Time entry CRUD endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from timeledger.application.schemas.time_entry import (
    TimeEntryCreate,
    TimeEntryPageResponse,
    TimeEntryResponse,
    TimeEntryUpdate,
)
from timeledger.application.services import TimeEntryService
from timeledger.domain.exceptions import EntityNotFoundError, InvalidPaginationError
from timeledger.infrastructure.dependencies import get_current_user_id, get_time_entry_service

router = APIRouter(
    prefix="/time-entries",
    tags=["Time Entries"],
    dependencies=[Depends(get_current_user_id)],
)


@router.get("", response_model=TimeEntryPageResponse)
async def list_time_entries(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500),
    service: TimeEntryService = Depends(get_time_entry_service),
) -> TimeEntryPageResponse:
    """Retrieve one page of the caller's time entries, newest first."""
    try:
        result = await service.list_time_entries(page, page_size)
    except InvalidPaginationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return TimeEntryPageResponse(
        items=[TimeEntryResponse.model_validate(e, from_attributes=True) for e in result.items],
        total_count=result.total_count,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/{entry_id}", response_model=TimeEntryResponse)
async def get_time_entry(
    entry_id: str,
    service: TimeEntryService = Depends(get_time_entry_service),
) -> TimeEntryResponse:
    try:
        entry = await service.get_time_entry(entry_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return TimeEntryResponse.model_validate(entry, from_attributes=True)


@router.post("", response_model=TimeEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_time_entry(
    data: TimeEntryCreate,
    service: TimeEntryService = Depends(get_time_entry_service),
) -> TimeEntryResponse:
    """Record hours against one of the caller's clients."""
    try:
        entry = await service.create_time_entry(data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return TimeEntryResponse.model_validate(entry, from_attributes=True)


@router.put("/{entry_id}", response_model=TimeEntryResponse)
async def update_time_entry(
    entry_id: str,
    data: TimeEntryUpdate,
    service: TimeEntryService = Depends(get_time_entry_service),
) -> TimeEntryResponse:
    try:
        entry = await service.update_time_entry(entry_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return TimeEntryResponse.model_validate(entry, from_attributes=True)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(
    entry_id: str,
    service: TimeEntryService = Depends(get_time_entry_service),
) -> None:
    try:
        await service.delete_time_entry(entry_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
