"""Card CRUD endpoints."""
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_identity
from api.helpers import build_list_options, serialize_records
from api.routers.decks import MAX_PAGE_LIMIT, deck_service
from schemas.auth import Identity
from schemas.card import CardCreate, CardResponse, CardUpdate
from schemas.envelope import ApiResponse
from services.exceptions import NotFoundError

router = APIRouter(prefix="/api/cards", tags=["cards"])

card_service = deck_service.card_service


@router.get("", response_model=ApiResponse[list[dict[str, Any]]], response_model_exclude_none=True)
async def list_cards(
    request: Request,
    page: int | None = Query(default=None, ge=1, description="1-indexed page number"),
    limit: int | None = Query(default=None, ge=1, le=MAX_PAGE_LIMIT, description="Page size"),
    sort: str | None = Query(default=None, description="Sort as field or field:asc|desc"),
    fields: str | None = Query(default=None, description="Comma-separated fields to return"),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[dict[str, Any]]]:
    """List the caller's cards. Extra query parameters filter by equality (e.g. ?deck_id=...)."""
    options = build_list_options(request, page, limit, sort, fields, include_archived=False)
    cards = await card_service.list_records(db, identity.user_id, options)
    data = serialize_records(cards, CardResponse, options.fields)
    return ApiResponse(data=data, results=len(data))


@router.post(
    "",
    response_model=ApiResponse[CardResponse],
    response_model_exclude_none=True,
    status_code=201,
)
async def create_card(
    data: CardCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CardResponse]:
    """Create a card in one of the caller's non-archived decks."""
    card = await card_service.create_with_deck_validation(db, identity.user_id, data.model_dump())
    return ApiResponse(data=CardResponse.model_validate(card))


@router.get(
    "/{card_id}",
    response_model=ApiResponse[CardResponse],
    response_model_exclude_none=True,
)
async def get_card(
    card_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CardResponse]:
    """Get a single card by ID."""
    card = await card_service.get_by_id(db, identity.user_id, card_id)
    return ApiResponse(data=CardResponse.model_validate(card))


@router.patch(
    "/{card_id}",
    response_model=ApiResponse[CardResponse],
    response_model_exclude_none=True,
)
async def update_card(
    card_id: UUID,
    data: CardUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CardResponse]:
    """Update a card. Setting deck_id moves it; the target deck must not be archived."""
    card = await card_service.update_with_deck_validation(
        db, identity.user_id, card_id, data.model_dump(exclude_unset=True),
    )
    return ApiResponse(data=CardResponse.model_validate(card))


@router.delete("/{card_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_card(
    card_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[None]:
    """Permanently delete a card."""
    if not await card_service.delete(db, identity.user_id, card_id):
        raise NotFoundError(card_service.entity_name, card_id)
    return ApiResponse(message="Card deleted successfully")
