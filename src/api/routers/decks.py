"""Deck CRUD endpoints."""
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_identity
from api.helpers import build_list_options, serialize_records
from schemas.auth import Identity
from schemas.card import CardResponse
from schemas.deck import DeckCreate, DeckDeleteResponse, DeckResponse, DeckUpdate
from schemas.envelope import ApiResponse
from services.deck_service import DeckService, DeleteOutcome

router = APIRouter(prefix="/api/decks", tags=["decks"])

deck_service = DeckService()

MAX_PAGE_LIMIT = 100


@router.get("", response_model=ApiResponse[list[dict[str, Any]]], response_model_exclude_none=True)
async def list_decks(
    request: Request,
    page: int | None = Query(default=None, ge=1, description="1-indexed page number"),
    limit: int | None = Query(default=None, ge=1, le=MAX_PAGE_LIMIT, description="Page size"),
    sort: str | None = Query(default=None, description="Sort as field or field:asc|desc"),
    fields: str | None = Query(default=None, description="Comma-separated fields to return"),
    include_archived: bool = Query(default=False, description="Include archived decks"),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[dict[str, Any]]]:
    """
    List the caller's decks.

    Archived decks are hidden unless include_archived=true or an explicit
    archived filter is given. Any other query parameter is an equality filter
    (e.g. ?slug=spanish).
    """
    options = build_list_options(request, page, limit, sort, fields, include_archived)
    decks = await deck_service.list_records(db, identity.user_id, options)
    data = serialize_records(decks, DeckResponse, options.fields)
    return ApiResponse(data=data, results=len(data))


@router.post(
    "",
    response_model=ApiResponse[DeckResponse],
    response_model_exclude_none=True,
    status_code=201,
)
async def create_deck(
    data: DeckCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckResponse]:
    """Create a deck. The slug is derived from the name."""
    deck = await deck_service.create(db, identity.user_id, data.model_dump())
    return ApiResponse(data=DeckResponse.model_validate(deck))


@router.get(
    "/slug/{slug}",
    response_model=ApiResponse[DeckResponse],
    response_model_exclude_none=True,
)
async def get_deck_by_slug(
    slug: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckResponse]:
    """Get a deck by its slug."""
    deck = await deck_service.get_by_slug(db, identity.user_id, slug)
    return ApiResponse(data=DeckResponse.model_validate(deck))


@router.get(
    "/{deck_id}",
    response_model=ApiResponse[DeckResponse],
    response_model_exclude_none=True,
)
async def get_deck(
    deck_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckResponse]:
    """Get a single deck by ID, archived or not."""
    deck = await deck_service.get_by_id(db, identity.user_id, deck_id)
    return ApiResponse(data=DeckResponse.model_validate(deck))


@router.get(
    "/{deck_id}/cards",
    response_model=ApiResponse[list[dict[str, Any]]],
    response_model_exclude_none=True,
)
async def list_deck_cards(
    deck_id: UUID,
    request: Request,
    page: int | None = Query(default=None, ge=1),
    limit: int | None = Query(default=None, ge=1, le=MAX_PAGE_LIMIT),
    sort: str | None = Query(default=None),
    fields: str | None = Query(default=None),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[dict[str, Any]]]:
    """List the cards of one of the caller's decks."""
    options = build_list_options(request, page, limit, sort, fields, include_archived=False)
    cards = await deck_service.get_cards(db, identity.user_id, deck_id, options)
    data = serialize_records(cards, CardResponse, options.fields)
    return ApiResponse(data=data, results=len(data))


@router.patch(
    "/{deck_id}",
    response_model=ApiResponse[DeckResponse],
    response_model_exclude_none=True,
)
async def update_deck(
    deck_id: UUID,
    data: DeckUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckResponse]:
    """Update a deck's name or archived flag. The slug is not regenerated."""
    deck = await deck_service.update(
        db, identity.user_id, deck_id, data.model_dump(exclude_unset=True),
    )
    return ApiResponse(data=DeckResponse.model_validate(deck))


@router.post(
    "/{deck_id}/archive",
    response_model=ApiResponse[DeckResponse],
    response_model_exclude_none=True,
)
async def archive_deck(
    deck_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckResponse]:
    """Archive a deck. Idempotent."""
    deck = await deck_service.archive(db, identity.user_id, deck_id)
    return ApiResponse(data=DeckResponse.model_validate(deck))


@router.post(
    "/{deck_id}/unarchive",
    response_model=ApiResponse[DeckResponse],
    response_model_exclude_none=True,
)
async def unarchive_deck(
    deck_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckResponse]:
    """Unarchive a deck. Idempotent."""
    deck = await deck_service.unarchive(db, identity.user_id, deck_id)
    return ApiResponse(data=DeckResponse.model_validate(deck))


@router.delete(
    "/{deck_id}",
    response_model=ApiResponse[DeckDeleteResponse],
    response_model_exclude_none=True,
)
async def delete_deck(
    deck_id: UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeckDeleteResponse]:
    """
    Delete a deck.

    A deck that still contains cards is archived instead; the response outcome
    says which happened.
    """
    result = await deck_service.delete(db, identity.user_id, deck_id)
    if result.outcome == DeleteOutcome.ARCHIVED:
        return ApiResponse(
            message="Deck contains cards and was archived instead of deleted",
            data=DeckDeleteResponse(
                outcome=result.outcome.value,
                deck=DeckResponse.model_validate(result.deck),
            ),
        )
    return ApiResponse(
        message="Deck deleted successfully",
        data=DeckDeleteResponse(outcome=result.outcome.value),
    )
