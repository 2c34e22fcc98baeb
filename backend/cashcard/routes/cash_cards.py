"""
Cash Card Service - Cash Card Route Handlers
==============================================

What:  GET /cashcards/{id}, POST /cashcards, GET /cashcards.
How:   Builds a CashCardService around the request's store, delegates, and
       writes the response body with the codec so decimal amounts keep
       their precision.

Responses:
    GET  /cashcards/{id}  200 record | 404 empty
    POST /cashcards       201 empty, Location: /cashcards/{id} | 400
    GET  /cashcards       200 array (+ X-Total-Count) | 400
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cashcard.codec import decode_create_request, encode_cash_card, encode_cash_cards
from cashcard.database import get_db_session
from cashcard.repositories.cash_card_store import SqlAlchemyCashCardStore
from cashcard.schemas.cash_card import CashCardCreate, CashCardRecord, ErrorResponse
from cashcard.services.cash_card_service import CashCardService

logger = logging.getLogger(__name__)

RESOURCE_ROOT = "/cashcards"

router = APIRouter(prefix=RESOURCE_ROOT, tags=["Cash Cards"])


def get_cash_card_service(
    db: AsyncSession = Depends(get_db_session),
) -> CashCardService:
    """Wire a CashCardService to a store over this request's session."""
    return CashCardService(SqlAlchemyCashCardStore(db))


@router.get(
    "/{cash_card_id}",
    responses={
        200: {"description": "The cash card", "model": CashCardRecord},
        404: {"description": "No cash card with this id (empty body)"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a cash card by id",
)
async def get_cash_card(
    cash_card_id: int,
    service: CashCardService = Depends(get_cash_card_service),
) -> Response:
    card = await service.get_cash_card(cash_card_id)
    return Response(content=encode_cash_card(card), media_type="application/json")


@router.post(
    "",
    status_code=201,
    responses={
        201: {"description": "Created; Location header points at the new card"},
        400: {"description": "Body supplied an id or is not a valid cash card", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a cash card",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": CashCardCreate.model_json_schema()}},
        }
    },
)
async def create_cash_card(
    request: Request,
    service: CashCardService = Depends(get_cash_card_service),
) -> Response:
    """
    Create a cash card from `{"amount": <number>}`.

    The body is read raw and decoded by the codec; FastAPI's own body
    parsing would turn the amount into a float.
    """
    payload = decode_create_request(await request.body())
    card = await service.create_cash_card(payload)
    return Response(
        status_code=201,
        headers={"Location": f"{RESOURCE_ROOT}/{card.id}"},
    )


@router.get(
    "",
    responses={
        200: {"description": "Cash cards in the resolved sort order", "model": List[CashCardRecord]},
        400: {"description": "Invalid page, size or sort", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List cash cards with pagination and sorting",
    description=(
        "Query parameters: page (>= 0, default 0), size (>= 1, default 20), "
        "sort (`<field>[,asc|desc]`, default `amount,asc`). "
        "The X-Total-Count header carries the number of stored cards."
    ),
)
async def list_cash_cards(
    page: Optional[str] = Query(default=None, description="Zero-based page index"),
    size: Optional[str] = Query(default=None, description="Page size"),
    sort: Optional[List[str]] = Query(
        default=None,
        description="Sort order, e.g. `amount,desc`. Sortable fields: id, amount",
    ),
    service: CashCardService = Depends(get_cash_card_service),
) -> Response:
    result = await service.list_cash_cards(page=page, size=size, sort=sort)
    return Response(
        content=encode_cash_cards(result.items),
        media_type="application/json",
        headers={"X-Total-Count": str(result.total_count)},
    )
