"""
Cash Card Service - Resource Handler
======================================

What:  Business logic for the four cash card operations.
How:   Receives a CashCardStore at construction; validates create requests,
       resolves listing parameters via the pagination resolver, and raises
       application exceptions that the API maps to HTTP results.
Who:   Built per request by the route dependency; calls the store.

Operations:
    get_cash_card(id)         → CashCardRecord   | NotFoundError
    create_cash_card(request) → CashCardRecord   | InvalidParameterError
    list_cash_cards(params)   → CashCardPage     | InvalidParameterError

The service keeps no state between calls. Store failures surface as
StorageError untouched.
"""

import logging
from typing import Optional, Sequence, Union

from cashcard.exceptions import InvalidParameterError, NotFoundError
from cashcard.repositories.cash_card_store import CashCardStore
from cashcard.schemas.cash_card import CashCardCreate, CashCardPage, CashCardRecord
from cashcard.services.pagination import resolve_page_query

logger = logging.getLogger(__name__)


class CashCardService:
    """Orchestrates get / create / list against an injected CashCardStore."""

    def __init__(self, store: CashCardStore):
        self.store = store

    async def get_cash_card(self, cash_card_id: int) -> CashCardRecord:
        """
        Retrieve a single cash card.

        Raises:
            NotFoundError: No card has this id (→ empty 404)
            StorageError: The lookup failed (→ 500)
        """
        card = await self.store.get(cash_card_id)
        if card is None:
            logger.info("Cash card %s not found", cash_card_id)
            raise NotFoundError(resource="cash card", resource_id=cash_card_id)
        logger.info("Cash card %s retrieved", cash_card_id)
        return card

    async def create_cash_card(self, request: CashCardCreate) -> CashCardRecord:
        """
        Store a new cash card and return it with its assigned id.

        The caller builds the Location header from the returned id; the
        response itself carries no body.

        Raises:
            InvalidParameterError: The request supplied an id
            StorageError: The insert failed
        """
        if request.id is not None:
            raise InvalidParameterError(
                message="id must not be supplied when creating a cash card",
                field="id",
                context={"id": request.id},
            )

        card = await self.store.insert(request.amount)
        logger.info("Cash card %s created", card.id)
        return card

    async def list_cash_cards(
        self,
        page: Optional[str] = None,
        size: Optional[str] = None,
        sort: Union[None, str, Sequence[str]] = None,
    ) -> CashCardPage:
        """
        List cash cards for the requested page and sort order.

        Args:
            page: Raw `page` query value (None when absent)
            size: Raw `size` query value (None when absent)
            sort: Raw `sort` query value(s) (None when absent)

        Raises:
            InvalidParameterError: A parameter is malformed or out of range
            StorageError: The query failed
        """
        query = resolve_page_query(page=page, size=size, sort=sort)
        result = await self.store.list_page(
            offset=query.offset,
            limit=query.limit,
            sort_key=query.sort_key,
            sort_direction=query.sort_direction,
        )
        logger.info(
            "Listed %d of %d cash cards (offset=%d, limit=%s, sort=%s,%s)",
            len(result.items),
            result.total_count,
            query.offset,
            query.limit,
            query.sort_key,
            query.sort_direction.value,
        )
        return result
