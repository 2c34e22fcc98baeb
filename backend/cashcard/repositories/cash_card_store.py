"""
Cash Card Service - Record Store
==================================

What:  Abstract contract for cash card persistence plus the SQLAlchemy
       implementation used by the API.
How:   CashCardService receives a CashCardStore at construction. The
       SQLAlchemy store works on the request's AsyncSession and wraps every
       driver failure in StorageError.

Contract:
    get(id)           → CashCardRecord | None    (no side effects)
    insert(amount)    → CashCardRecord           (id assigned by the database, committed)
    list_page(...)    → CashCardPage             (ordered slice + total count)

Ordering:
    Rows are ordered by the requested field and direction, then by id
    ascending, so equal amounts always come back in the same order.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import Numeric, asc, cast, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cashcard.exceptions import StorageError
from cashcard.models.cash_card import MAX_CASH_CARD_ID, CashCard
from cashcard.schemas.cash_card import CashCardPage, CashCardRecord, SortDirection

logger = logging.getLogger(__name__)

# Columns a listing may be ordered by, keyed by their wire names.
# The amount is compared as a number even where it is stored as text.
SORTABLE_COLUMNS = {
    "id": CashCard.id,
    "amount": cast(CashCard.amount, Numeric()),
}

# Failures raised while talking to the database or converting its rows
_STORAGE_FAILURES = (SQLAlchemyError, OSError, ArithmeticError, PydanticValidationError)


class CashCardStore(ABC):
    """
    Persistence contract for cash cards.

    Implementations must guarantee that concurrent insert() calls never
    produce the same id.
    """

    @abstractmethod
    async def get(self, cash_card_id: int) -> Optional[CashCardRecord]:
        """Return the card with the given id, or None if it does not exist."""
        ...

    @abstractmethod
    async def insert(self, amount: Decimal) -> CashCardRecord:
        """
        Persist a new card and return it with its assigned id.

        Raises:
            StorageError: The store is unavailable or the insert failed.
        """
        ...

    @abstractmethod
    async def list_page(
        self,
        offset: int,
        limit: Optional[int],
        sort_key: str,
        sort_direction: SortDirection,
    ) -> CashCardPage:
        """
        Return at most `limit` cards starting at `offset`.

        Args:
            offset: Number of rows to skip
            limit: Maximum rows to return; None returns every remaining row
            sort_key: One of the record's field names
            sort_direction: Primary ordering direction (ties fall back to id ASC)
        """
        ...


class SqlAlchemyCashCardStore(CashCardStore):
    """CashCardStore backed by the `cash_card` table through an AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, cash_card_id: int) -> Optional[CashCardRecord]:
        # Ids outside the BIGINT range were never assigned
        if not -MAX_CASH_CARD_ID - 1 <= cash_card_id <= MAX_CASH_CARD_ID:
            return None

        try:
            result = await self._session.execute(
                select(CashCard).where(CashCard.id == cash_card_id)
            )
            row = result.scalar_one_or_none()
            record = None if row is None else CashCardRecord.model_validate(row)
        except _STORAGE_FAILURES as e:
            logger.error("Database error fetching cash card %s: %s", cash_card_id, str(e))
            raise StorageError(
                message="Could not retrieve the cash card. Please try again.",
                context={"cash_card_id": cash_card_id, "error_type": type(e).__name__},
            ) from e

        return record

    async def insert(self, amount: Decimal) -> CashCardRecord:
        # Each insert is its own transaction; the commit makes the new id
        # visible to the follow-up GET on the Location header.
        card = CashCard(amount=amount)
        try:
            self._session.add(card)
            await self._session.flush()
            await self._session.commit()
            record = CashCardRecord(id=card.id, amount=card.amount)
        except _STORAGE_FAILURES as e:
            logger.error("Database error inserting cash card: %s", str(e), exc_info=True)
            await self._session.rollback()
            raise StorageError(
                message="Could not save the cash card. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return record

    async def list_page(
        self,
        offset: int,
        limit: Optional[int],
        sort_key: str,
        sort_direction: SortDirection,
    ) -> CashCardPage:
        column = SORTABLE_COLUMNS.get(sort_key)
        if column is None:
            # The resolver only emits known keys; anything else is a caller bug
            raise ValueError(f"Unsupported sort key: {sort_key!r}")

        order = desc(column) if sort_direction is SortDirection.DESC else asc(column)
        query = select(CashCard).order_by(order, asc(CashCard.id)).offset(offset)
        if limit is not None:
            query = query.limit(limit)

        try:
            result = await self._session.execute(query)
            items = [CashCardRecord.model_validate(row) for row in result.scalars().all()]

            count_result = await self._session.execute(
                select(func.count()).select_from(CashCard)
            )
            total_count = count_result.scalar() or 0
        except _STORAGE_FAILURES as e:
            logger.error("Database error listing cash cards: %s", str(e), exc_info=True)
            raise StorageError(
                message="Could not retrieve cash cards. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return CashCardPage(
            items=items,
            total_count=total_count,
        )
