"""
Cash Card Service - Pydantic Schemas
======================================

What:  Pydantic models for records, request bodies, the pagination query
       descriptor, and error/health responses.
How:   The store returns CashCardRecord values (never ORM rows); the
       resolver produces PageQuery; the codec validates CashCardCreate.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Digits an amount may span, counting integer and fractional positions
AMOUNT_MAX_DIGITS = 38


def amount_digits(value: Decimal) -> int:
    """Positional digits needed to write `value` out without an exponent."""
    sign, digits, exponent = value.as_tuple()
    if exponent >= 0:
        return len(digits) + exponent
    return max(len(digits), -exponent)


# ══════════════════════════════════════════════════════════════════════════
# Records
# ══════════════════════════════════════════════════════════════════════════


class CashCardRecord(BaseModel):
    """
    A cash card as stored: `{id, amount}`.

    `id` is None only for cards that have not been persisted yet.
    """
    id: Optional[int] = Field(default=None, description="Store-assigned identifier")
    amount: Decimal = Field(description="Card balance, decimal precision preserved")

    model_config = ConfigDict(from_attributes=True, frozen=True)


class CashCardCreate(BaseModel):
    """
    Body of POST /cashcards.

    `id` is accepted by the shape so the service can reject it with a
    precise error; clients must leave it out or send null.
    """
    id: Optional[int] = Field(
        default=None,
        strict=True,
        description="Must be omitted or null; the store assigns ids",
    )
    amount: Decimal = Field(description="Card balance as a JSON number")

    model_config = ConfigDict(extra="forbid")

    @field_validator("amount", mode="before")
    @classmethod
    def amount_must_be_number(cls, v: Any) -> Decimal:
        """
        Only JSON numbers are amounts; strings and booleans are rejected.

        Amounts longer than AMOUNT_MAX_DIGITS (e.g. 1e400) are rejected.
        """
        if isinstance(v, bool) or not isinstance(v, (int, Decimal)):
            raise ValueError("amount must be a JSON number")
        amount = Decimal(v)
        if not amount.is_finite():
            raise ValueError("amount must be a finite number")
        if amount_digits(amount) > AMOUNT_MAX_DIGITS:
            raise ValueError(f"amount must have at most {AMOUNT_MAX_DIGITS} digits")
        return amount


class CashCardPage(BaseModel):
    """One ordered slice of cash cards plus the total number stored."""
    items: List[CashCardRecord] = Field(description="Records in resolved sort order")
    total_count: int = Field(description="Number of cash cards in the store")


# ══════════════════════════════════════════════════════════════════════════
# Query Descriptor
# ══════════════════════════════════════════════════════════════════════════


class SortDirection(str, Enum):
    """Sort direction tokens accepted in `sort=<field>,<direction>`."""
    ASC = "asc"
    DESC = "desc"


class PageQuery(BaseModel):
    """
    Normalized listing request produced by the pagination resolver.

    offset = page * size, limit = size. A None limit means "all rows".
    """
    offset: int = Field(ge=0)
    limit: Optional[int] = Field(default=None, ge=1)
    sort_key: str
    sort_direction: SortDirection

    model_config = ConfigDict(frozen=True)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Responses
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every failure except 404.

    Example:
        {
            "error": "invalid_parameter",
            "message": "page must not be negative",
            "details": {"field": "page"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for load balancers and monitoring."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
