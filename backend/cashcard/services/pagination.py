"""
Cash Card Service - Pagination/Sort Resolver
==============================================

What:  Turns raw `page`, `size` and `sort` query parameters into a validated
       PageQuery descriptor.
How:   Each parameter is defaulted on its own, parsed, range-checked, and
       combined into {offset, limit, sort_key, sort_direction}.
Who:   Called by CashCardService.list_cash_cards().

Parameter Rules:
    page: integer >= 0, default 0
    size: integer >= 1, default settings.page_default_size (20),
          values above settings.page_max_size are clamped to it
    sort: "<field>" or "<field>,<asc|desc>", default "amount,asc"
          field ∈ SORTABLE_FIELDS; direction is case-insensitive

    Blank values (`?page=`) are treated as absent. page * size must fit a
    signed 64-bit row offset. Any violation raises
    InvalidParameterError, which the API maps to 400.

Examples:
    resolve_page_query()                                  → offset=0,  limit=20, amount asc
    resolve_page_query(page="2", size="5")                → offset=10, limit=5,  amount asc
    resolve_page_query(page="0", size="1", sort=["amount,desc"])
                                                          → offset=0,  limit=1,  amount desc
"""

from typing import Optional, Sequence, Tuple, Union

from cashcard.config import settings
from cashcard.exceptions import InvalidParameterError
from cashcard.schemas.cash_card import PageQuery, SortDirection

DEFAULT_PAGE = 0
DEFAULT_SORT_KEY = "amount"
DEFAULT_SORT_DIRECTION = SortDirection.ASC

# Record fields a listing may be ordered by
SORTABLE_FIELDS = ("id", "amount")

# Largest row offset a database accepts (signed 64-bit)
MAX_OFFSET = 2**63 - 1


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _parse_int(name: str, raw: str) -> int:
    """Parse an optionally negative run of ASCII digits."""
    value = raw.strip()
    digits = value[1:] if value.startswith("-") else value
    try:
        # int() would also take "1_000", "+1" and non-ASCII digits
        if not (value.isascii() and digits.isdigit()):
            raise ValueError(value)
        return int(value)
    except ValueError:
        raise InvalidParameterError(
            message=f"{name} must be an integer, got '{raw}'",
            field=name,
        )


def resolve_page(raw: Optional[str]) -> int:
    """Parse `page`; absent means the first page."""
    if _blank(raw):
        return DEFAULT_PAGE
    page = _parse_int("page", raw)
    if page < 0:
        raise InvalidParameterError(message="page must not be negative", field="page")
    return page


def resolve_size(
    raw: Optional[str],
    default_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> int:
    """Parse `size`; absent means the configured default, oversized values are clamped."""
    default_size = default_size or settings.page_default_size
    max_size = max_size or settings.page_max_size
    if _blank(raw):
        return default_size
    size = _parse_int("size", raw)
    if size < 1:
        raise InvalidParameterError(message="size must be at least 1", field="size")
    return min(size, max_size)


def resolve_sort(raw: Union[None, str, Sequence[str]]) -> Tuple[str, SortDirection]:
    """
    Parse `sort` into (field, direction).

    Accepts a single string or the list FastAPI collects for a repeated
    query parameter. Only one sort parameter is allowed.
    """
    if raw is not None and not isinstance(raw, str):
        values = [value for value in raw if not _blank(value)]
        if len(values) > 1:
            raise InvalidParameterError(
                message="Only one sort parameter is supported",
                field="sort",
                context={"sort": list(values)},
            )
        raw = values[0] if values else None

    if _blank(raw):
        return DEFAULT_SORT_KEY, DEFAULT_SORT_DIRECTION

    parts = [part.strip() for part in raw.split(",")]
    if len(parts) > 2 or not parts[0]:
        raise InvalidParameterError(
            message=f"sort must look like '<field>' or '<field>,<asc|desc>', got '{raw}'",
            field="sort",
        )

    field = parts[0]
    if field not in SORTABLE_FIELDS:
        raise InvalidParameterError(
            message=(
                f"Unknown sort field '{field}'. "
                f"Sortable fields: {', '.join(sorted(SORTABLE_FIELDS))}"
            ),
            field="sort",
        )

    direction = DEFAULT_SORT_DIRECTION
    if len(parts) == 2:
        try:
            direction = SortDirection(parts[1].lower())
        except ValueError:
            raise InvalidParameterError(
                message=f"Unknown sort direction '{parts[1]}'. Use 'asc' or 'desc'",
                field="sort",
            )
    return field, direction


def resolve_page_query(
    page: Optional[str] = None,
    size: Optional[str] = None,
    sort: Union[None, str, Sequence[str]] = None,
) -> PageQuery:
    """
    Build the normalized listing descriptor from raw query parameters.

    Raises:
        InvalidParameterError: Any parameter is malformed or out of range.
    """
    page_number = resolve_page(page)
    page_size = resolve_size(size)
    sort_key, sort_direction = resolve_sort(sort)

    offset = page_number * page_size
    if offset > MAX_OFFSET:
        raise InvalidParameterError(
            message=f"page is too large; page * size must not exceed {MAX_OFFSET}",
            field="page",
            context={"page": page_number, "size": page_size},
        )

    return PageQuery(
        offset=offset,
        limit=page_size,
        sort_key=sort_key,
        sort_direction=sort_direction,
    )
