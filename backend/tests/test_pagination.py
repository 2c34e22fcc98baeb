"""
Cash Card Service - Pagination Resolver Unit Tests
====================================================

What:  Tests for resolve_page_query and its per-parameter helpers.
How:   Pure functions; no database or HTTP involved.

What we test:
    ✅ Defaults apply per parameter, not as a group
    ✅ offset = page * size
    ✅ Sort field/direction parsing, case-insensitive direction
    ✅ Invalid page/size/sort raise InvalidParameterError
    ✅ Oversized pages are clamped
"""

import pytest

from cashcard.config import settings
from cashcard.exceptions import InvalidParameterError
from cashcard.schemas.cash_card import SortDirection
from cashcard.services.pagination import (
    MAX_OFFSET,
    resolve_page_query,
    resolve_size,
    resolve_sort,
)


class TestDefaults:
    """Each absent parameter falls back to its own default."""

    def test_no_parameters(self):
        query = resolve_page_query()

        assert query.offset == 0
        assert query.limit == 20
        assert query.sort_key == "amount"
        assert query.sort_direction is SortDirection.ASC

    def test_size_only_keeps_default_page_and_sort(self):
        query = resolve_page_query(size="5")

        assert query.offset == 0
        assert query.limit == 5
        assert query.sort_key == "amount"
        assert query.sort_direction is SortDirection.ASC

    def test_page_only_keeps_default_size(self):
        query = resolve_page_query(page="3")

        assert query.limit == 20
        assert query.offset == 60

    def test_sort_only_keeps_default_paging(self):
        query = resolve_page_query(sort="id,desc")

        assert query.offset == 0
        assert query.limit == 20
        assert query.sort_key == "id"
        assert query.sort_direction is SortDirection.DESC

    def test_blank_values_count_as_absent(self):
        query = resolve_page_query(page="", size="  ", sort="")

        assert query.offset == 0
        assert query.limit == 20
        assert query.sort_key == "amount"


class TestOffset:

    def test_offset_is_page_times_size(self):
        query = resolve_page_query(page="2", size="5")

        assert query.offset == 10
        assert query.limit == 5

    def test_first_page_of_one(self):
        query = resolve_page_query(page="0", size="1", sort=["amount,desc"])

        assert query.offset == 0
        assert query.limit == 1
        assert query.sort_direction is SortDirection.DESC


class TestSort:

    def test_field_without_direction_is_ascending(self):
        assert resolve_sort("id") == ("id", SortDirection.ASC)

    def test_direction_is_case_insensitive(self):
        assert resolve_sort("amount,DESC") == ("amount", SortDirection.DESC)
        assert resolve_sort("amount, Asc") == ("amount", SortDirection.ASC)

    def test_single_item_list(self):
        assert resolve_sort(["amount,desc"]) == ("amount", SortDirection.DESC)

    def test_empty_list_uses_default(self):
        assert resolve_sort([]) == ("amount", SortDirection.ASC)

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidParameterError, match="Unknown sort field") as exc_info:
            resolve_sort("colour,desc")
        assert exc_info.value.field == "sort"

    def test_field_names_are_case_sensitive(self):
        with pytest.raises(InvalidParameterError):
            resolve_sort("Amount")

    def test_unknown_direction_rejected(self):
        with pytest.raises(InvalidParameterError, match="Unknown sort direction"):
            resolve_sort("amount,sideways")

    def test_too_many_parts_rejected(self):
        with pytest.raises(InvalidParameterError):
            resolve_sort("amount,id,desc")

    def test_missing_field_rejected(self):
        with pytest.raises(InvalidParameterError):
            resolve_sort(",desc")

    def test_repeated_sort_parameter_rejected(self):
        with pytest.raises(InvalidParameterError, match="Only one sort"):
            resolve_sort(["amount,desc", "id"])


class TestValidation:

    def test_negative_page_rejected(self):
        with pytest.raises(InvalidParameterError, match="page") as exc_info:
            resolve_page_query(page="-1")
        assert exc_info.value.field == "page"

    def test_zero_size_rejected(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve_page_query(size="0")
        assert exc_info.value.field == "size"

    def test_negative_size_rejected(self):
        with pytest.raises(InvalidParameterError):
            resolve_page_query(size="-5")

    def test_non_integer_page_rejected(self):
        with pytest.raises(InvalidParameterError, match="integer"):
            resolve_page_query(page="first")

    def test_fractional_size_rejected(self):
        with pytest.raises(InvalidParameterError, match="integer"):
            resolve_page_query(size="2.5")

    @pytest.mark.parametrize("raw", ["1_000", "\uff15", "+1", "-", "1e3", "0x10"])
    def test_non_decimal_spellings_rejected(self, raw):
        with pytest.raises(InvalidParameterError, match="integer") as exc_info:
            resolve_page_query(page=raw)
        assert exc_info.value.field == "page"

    def test_overlong_digit_string_rejected(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve_page_query(size="9" * 5000)
        assert exc_info.value.field == "size"

    def test_oversized_page_is_clamped(self):
        query = resolve_page_query(size=str(settings.page_max_size + 500))

        assert query.limit == settings.page_max_size

    def test_explicit_limits_override_settings(self):
        assert resolve_size(None, default_size=7, max_size=10) == 7
        assert resolve_size("50", default_size=7, max_size=10) == 10


class TestOffsetLimit:
    """page * size has to fit the database's signed 64-bit OFFSET."""

    def test_largest_offset_accepted(self):
        query = resolve_page_query(page=str(MAX_OFFSET), size="1")

        assert query.offset == MAX_OFFSET

    def test_offset_past_limit_rejected(self):
        with pytest.raises(InvalidParameterError, match="too large") as exc_info:
            resolve_page_query(page=str(MAX_OFFSET + 1), size="1")
        assert exc_info.value.field == "page"

    def test_page_times_size_past_limit_rejected(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve_page_query(page=str(MAX_OFFSET // 2), size="3")
        assert exc_info.value.field == "page"

    def test_huge_size_is_clamped_not_rejected(self):
        query = resolve_page_query(size="99999999999999999999")

        assert query.limit == settings.page_max_size
