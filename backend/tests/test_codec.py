"""
Cash Card Service - Codec Unit Tests
======================================

What:  Tests for JSON encoding/decoding of cash cards.

What we test:
    ✅ Decimal amounts are written verbatim (1.00 stays 1.00)
    ✅ Array order follows input order
    ✅ Create bodies decode to Decimal without float rounding
    ✅ Malformed bodies raise DecodeError
"""

import json
from decimal import Decimal

import pytest

from cashcard.codec import (
    decode_create_request,
    dumps,
    encode_cash_card,
    encode_cash_cards,
)
from cashcard.exceptions import DecodeError
from cashcard.schemas.cash_card import CashCardRecord


class TestEncode:

    def test_single_card(self):
        card = CashCardRecord(id=99, amount=Decimal("123.45"))

        assert encode_cash_card(card) == b'{"id":99,"amount":123.45}'

    def test_trailing_zeros_preserved(self):
        card = CashCardRecord(id=100, amount=Decimal("1.00"))

        assert encode_cash_card(card) == b'{"id":100,"amount":1.00}'

    def test_unsaved_card_has_null_id(self):
        card = CashCardRecord(amount=Decimal("250.00"))

        assert encode_cash_card(card) == b'{"id":null,"amount":250.00}'

    def test_list_keeps_order(self):
        cards = [
            CashCardRecord(id=101, amount=Decimal("150.00")),
            CashCardRecord(id=99, amount=Decimal("123.45")),
            CashCardRecord(id=100, amount=Decimal("1.00")),
        ]

        decoded = json.loads(encode_cash_cards(cards), parse_float=Decimal)

        assert [item["id"] for item in decoded] == [101, 99, 100]
        assert [str(item["amount"]) for item in decoded] == ["150.00", "123.45", "1.00"]

    def test_empty_list(self):
        assert encode_cash_cards([]) == b"[]"

    def test_non_finite_decimal_rejected(self):
        with pytest.raises(TypeError):
            dumps({"amount": Decimal("NaN")})


class TestDecode:

    def test_amount_only(self):
        request = decode_create_request(b'{"amount": 250.00}')

        assert request.id is None
        assert request.amount == Decimal("250.00")
        assert str(request.amount) == "250.00"

    def test_explicit_null_id(self):
        request = decode_create_request(b'{"id": null, "amount": 123.45}')

        assert request.id is None
        assert str(request.amount) == "123.45"

    def test_integer_amount(self):
        request = decode_create_request(b'{"amount": 7}')

        assert request.amount == Decimal(7)

    def test_negative_amount_is_not_validated(self):
        request = decode_create_request(b'{"amount": -12.50}')

        assert request.amount == Decimal("-12.50")

    def test_supplied_id_is_decoded_for_the_service_to_reject(self):
        request = decode_create_request(b'{"id": 42, "amount": 1.00}')

        assert request.id == 42

    @pytest.mark.parametrize("amount", ["123.45", "1.00", "0.10", "-3.5"])
    def test_round_trip_keeps_precision(self, amount):
        original = CashCardRecord(amount=Decimal(amount))

        decoded = decode_create_request(encode_cash_card(original))

        assert decoded.amount == original.amount
        assert str(decoded.amount) == amount

    def test_missing_amount(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_create_request(b'{"id": null}')
        assert exc_info.value.context["errors"][0]["field"] == "amount"

    def test_string_amount_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b'{"amount": "12.00"}')

    def test_boolean_amount_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b'{"amount": true}')

    def test_null_amount_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b'{"amount": null}')

    def test_nan_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b'{"amount": NaN}')

    def test_non_integer_id_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b'{"id": "abc", "amount": 1.00}')

    def test_unknown_key_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b'{"amount": 1.00, "owner": "sarah1"}')

    def test_array_body_rejected(self):
        with pytest.raises(DecodeError, match="JSON object"):
            decode_create_request(b'[{"amount": 1.00}]')

    def test_malformed_json_rejected(self):
        with pytest.raises(DecodeError, match="JSON object"):
            decode_create_request(b'{"amount": ')

    def test_empty_body_rejected(self):
        with pytest.raises(DecodeError):
            decode_create_request(b"")


class TestAmountRange:
    """Amounts must fit AMOUNT_MAX_DIGITS positional digits."""

    def test_more_than_two_decimals_kept(self):
        request = decode_create_request(b'{"amount": 123.456}')

        assert str(request.amount) == "123.456"

    def test_longest_amount_accepted(self):
        amount = "1234567890123456789.0123456789012345678"
        request = decode_create_request(b'{"amount": %s}' % amount.encode())

        assert str(request.amount) == amount

    @pytest.mark.parametrize(
        "body",
        [
            b'{"amount": 1e400}',
            b'{"amount": -1e400}',
            b'{"amount": 1e-400}',
            b'{"amount": 100000000000000000000000000000000000000}',
            b'{"amount": 0.000000000000000000000000000000000000001}',
        ],
    )
    def test_out_of_range_rejected(self, body):
        with pytest.raises(DecodeError) as exc_info:
            decode_create_request(body)
        assert exc_info.value.context["errors"][0]["field"] == "amount"
