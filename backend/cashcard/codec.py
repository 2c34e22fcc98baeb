"""
Cash Card Service - JSON Codec
================================

What:  Converts cash cards to and from their wire form `{"id": ..., "amount": ...}`.
How:   Encoding goes through orjson; Decimal values are emitted with
       orjson.Fragment so the decimal's own text becomes the JSON number
       (`1.00` stays `1.00`). Decoding parses JSON floats straight into
       Decimal and validates the shape with CashCardCreate.

Precision:
    Binary floats cannot hold 123.45 or remember that 1.00 had two digits,
    so no float ever appears between the request body and the response body.
"""

import json
from decimal import Decimal
from typing import Any, Iterable, NoReturn

import orjson
from pydantic import ValidationError as PydanticValidationError

from cashcard.exceptions import DecodeError
from cashcard.schemas.cash_card import CashCardCreate, CashCardRecord


def _default(obj: Any) -> Any:
    """orjson fallback: Decimals are written verbatim as JSON numbers."""
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise TypeError(f"Cannot encode non-finite decimal {obj}")
        return orjson.Fragment(str(obj).encode())
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def dumps(content: Any) -> bytes:
    """Serialize `content` to JSON bytes, keeping Decimal precision."""
    return orjson.dumps(content, default=_default)


def record_to_dict(card: CashCardRecord) -> dict:
    return {"id": card.id, "amount": card.amount}


def encode_cash_card(card: CashCardRecord) -> bytes:
    """Encode one card as a JSON object."""
    return dumps(record_to_dict(card))


def encode_cash_cards(cards: Iterable[CashCardRecord]) -> bytes:
    """Encode cards as a JSON array, preserving iteration order."""
    return dumps([record_to_dict(card) for card in cards])


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"{name} is not a valid amount")


def decode_create_request(body: bytes) -> CashCardCreate:
    """
    Decode a POST /cashcards body.

    Raises:
        DecodeError: The body is not JSON, not an object, or does not match
            `{"id": int | null, "amount": number}`.
    """
    try:
        # orjson reads floats as binary doubles; the stdlib parser has the
        # parse_float hook needed to land directly on Decimal.
        payload = json.loads(body, parse_float=Decimal, parse_constant=_reject_constant)
    except ValueError as e:
        raise DecodeError(
            message="Request body must be a JSON object",
            context={"reason": str(e)},
        )

    if not isinstance(payload, dict):
        raise DecodeError(
            message="Request body must be a JSON object",
            context={"received": type(payload).__name__},
        )

    try:
        return CashCardCreate.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise DecodeError(
            message="Request body is not a valid cash card",
            context={"errors": errors},
        )
