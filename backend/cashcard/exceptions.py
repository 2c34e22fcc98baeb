"""
Cash Card Service - Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for each failure the API can report.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the matching HTTP status code.
Who:   Raised by the codec, resolver, service and store; caught by handlers.

Exception Hierarchy:
    CashCardError (base)            → 500 Internal Server Error
    ├── InvalidParameterError       → 400 Bad Request
    ├── DecodeError                 → 400 Bad Request
    ├── NotFoundError               → 404 Not Found (empty body)
    └── StorageError                → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class CashCardError(Exception):
    """
    Base exception for all cash card application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidParameterError(CashCardError):
    """
    Raised when request input is malformed or forbidden.

    When:    Client-supplied id on create, unknown sort field or direction,
             negative page, non-positive size, non-integer page/size.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "invalid_parameter",
            "message": "Unknown sort field 'colour'. Sortable fields: amount, id",
            "details": {"field": "sort"}
        }
    """

    def __init__(
        self,
        message: str = "Invalid request parameter",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DecodeError(CashCardError):
    """
    Raised when a request body cannot be decoded into a cash card.

    When:    Body is not JSON, not an object, `amount` missing or not a
             number, `id` not an integer, unexpected keys.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Request body is not a valid cash card",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CashCardError):
    """
    Raised when a requested cash card does not exist.

    HTTP:    404 Not Found with an empty body. Not an error condition for
             the server, so handlers log it at INFO.
    """

    def __init__(
        self,
        resource: str = "cash card",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(CashCardError):
    """
    Raised when the underlying store is unavailable or a query fails.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The driver error
    type and query details stay in `context` and the server log.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
