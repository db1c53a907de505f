"""Fulfillment error kinds.

Raised by the service layer when a stage fails. Each edge translates them:
the HTTP API into status codes, the activities into Temporal
ApplicationErrors, and the gateways back into these exceptions on the
calling side.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    NOT_FOUND = "NotFound"
    ITEM_UNAVAILABLE = "ItemUnavailable"
    PAYMENT_DECLINED = "PaymentDeclined"
    TRANSPORT_FAILURE = "TransportFailure"


class FulfillmentError(Exception):
    """Base class for every stage failure. Carries a human-readable message."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT
    http_status: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(FulfillmentError):
    """Malformed or missing caller-supplied fields. Never retried automatically."""

    kind = ErrorKind.INVALID_INPUT
    http_status = 400


class NotFoundError(FulfillmentError):
    """Catalog lookup miss."""

    kind = ErrorKind.NOT_FOUND
    http_status = 404


class ItemUnavailableError(FulfillmentError):
    """Valid restaurant, item not on its menu."""

    kind = ErrorKind.ITEM_UNAVAILABLE
    http_status = 400


class PaymentDeclinedError(FulfillmentError):
    """Expected, retryable outcome of the payment stage."""

    kind = ErrorKind.PAYMENT_DECLINED
    http_status = 402


class TransportFailureError(FulfillmentError):
    """Network or connectivity failure, as opposed to a stage's own failure."""

    kind = ErrorKind.TRANSPORT_FAILURE
    http_status = 502


class InvalidTransitionError(Exception):
    """A tracker flag was moved in a way the tracker does not allow."""


_BY_KIND: dict[ErrorKind, type[FulfillmentError]] = {
    cls.kind: cls
    for cls in (
        InvalidInputError,
        NotFoundError,
        ItemUnavailableError,
        PaymentDeclinedError,
        TransportFailureError,
    )
}


def error_for_kind(kind: str | None, message: str) -> FulfillmentError:
    """Rebuild the exception matching a serialized error kind.

    Unknown or missing kinds collapse to TransportFailureError: the remote
    side answered with something that is not a stage failure.
    """
    try:
        cls = _BY_KIND[ErrorKind(kind)]
    except ValueError:
        cls = TransportFailureError
    return cls(message)
