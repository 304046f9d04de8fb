"""Exceptions raised by pollsub."""

from typing import Any, Optional


class PubSubError(Exception):
    """Base class for all pollsub errors."""

    error_type = "pubsub_error"


class InvalidArgumentError(PubSubError, ValueError):
    """A local precondition was violated before any request was made."""

    error_type = "invalid_argument"


class TransportError(PubSubError):
    """
    A request to the messaging backend failed.

    Attributes:
        subscription: Subscription or topic the request was made for
        ack_ids: Ack ids carried by the failed request, if any
        response: Raw response or underlying error from the transport
    """

    error_type = "transport_error"

    def __init__(
        self,
        message: str,
        subscription: Optional[str] = None,
        ack_ids: Optional[list[str]] = None,
        response: Any = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.subscription = subscription
        self.ack_ids = ack_ids
        self.response = response
        self.error_code = error_code
