"""Structured error records for pub-sub failures."""

import traceback
from typing import Optional

from pollsub.models.base import CamelCaseModel


class ErrorDetails(CamelCaseModel):
    """Additional structured error details."""

    subscription: Optional[str] = None
    ack_ids: Optional[list[str]] = None
    error_code: Optional[str] = None
    stack_trace: Optional[str] = None


class ErrorInfo(CamelCaseModel):
    """Structured error information."""

    type: str  # Error type (invalid_argument, transport_error, listener_error, etc.)
    message: str
    details: Optional[ErrorDetails] = None

    @classmethod
    def from_exception(cls, exc: BaseException, error_type: Optional[str] = None) -> "ErrorInfo":
        """
        Build an ErrorInfo describing an exception.

        Args:
            exc: The exception to describe
            error_type: Overrides the type taken from the exception

        Returns:
            ErrorInfo with details filled from the exception's attributes
        """
        stack_trace = None
        if exc.__traceback__ is not None:
            stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        details = ErrorDetails(
            subscription=getattr(exc, "subscription", None),
            ack_ids=getattr(exc, "ack_ids", None),
            error_code=getattr(exc, "error_code", None),
            stack_trace=stack_trace,
        )
        return cls(
            type=error_type or getattr(exc, "error_type", "unexpected_error"),
            message=str(exc),
            details=details,
        )
