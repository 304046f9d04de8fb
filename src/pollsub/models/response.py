"""Response models for pub-sub transports."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class RawMessage:
    """Message payload as delivered by a transport."""

    data: bytes
    message_id: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class ReceivedMessage:
    """One delivery of a message, identified by its ack_id."""

    message: RawMessage
    ack_id: str


@dataclass
class PullResponse:
    """Pull response container."""

    received_messages: list[ReceivedMessage] = field(default_factory=list)


@dataclass
class PublishFuture:
    """Future-like object for publish result."""

    message_id: str

    def result(self) -> str:
        """Return the message ID (blocking call for compatibility)."""
        return self.message_id
