"""Messages delivered to consumers."""

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from pollsub.errors import PubSubError
from pollsub.models.response import ReceivedMessage

if TYPE_CHECKING:
    from pollsub.subscription.subscription import Subscription


def decode_data(data: bytes) -> Any:
    """
    Best-effort decode of a message payload.

    Returns the decoded JSON value when the payload is JSON, otherwise the
    UTF-8 text, otherwise the bytes unchanged.
    """
    if not data:
        return data
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return data
    try:
        return json.loads(text)
    except ValueError:
        return text


@dataclass(frozen=True)
class Message:
    """
    A delivered message, bound to the subscription it came from.

    Attributes:
        ack_id: Token identifying this delivery
        id: Message ID assigned by the backend, if any
        data: Decoded payload (see decode_data)
        attributes: Message attributes in the order they were received
        raw_data: Payload bytes as received
    """

    ack_id: str
    id: Optional[str] = None
    data: Any = None
    attributes: dict[str, str] = field(default_factory=dict)
    raw_data: bytes = b""
    subscription: Optional["Subscription"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_received(
        cls, received: ReceivedMessage, subscription: Optional["Subscription"] = None
    ) -> "Message":
        inner = received.message
        return cls(
            ack_id=received.ack_id,
            id=inner.message_id,
            data=decode_data(inner.data),
            attributes=dict(inner.attributes or {}),
            raw_data=inner.data,
            subscription=subscription,
        )

    def _bound(self) -> "Subscription":
        if self.subscription is None:
            raise PubSubError(f"Message {self.ack_id!r} is not bound to a subscription")
        return self.subscription

    async def ack(self) -> Any:
        """Acknowledge this message."""
        return await self._bound().ack(self.ack_id)

    def skip(self) -> None:
        """Free this message's flow-control slot without acknowledging it."""
        self._bound().skip(self.ack_id)

    async def set_ack_deadline(self, seconds: int) -> Any:
        """Ask for seconds more to process this message (0 makes it redeliverable now)."""
        return await self._bound().set_ack_deadline(self.ack_id, seconds)
