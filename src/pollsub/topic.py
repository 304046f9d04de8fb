"""Topics: publishing messages and opening subscriptions."""

import json
import logging
from typing import Any, Iterable, Mapping, Optional, Union

from pollsub.errors import InvalidArgumentError
from pollsub.models.config import SubscriberConfig
from pollsub.names import SUBSCRIPTIONS, format_name
from pollsub.protocols.publisher import AsyncPubSubPublisher
from pollsub.protocols.subscriber import AsyncPubSubSubscriber
from pollsub.subscription import Subscription

logger = logging.getLogger(__name__)

OutgoingMessage = Mapping[str, Any]


def encode_data(data: Any) -> bytes:
    """Bytes are sent as they are; anything else is sent as JSON."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return json.dumps(data).encode("utf-8")


class Topic:
    """
    A topic that messages are published to.

    Args:
        name: Topic name passed to the publisher
        publisher: Async publisher adapter
        subscriber: Async subscriber adapter used by subscription()
        project_id: Project that short subscription names are qualified with
    """

    def __init__(
        self,
        name: str,
        publisher: AsyncPubSubPublisher,
        subscriber: Optional[AsyncPubSubSubscriber] = None,
        project_id: Optional[str] = None,
    ):
        if not name:
            raise InvalidArgumentError("A name must be specified for a new topic.")
        self.name = name
        self.publisher = publisher
        self.subscriber = subscriber
        self.project_id = project_id

    async def publish(self, messages: Union[OutgoingMessage, Iterable[OutgoingMessage]]) -> list[str]:
        """
        Publish one or more messages.

        Each message is a mapping with a ``data`` key and an optional
        ``attributes`` mapping.

        Returns:
            Message IDs in publish order
        """
        if messages is None:
            messages = []
        elif isinstance(messages, Mapping):
            messages = [messages]
        else:
            messages = list(messages)

        if not messages:
            raise InvalidArgumentError("Cannot publish without a message.")
        if any("data" not in message for message in messages):
            raise InvalidArgumentError("Cannot publish message without a `data` property.")

        message_ids = []
        for message in messages:
            future = await self.publisher.publish(
                self.name,
                encode_data(message["data"]),
                attributes=dict(message.get("attributes") or {}),
            )
            message_ids.append(future.result())

        logger.debug("Published %d messages to %s", len(message_ids), self.name)
        return message_ids

    def subscription(
        self, name: str, config: Optional[SubscriberConfig] = None, **options: Any
    ) -> Subscription:
        """
        Return a Subscription handle using this topic's subscriber adapter.

        Names are formatted like PubSub.subscription() formats them.
        """
        if not name:
            raise InvalidArgumentError("A name must be specified for a subscription.")
        if self.subscriber is None:
            raise InvalidArgumentError(f"Topic {self.name} has no subscriber adapter.")
        return Subscription(
            format_name(self.project_id, name, SUBSCRIPTIONS),
            self.subscriber,
            config=config,
            **options,
        )

    def __repr__(self) -> str:
        return f"<Topic {self.name}>"
