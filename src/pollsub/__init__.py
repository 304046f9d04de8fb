"""Pull-based pub-sub consumer with flow control."""

from pollsub.client import PubSub
from pollsub.errors import InvalidArgumentError, PubSubError, TransportError
from pollsub.models.config import SubscriberConfig
from pollsub.subscription import ListenerHandle, Message, Subscription
from pollsub.topic import Topic

__all__ = [
    "InvalidArgumentError",
    "ListenerHandle",
    "Message",
    "PubSub",
    "PubSubError",
    "SubscriberConfig",
    "Subscription",
    "Topic",
    "TransportError",
]
