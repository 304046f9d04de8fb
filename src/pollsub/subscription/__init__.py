"""Pull subscriptions with flow control."""

from pollsub.subscription.message import Message
from pollsub.subscription.subscription import Subscription
from pollsub.subscription.listeners import ListenerHandle

__all__ = ["Message", "Subscription", "ListenerHandle"]
