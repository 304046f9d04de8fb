"""Entry point creating topic and subscription handles."""

from typing import Any, Optional

import pika

from pollsub.adapters.rabbitmq import RabbitMQPublisher, RabbitMQSubscriber
from pollsub.adapters.threaded import ThreadedPublisher, ThreadedSubscriber, WorkerThread
from pollsub.errors import InvalidArgumentError
from pollsub.models.config import SubscriberConfig
from pollsub.names import SUBSCRIPTIONS, TOPICS, format_name
from pollsub.protocols.publisher import AsyncPubSubPublisher
from pollsub.protocols.subscriber import AsyncPubSubSubscriber
from pollsub.subscription import Subscription
from pollsub.topic import Topic


class PubSub:
    """
    Creates Topic and Subscription handles bound to a pair of transports.

    Args:
        publisher: Async publisher adapter
        subscriber: Async subscriber adapter
        project_id: Project used to build full resource names
    """

    def __init__(
        self,
        publisher: AsyncPubSubPublisher,
        subscriber: AsyncPubSubSubscriber,
        project_id: Optional[str] = None,
    ):
        self.publisher = publisher
        self.subscriber = subscriber
        self.project_id = project_id

    @classmethod
    def from_rabbitmq(cls, connection: pika.BlockingConnection) -> "PubSub":
        """Build a client on top of a blocking RabbitMQ connection."""
        worker = WorkerThread("pollsub-rabbitmq")
        return cls(
            publisher=ThreadedPublisher(RabbitMQPublisher(connection), worker=worker),
            subscriber=ThreadedSubscriber(RabbitMQSubscriber(connection), worker=worker),
        )

    def topic(self, name: str) -> Topic:
        if not name:
            raise InvalidArgumentError("A name must be specified for a new topic.")
        return Topic(
            format_name(self.project_id, name, TOPICS),
            self.publisher,
            self.subscriber,
            project_id=self.project_id,
        )

    def subscription(
        self, name: str, config: Optional[SubscriberConfig] = None, **options: Any
    ) -> Subscription:
        if not name:
            raise InvalidArgumentError("A name must be specified for a subscription.")
        return Subscription(
            format_name(self.project_id, name, SUBSCRIPTIONS),
            self.subscriber,
            config=config,
            **options,
        )
