"""RabbitMQ publisher implementing PubSubPublisher protocol."""

import uuid
from typing import Optional

import pika
from pika.adapters.blocking_connection import BlockingChannel
from pika.exceptions import AMQPError

from pollsub.errors import TransportError
from pollsub.models.response import PublishFuture


class RabbitMQPublisher:
    """
    RabbitMQ publisher implementing PubSubPublisher protocol.

    Topic format: "queue_name" or "exchange_name:routing_key"
    If no routing key provided, publishes directly to queue (default exchange).
    Message attributes travel as AMQP headers.
    """

    def __init__(self, connection: pika.BlockingConnection):
        self._connection = connection
        self._channel: BlockingChannel = connection.channel()

    def publish(self, topic: str, data: bytes, attributes: Optional[dict[str, str]] = None) -> PublishFuture:
        """
        Publish a message to a RabbitMQ queue or exchange.

        Args:
            topic: Queue name, or "exchange:routing_key" format
            data: Message data as bytes
            attributes: Message attributes, sent as headers

        Returns:
            PublishFuture with the generated message ID
        """
        # Parse topic as "exchange:routing_key" or just "queue_name"
        if ":" in topic:
            exchange, routing_key = topic.split(":", 1)
        else:
            exchange = ""
            routing_key = topic

        # RabbitMQ doesn't assign message IDs, so generate one
        message_id = uuid.uuid4().hex

        try:
            self._channel.basic_publish(
                exchange=exchange,
                routing_key=routing_key,
                body=data,
                properties=pika.BasicProperties(
                    delivery_mode=2,  # Persistent
                    message_id=message_id,
                    headers=dict(attributes) if attributes else None,
                ),
            )
        except AMQPError as err:
            raise TransportError(f"Publish to {topic} failed: {err!r}", subscription=topic, response=err) from err

        return PublishFuture(message_id=message_id)
