"""RabbitMQ adapter for pollsub transport protocols."""

from pollsub.adapters.rabbitmq.publisher import RabbitMQPublisher
from pollsub.adapters.rabbitmq.subscriber import RabbitMQSubscriber

__all__ = ["RabbitMQPublisher", "RabbitMQSubscriber"]
