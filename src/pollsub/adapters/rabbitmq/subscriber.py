"""RabbitMQ subscriber implementing PubSubSubscriber protocol."""

import logging
from typing import Any, Optional

import pika
from pika.adapters.blocking_connection import BlockingChannel
from pika.exceptions import AMQPError

from pollsub.errors import TransportError
from pollsub.models.request import PullRequest, AcknowledgeRequest, ModifyAckDeadlineRequest
from pollsub.models.response import RawMessage, ReceivedMessage, PullResponse

logger = logging.getLogger(__name__)


def _attributes(properties: Optional[pika.BasicProperties]) -> dict[str, str]:
    headers = getattr(properties, "headers", None) or {}
    return {
        key: value.decode("utf-8") if isinstance(value, bytes) else str(value)
        for key, value in headers.items()
    }


class RabbitMQSubscriber:
    """
    RabbitMQ subscriber implementing PubSubSubscriber protocol.

    The subscription name is the queue name. Maps delivery_tag to ack_id for
    acknowledge() calls. RabbitMQ has no ack deadlines: a deadline of 0
    requeues the messages, any other deadline leaves them outstanding.

    A delivery tag is remembered until the message is acked or requeued.
    Messages a consumer skips stay unacked on the channel, and their tags
    stay here, until a 0-second deadline requeues them or the channel
    closes. Consumers that skip should release the message that way.
    """

    def __init__(self, connection: pika.BlockingConnection):
        self._connection = connection
        self._channel: BlockingChannel = connection.channel()
        # Map ack_id (str) -> delivery_tag (int) for acknowledge
        self._pending_acks: dict[str, int] = {}

    def pull(self, request: PullRequest, timeout: float) -> PullResponse:
        """
        Pull up to max_messages messages from a RabbitMQ queue.

        Unless return_immediately is set, waits up to timeout seconds for the
        first message, then returns whatever else is ready without waiting.

        Args:
            request: PullRequest with subscription (queue name)
            timeout: Timeout in seconds (used as inactivity timeout)

        Returns:
            PullResponse with received messages
        """
        queue = request["subscription"]
        max_messages = request["max_messages"]

        received_messages: list[ReceivedMessage] = []
        try:
            if not request.get("return_immediately", False):
                self._wait_for_first(queue, timeout, received_messages)
                if not received_messages:
                    return PullResponse(received_messages=received_messages)

            while len(received_messages) < max_messages:
                method, properties, body = self._channel.basic_get(queue=queue, auto_ack=False)
                if method is None:
                    break
                received_messages.append(self._received(method, properties, body))
        except AMQPError as err:
            raise TransportError(f"Pull from {queue} failed: {err!r}", subscription=queue, response=err) from err

        return PullResponse(received_messages=received_messages)

    def _wait_for_first(self, queue: str, timeout: float, received_messages: list[ReceivedMessage]) -> None:
        # Use consume() with inactivity_timeout for proper timeout behavior
        for method, properties, body in self._channel.consume(
            queue=queue,
            auto_ack=False,
            inactivity_timeout=timeout,
        ):
            if method is None:
                # Timeout reached, no message available
                break

            received_messages.append(self._received(method, properties, body))
            break

        # Cancel consumer to allow reuse; unconsumed prefetched messages are requeued
        self._channel.cancel()

    def _received(self, method: Any, properties: Optional[pika.BasicProperties], body: bytes) -> ReceivedMessage:
        # Create ack_id from delivery_tag
        ack_id = str(method.delivery_tag)
        self._pending_acks[ack_id] = method.delivery_tag

        return ReceivedMessage(
            message=RawMessage(
                data=body,
                message_id=getattr(properties, "message_id", None),
                attributes=_attributes(properties),
            ),
            ack_id=ack_id,
        )

    def acknowledge(self, request: AcknowledgeRequest) -> None:
        """
        Acknowledge messages by their ack_ids.

        Args:
            request: AcknowledgeRequest with subscription and ack_ids
        """
        try:
            for ack_id in request["ack_ids"]:
                delivery_tag = self._pending_acks.pop(ack_id, None)
                if delivery_tag is not None:
                    self._channel.basic_ack(delivery_tag=delivery_tag)
        except AMQPError as err:
            raise TransportError(
                f"Acknowledge on {request['subscription']} failed: {err!r}",
                subscription=request["subscription"],
                ack_ids=list(request["ack_ids"]),
                response=err,
            ) from err

    def modify_ack_deadline(self, request: ModifyAckDeadlineRequest) -> None:
        """
        Requeue messages when the deadline is 0; otherwise keep them outstanding.

        Args:
            request: ModifyAckDeadlineRequest with subscription, ack_ids and seconds
        """
        if request["ack_deadline_seconds"] > 0:
            logger.debug("RabbitMQ has no ack deadlines, keeping %d messages outstanding", len(request["ack_ids"]))
            return

        try:
            for ack_id in request["ack_ids"]:
                delivery_tag = self._pending_acks.pop(ack_id, None)
                if delivery_tag is not None:
                    self._channel.basic_nack(delivery_tag=delivery_tag, requeue=True)
        except AMQPError as err:
            raise TransportError(
                f"Requeue on {request['subscription']} failed: {err!r}",
                subscription=request["subscription"],
                ack_ids=list(request["ack_ids"]),
                response=err,
            ) from err

    def delete(self, subscription: str) -> None:
        """
        Delete the queue backing a subscription.

        Args:
            subscription: Queue name
        """
        try:
            self._channel.queue_delete(queue=subscription)
        except AMQPError as err:
            raise TransportError(f"Delete of {subscription} failed: {err!r}", subscription=subscription, response=err) from err
        self._pending_acks.clear()
