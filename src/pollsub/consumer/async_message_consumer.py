"""Generic async message consumer built on a Subscription."""

import asyncio
import logging
from typing import Optional, Type

from pydantic import BaseModel, ValidationError

from pollsub.protocols.handler import AsyncMessageHandler
from pollsub.subscription import ListenerHandle, Message, Subscription

logger = logging.getLogger(__name__)


class AsyncMessageConsumer:
    """
    Generic asynchronous message consumer.

    Responsibilities:
    - Listen on a subscription (which polls and applies flow control)
    - Validate decoded JSON payloads (using Pydantic)
    - Route to async handler
    - Acknowledge handled messages

    Messages that fail validation or whose handler raises are skipped, not
    acknowledged, so the backend redelivers them after their ack deadline.
    """

    def __init__(
        self,
        subscription: Subscription,
        handler: AsyncMessageHandler,
        request_model: Type[BaseModel],
    ):
        """
        Initialize async message consumer.

        Args:
            subscription: Subscription to consume
            handler: Async message handler implementing AsyncMessageHandler protocol
            request_model: Pydantic model for validating messages
        """
        self.subscription = subscription
        self.handler = handler
        self.request_model = request_model
        self._listener: Optional[ListenerHandle] = None
        self._stopped = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._listener is not None

    def start(self) -> None:
        """Start consuming. Must be called from within the running event loop."""
        if self._listener is not None:
            return
        self._stopped.clear()
        self._listener = self.subscription.listen(self.process_message)

    def stop(self) -> None:
        """Stop consuming; messages already being handled still complete."""
        if self._listener is None:
            return
        self._listener.close()
        self._listener = None
        self._stopped.set()

    async def process_message(self, message: Message) -> None:
        """
        Process a single delivered message.

        This method:
        1. Validates the decoded payload
        2. Routes to handler
        3. Acknowledges the message
        """
        try:
            request = self.request_model.model_validate(message.data)
        except ValidationError as err:
            logger.warning("Skipping invalid message %s: %s", message.id or message.ack_id, err)
            message.skip()
            return

        try:
            await self.handler.handle(request)
        except Exception:
            logger.exception("Handler failed for message %s", message.id or message.ack_id)
            message.skip()
            return

        await message.ack()

    async def run(self) -> None:
        """
        Consume until stop() is called.

        Starts the consumer if needed and waits for stop().
        """
        self.start()
        await self._stopped.wait()
