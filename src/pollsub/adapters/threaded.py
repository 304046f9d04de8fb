"""Expose blocking transports through the async protocols."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, Optional

from pollsub.models.request import PullRequest, AcknowledgeRequest, ModifyAckDeadlineRequest
from pollsub.protocols.publisher import PubSubPublisher
from pollsub.protocols.subscriber import PubSubSubscriber


class WorkerThread:
    """Runs every call on one dedicated thread, in submission order."""

    def __init__(self, name: str):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    async def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(func, *args, **kwargs))

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)


class ThreadedSubscriber:
    """
    Async subscriber wrapping a blocking PubSubSubscriber.

    Connection objects like pika's BlockingConnection must not be used from
    several threads, so all calls share a single worker thread. Pass the same
    worker to a ThreadedPublisher using the same connection. An ack
    issued while a long pull is waiting runs after that pull returns.
    """

    def __init__(self, subscriber: PubSubSubscriber, worker: Optional[WorkerThread] = None):
        self.subscriber = subscriber
        self._worker = worker or WorkerThread("pollsub-subscriber")

    async def pull(self, request: PullRequest, timeout: float) -> Any:
        return await self._worker.call(self.subscriber.pull, request=request, timeout=timeout)

    async def acknowledge(self, request: AcknowledgeRequest) -> Any:
        return await self._worker.call(self.subscriber.acknowledge, request=request)

    async def modify_ack_deadline(self, request: ModifyAckDeadlineRequest) -> Any:
        return await self._worker.call(self.subscriber.modify_ack_deadline, request=request)

    async def delete(self, subscription: str) -> Any:
        return await self._worker.call(self.subscriber.delete, subscription)

    def close(self) -> None:
        self._worker.shutdown()


class ThreadedPublisher:
    """Async publisher wrapping a blocking PubSubPublisher."""

    def __init__(self, publisher: PubSubPublisher, worker: Optional[WorkerThread] = None):
        self.publisher = publisher
        self._worker = worker or WorkerThread("pollsub-publisher")

    async def publish(self, topic: str, data: bytes, attributes: Optional[dict[str, str]] = None) -> Any:
        return await self._worker.call(self.publisher.publish, topic, data, attributes=attributes)

    def close(self) -> None:
        self._worker.shutdown()
