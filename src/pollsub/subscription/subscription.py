"""A pull subscription that delivers messages to registered listeners."""

import asyncio
import inspect
import logging
from functools import partial
from typing import Any, Callable, Iterable, Optional, Union

from pollsub.errors import InvalidArgumentError, PubSubError
from pollsub.models.config import SubscriberConfig
from pollsub.models.error import ErrorInfo
from pollsub.models.request import PullRequest
from pollsub.protocols.subscriber import AsyncPubSubSubscriber
from pollsub.subscription.flow import FlowController
from pollsub.subscription.listeners import ERROR, MESSAGE, ListenerHandle, ListenerRegistry
from pollsub.subscription.message import Message
from pollsub.subscription.poller import PollLoop
from pollsub.subscription.tracker import AckTracker

logger = logging.getLogger(__name__)

AckIds = Union[str, Iterable[str]]


def _as_list(ack_ids: Optional[AckIds]) -> list[str]:
    if ack_ids is None:
        return []
    if isinstance(ack_ids, str):
        return [ack_ids]
    return list(ack_ids)


class Subscription:
    """
    Pull subscription with automatic polling and flow control.

    Polling starts when the first message listener is registered and stops
    when the last one is closed:

        async def on_message(message):
            print(message.data)
            await message.ack()

        async with subscription.listen(on_message):
            await asyncio.sleep(60)

    Messages stay "in progress" from delivery until they are acked or
    skipped. With max_in_progress set, polling pauses while that many
    messages are in progress and resumes as soon as one is resolved.

    Pull failures never stop polling; they are delivered to error listeners
    registered with on_error() and the next cycle runs on schedule.

    Listeners are registered and messages acked from the event loop that
    runs the subscription; the subscription is not thread safe.
    """

    def __init__(
        self,
        name: str,
        transport: AsyncPubSubSubscriber,
        config: Optional[SubscriberConfig] = None,
        **options: Any,
    ):
        """
        Initialize subscription.

        Args:
            name: Subscription name passed to the transport
            transport: Async subscriber adapter used for every request
            config: Subscriber configuration
            **options: SubscriberConfig fields, used when config is omitted
        """
        if not name:
            raise InvalidArgumentError("A subscription name is required.")
        if config is not None and options:
            raise InvalidArgumentError("Pass either a config or keyword options, not both.")

        self.name = name
        self.transport = transport
        self.config = config if config is not None else SubscriberConfig(**options)
        self.closed = True

        self.tracker = AckTracker()
        self.flow = FlowController(self.tracker, self.config.max_in_progress, on_resume=self._resume)
        self.listeners = ListenerRegistry(on_open=self._open, on_close=self._stop_listening)
        self.poller = PollLoop(
            self._poll_once,
            interval=self.config.poll_interval,
            blocked=self._blocked,
            name=f"pollsub:{name}",
        )
        self._listener_tasks: set[asyncio.Task] = set()
        self._pulling = False

    @property
    def paused(self) -> bool:
        return self.flow.paused

    @property
    def in_progress(self) -> int:
        """Number of delivered messages not yet acked or skipped."""
        return self.tracker.count()

    def listen(self, callback: Callable[[Message], Any]) -> ListenerHandle:
        """
        Register a message listener.

        The callback may be a plain function or a coroutine function; coroutine
        listeners run as tasks so a slow consumer never holds up polling.
        Must be called from within the running event loop.

        Returns:
            Handle that unregisters the listener when closed
        """
        return self.listeners.add(MESSAGE, callback)

    def on_error(self, callback: Callable[[Exception], Any]) -> ListenerHandle:
        """
        Register an error listener.

        The callback receives the exception; transport failures are
        TransportError instances whose response attribute holds the raw
        response. Error listeners do not start polling.
        """
        return self.listeners.add(ERROR, callback)

    async def pull(self, return_immediately: bool = False, max_results: Optional[int] = None) -> list[Message]:
        """
        Pull messages once, outside of the polling loop.

        Returned messages are tracked as in progress exactly like delivered
        ones. When auto_ack is enabled they are acknowledged before returning.
        Refused while the polling loop or another pull() has a request in
        flight. A listener added meanwhile starts polling once this pull
        has returned.

        Args:
            return_immediately: Answer at once instead of waiting for messages
            max_results: Most messages to return (default max_pull_messages)

        Returns:
            List of messages

        Raises:
            PubSubError: If another pull is in flight
        """
        if self._pulling or not self.closed or self.poller.running:
            raise PubSubError(f"Cannot pull from {self.name} while another pull is in flight.")
        if max_results is None:
            max_results = self.config.max_pull_messages
        elif max_results < 1:
            raise InvalidArgumentError("max_results must be a positive number.")

        self._pulling = True
        try:
            response = await self._request_pull(return_immediately, max_results)
        finally:
            self._pulling = False
            self.poller.wake()
        messages = [self._deliver(received) for received in response.received_messages or []]
        self.flow.refresh(self.listeners.listening)

        if self.config.auto_ack and messages:
            await self.ack([message.ack_id for message in messages])
        return messages

    async def ack(self, ack_ids: AckIds) -> Any:
        """
        Acknowledge one or more messages.

        Args:
            ack_ids: An ack id or a list of ack ids

        Returns:
            The transport's response

        Raises:
            InvalidArgumentError: If no ack id is given; nothing is sent
        """
        ack_ids = _as_list(ack_ids)
        if not ack_ids:
            raise InvalidArgumentError("At least one ID must be specified before it can be acknowledged.")

        response = await self.transport.acknowledge(
            request={"subscription": self.name, "ack_ids": ack_ids}
        )

        for ack_id in ack_ids:
            self.tracker.resolve(ack_id)
        self.flow.refresh(self.listeners.listening)
        return response

    def skip(self, ack_id: str) -> None:
        """
        Stop tracking a message without acknowledging it.

        The transport is not told. The message stays unacknowledged there until
        its deadline runs out, or set_ack_deadline(ack_id, 0) releases it.
        """
        self.tracker.resolve(ack_id)
        self.flow.refresh(self.listeners.listening)

    async def set_ack_deadline(self, ack_ids: AckIds, seconds: int) -> Any:
        """
        Modify the ack deadline of in-flight messages.

        Messages remain in progress; use 0 seconds to make them available for
        redelivery right away.
        """
        ack_ids = _as_list(ack_ids)
        if not ack_ids:
            raise InvalidArgumentError("At least one ID must be specified to modify an ack deadline.")
        if seconds < 0:
            raise InvalidArgumentError("The ack deadline cannot be negative.")

        return await self.transport.modify_ack_deadline(
            request={"subscription": self.name, "ack_ids": ack_ids, "ack_deadline_seconds": seconds}
        )

    def close(self) -> None:
        """
        Stop delivering messages and forget in-progress ones.

        A pull already in flight completes, but its messages are discarded.
        """
        self.listeners.clear()
        self.closed = True
        self.poller.cancel_timer()
        self.tracker.clear()
        self.flow.refresh(False)

    async def aclose(self) -> None:
        """Close and wait for an in-flight pull to finish."""
        self.close()
        await self.poller.join()

    async def delete(self) -> Any:
        """Delete the subscription on the backend, then close it."""
        response = await self.transport.delete(self.name)
        logger.info("Deleted subscription %s", self.name)
        self.close()
        return response

    def _open(self) -> None:
        self.closed = False
        self.poller.wake()

    def _stop_listening(self) -> None:
        self.closed = True
        self.poller.cancel_timer()

    def _resume(self) -> None:
        self.poller.wake()

    def _blocked(self) -> bool:
        return self.closed or self.flow.paused or self._pulling

    async def _request_pull(self, return_immediately: bool, max_messages: int) -> Any:
        request: PullRequest = {
            "subscription": self.name,
            "max_messages": max_messages,
            "return_immediately": return_immediately,
        }
        logger.debug("Pulling up to %d messages from %s", max_messages, self.name)
        return await self.transport.pull(request=request, timeout=self.config.pull_timeout)

    def _deliver(self, received: Any) -> Message:
        message = Message.from_received(received, subscription=self)
        self.tracker.track(message.ack_id)
        return message

    async def _poll_once(self) -> None:
        max_messages = self.flow.max_messages(self.config.max_pull_messages)
        try:
            response = await self._request_pull(False, max_messages)
        except Exception as err:
            if self.closed:
                logger.info("Ignoring failed pull from closed subscription %s: %s", self.name, err)
                return
            logger.warning("Pull from %s failed: %s", self.name, err)
            self._emit_error(err)
            return

        received_messages = response.received_messages or []
        delivered: list[Message] = []
        for received in received_messages:
            if self.closed:
                logger.info(
                    "Discarding %d messages pulled from closed subscription %s",
                    len(received_messages) - len(delivered),
                    self.name,
                )
                break
            message = self._deliver(received)
            delivered.append(message)
            self._emit_message(message)

        self.flow.refresh(self.listeners.listening)

        if self.config.auto_ack and delivered:
            try:
                await self.ack([message.ack_id for message in delivered])
            except Exception as err:
                logger.warning("Auto-ack on %s failed: %s", self.name, err)
                self._emit_error(err)

    def _emit_message(self, message: Message) -> None:
        for callback in self.listeners.listeners(MESSAGE):
            self._invoke(callback, message, reports_errors=True)

    def _emit_error(self, error: Exception) -> None:
        callbacks = self.listeners.listeners(ERROR)
        if not callbacks:
            info = ErrorInfo.from_exception(error)
            logger.error(
                "Unhandled error on %s: %s",
                self.name,
                info.model_dump_json(by_alias=True, exclude_none=True),
            )
            return
        for callback in callbacks:
            self._invoke(callback, error, reports_errors=False)

    def _invoke(self, callback: Callable[..., Any], payload: Any, reports_errors: bool) -> None:
        try:
            result = callback(payload)
        except Exception as err:
            logger.exception("Listener %r on %s failed", callback, self.name)
            if reports_errors:
                self._emit_error(err)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._listener_tasks.add(task)
            task.add_done_callback(partial(self._listener_done, reports_errors))

    def _listener_done(self, reports_errors: bool, task: asyncio.Future) -> None:
        self._listener_tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is None:
            return
        logger.error("Listener on %s failed", self.name, exc_info=err)
        if reports_errors and isinstance(err, Exception):
            self._emit_error(err)

    def __repr__(self) -> str:
        state = "closed" if self.closed else ("paused" if self.paused else "active")
        return f"<Subscription {self.name} {state} in_progress={self.in_progress}>"
