"""Publisher protocol definitions."""

from typing import Optional, Protocol, runtime_checkable


class PublishResult(Protocol):
    """Outcome of a publish; PublishFuture is the stock implementation."""

    def result(self) -> str:
        """Return the ID the message was published under."""
        ...


@runtime_checkable
class PubSubPublisher(Protocol):
    """
    Blocking publisher for topics.

    Topic.publish encodes the payload before calling the adapter, so data
    always arrives as bytes. Attributes are string key/value pairs that
    travel next to the payload and come back on RawMessage.attributes.
    """

    def publish(
        self, topic: str, data: bytes, attributes: Optional[dict[str, str]] = None
    ) -> PublishResult: ...


@runtime_checkable
class AsyncPubSubPublisher(Protocol):
    """Awaitable variant of PubSubPublisher, used by Topic."""

    async def publish(
        self, topic: str, data: bytes, attributes: Optional[dict[str, str]] = None
    ) -> PublishResult: ...
