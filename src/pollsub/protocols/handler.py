"""Message handler protocol definitions."""

from typing import Protocol, Any, runtime_checkable


@runtime_checkable
class AsyncMessageHandler(Protocol):
    """
    Async protocol for message handlers.

    Handlers receive validated request objects and are responsible for:
    - Processing the request asynchronously
    - Publishing results (via their own result publisher)
    """

    async def handle(self, request: Any) -> None:
        """
        Process a validated request asynchronously.

        Args:
            request: Validated request object (type depends on handler)

        Note:
            If the handler raises an exception the message is skipped instead
            of acknowledged, and the backend redelivers it once its ack
            deadline expires.
        """
        ...
