"""Subscriber protocol definitions."""

from typing import Protocol, Any, runtime_checkable

from pollsub.models.request import PullRequest, AcknowledgeRequest, ModifyAckDeadlineRequest


@runtime_checkable
class PubSubSubscriber(Protocol):
    """Synchronous protocol for consuming messages from a subscription."""

    def pull(self, request: PullRequest, timeout: float) -> Any:
        """
        Pull messages from a subscription synchronously.

        Args:
            request: Pull request with subscription, max_messages and return_immediately
            timeout: Longest time in seconds to wait for a message

        Returns:
            Pull response with received_messages
        """
        ...

    def acknowledge(self, request: AcknowledgeRequest) -> Any:
        """
        Acknowledge messages synchronously.

        Args:
            request: Acknowledge request with subscription and ack_ids
        """
        ...

    def modify_ack_deadline(self, request: ModifyAckDeadlineRequest) -> Any:
        """
        Change the ack deadline of in-flight messages synchronously.

        Args:
            request: Request with subscription, ack_ids and ack_deadline_seconds
        """
        ...

    def delete(self, subscription: str) -> Any:
        """
        Delete a subscription synchronously.

        Args:
            subscription: Subscription name
        """
        ...


@runtime_checkable
class AsyncPubSubSubscriber(Protocol):
    """Async protocol for consuming messages from a subscription."""

    async def pull(self, request: PullRequest, timeout: float) -> Any:
        """
        Pull messages from a subscription asynchronously.

        Args:
            request: Pull request with subscription, max_messages and return_immediately
            timeout: Longest time in seconds to wait for a message

        Returns:
            Pull response with received_messages
        """
        ...

    async def acknowledge(self, request: AcknowledgeRequest) -> Any:
        """
        Acknowledge messages asynchronously.

        Args:
            request: Acknowledge request with subscription and ack_ids
        """
        ...

    async def modify_ack_deadline(self, request: ModifyAckDeadlineRequest) -> Any:
        """
        Change the ack deadline of in-flight messages asynchronously.

        Args:
            request: Request with subscription, ack_ids and ack_deadline_seconds
        """
        ...

    async def delete(self, subscription: str) -> Any:
        """
        Delete a subscription asynchronously.

        Args:
            subscription: Subscription name
        """
        ...
