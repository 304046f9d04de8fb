"""Request models handed to transports."""

from typing import TypedDict


class PullRequest(TypedDict):
    """Request for pulling messages from a subscription."""

    subscription: str
    max_messages: int
    return_immediately: bool


class AcknowledgeRequest(TypedDict):
    """Request for acknowledging messages."""

    subscription: str
    ack_ids: list[str]


class ModifyAckDeadlineRequest(TypedDict):
    """Request for extending (or expiring) the ack deadline of messages."""

    subscription: str
    ack_ids: list[str]
    ack_deadline_seconds: int
