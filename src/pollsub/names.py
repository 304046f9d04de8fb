"""Resource name helpers."""

from typing import Optional

TOPICS = "topics"
SUBSCRIPTIONS = "subscriptions"


def format_name(project_id: Optional[str], name: str, kind: str) -> str:
    """
    Return the full name of a topic or subscription.

    Names that already contain a "/" are returned unchanged. Without a
    project the bare name is kept, which is what broker-style transports
    such as RabbitMQ expect.

    >>> format_name("grape-spaceship-123", "orders", SUBSCRIPTIONS)
    'projects/grape-spaceship-123/subscriptions/orders'
    """
    if "/" in name or not project_id:
        return name
    return f"projects/{project_id}/{kind}/{name}"
