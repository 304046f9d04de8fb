"""Bookkeeping of delivered messages that are still awaiting ack or skip."""

from typing import Iterator, Optional


class AckTracker:
    """
    Set of ack ids delivered to the consumer and not yet acked or skipped.

    The tracker is only mutated from the event loop that owns the
    subscription, so no locking is needed.
    """

    def __init__(self) -> None:
        self._in_progress: set[str] = set()

    def track(self, ack_id: str) -> None:
        """Record ack_id as in progress. Tracking it twice is a no-op."""
        self._in_progress.add(ack_id)

    def resolve(self, ack_id: str) -> None:
        """Forget ack_id. Resolving an unknown ack id is a no-op."""
        self._in_progress.discard(ack_id)

    def count(self) -> int:
        return len(self._in_progress)

    def is_at_capacity(self, limit: Optional[int]) -> bool:
        """Return True when count() has reached limit. A None limit is unbounded."""
        if limit is None:
            return False
        return self.count() >= limit

    def clear(self) -> None:
        self._in_progress.clear()

    def __contains__(self, ack_id: object) -> bool:
        return ack_id in self._in_progress

    def __iter__(self) -> Iterator[str]:
        return iter(set(self._in_progress))

    def __len__(self) -> int:
        return self.count()
