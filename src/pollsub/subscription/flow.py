"""Flow control: pause pulling while too many messages are in progress."""

import logging
from typing import Callable, Optional

from pollsub.subscription.tracker import AckTracker

logger = logging.getLogger(__name__)


class FlowController:
    """
    Derives the ACTIVE/PAUSED state of a subscription from its AckTracker.

    The controller pauses once the number of in-progress messages reaches
    max_in_progress and calls on_resume when an ack or skip frees a slot
    while consumers are still listening. With no bound it never pauses.
    """

    def __init__(
        self,
        tracker: AckTracker,
        max_in_progress: Optional[int],
        on_resume: Callable[[], None],
    ):
        self.tracker = tracker
        self.max_in_progress = max_in_progress
        self.on_resume = on_resume
        self.paused = False

    def refresh(self, listening: bool) -> None:
        """
        Re-evaluate the pause state after the tracker changed.

        Args:
            listening: Whether at least one message listener is registered
        """
        was_paused = self.paused
        self.paused = self.tracker.is_at_capacity(self.max_in_progress)

        if self.paused and not was_paused:
            logger.debug("Pausing: %d messages in progress", self.tracker.count())
        elif was_paused and not self.paused:
            logger.debug("Resuming: %d messages in progress", self.tracker.count())
            if listening:
                self.on_resume()

    def max_messages(self, ceiling: int) -> int:
        """Number of messages the next pull may ask for."""
        if self.max_in_progress is None:
            return ceiling
        return max(self.max_in_progress - self.tracker.count(), 0)
