"""Subscriber configuration."""

import math
from typing import Any, Optional

from pydantic import AliasChoices, ConfigDict, Field, NonNegativeInt, PositiveFloat, PositiveInt, field_validator

from pollsub.models.base import CamelCaseModel

DEFAULT_INTERVAL_MS = 10
DEFAULT_MAX_PULL_MESSAGES = 1000
DEFAULT_PULL_TIMEOUT = 30.0


class SubscriberConfig(CamelCaseModel):
    """
    Options fixed for the lifetime of a subscription.

    Accepts snake_case names or their camelCase aliases, so options read from
    JSON (``{"autoAck": true, "maxInProgress": 5}``) validate directly.
    """

    model_config = ConfigDict(frozen=True)

    auto_ack: bool = False
    interval: NonNegativeInt = Field(
        default=DEFAULT_INTERVAL_MS,
        validation_alias=AliasChoices("interval", "pollIntervalMs", "poll_interval_ms"),
    )
    max_in_progress: Optional[PositiveInt] = None
    max_pull_messages: PositiveInt = DEFAULT_MAX_PULL_MESSAGES
    pull_timeout: PositiveFloat = DEFAULT_PULL_TIMEOUT

    @field_validator("max_in_progress", mode="before")
    @classmethod
    def _infinity_is_unbounded(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isinf(value) and value > 0:
            return None
        return value

    @property
    def poll_interval(self) -> float:
        """Delay between pull cycles, in seconds."""
        return self.interval / 1000
