from typing import Iterator

from pydantic import model_validator
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class WaitPolicy:
    """Bounded exponential backoff used while waiting for a promoted tag to show up."""

    timeout_seconds: float = 300.0
    initial_interval_seconds: float = 5.0
    max_interval_seconds: float = 30.0
    backoff_multiplier: float = 2.0

    @model_validator(mode="after")
    def _check_bounds(self) -> "WaitPolicy":
        if self.timeout_seconds < 0:
            raise ValueError("wait timeout must not be negative")
        if self.initial_interval_seconds <= 0 or self.max_interval_seconds <= 0:
            raise ValueError("wait intervals must be positive")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff multiplier must be at least 1")
        return self

    def intervals(self) -> Iterator[float]:
        interval = self.initial_interval_seconds
        while True:
            yield min(interval, self.max_interval_seconds)
            interval *= self.backoff_multiplier
