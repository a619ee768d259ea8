"""Token bucket limiter for outbound API calls."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from fitness_journal.domain.errors import InfrastructureError


@dataclass
class TokenBucket:
    """Allows ``capacity`` calls per ``period_seconds``, refilled continuously."""

    capacity: int
    period_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    _tokens: float = field(init=False)
    _updated_at: float = field(init=False)

    def __post_init__(self) -> None:
        self._tokens = float(self.capacity)
        self._updated_at = self.clock()

    def try_acquire(self) -> bool:
        now = self.clock()
        elapsed = now - self._updated_at
        self._updated_at = now
        refill = elapsed * self.capacity / self.period_seconds
        self._tokens = min(float(self.capacity), self._tokens + refill)
        if self._tokens < 1:
            return False
        self._tokens -= 1
        return True

    def acquire(self, action: str) -> None:
        """Take a token or raise InfrastructureError when exhausted."""
        if not self.try_acquire():
            raise InfrastructureError(f"Rate limit exceeded for {action}")
