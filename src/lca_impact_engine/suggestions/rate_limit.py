"""Per-identity fixed-window quota for the suggestion flow."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from lca_impact_engine.core.exceptions import RateLimitExceeded
from lca_impact_engine.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_in: float


@dataclass(slots=True)
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Counts calls per identity; the window starts at an identity's first call."""

    def __init__(
        self,
        quota: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._quota = max(1, quota)
        self._window = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    @property
    def quota(self) -> int:
        return self._quota

    def check(self, identity: str) -> RateLimitDecision:
        """Record one call for ``identity`` if quota remains."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(identity)
            if window is None or now >= window.reset_at:
                self._prune(now)
                self._windows[identity] = _Window(count=1, reset_at=now + self._window)
                return RateLimitDecision(True, self._quota - 1, self._window)
            reset_in = window.reset_at - now
            if window.count >= self._quota:
                return RateLimitDecision(False, 0, reset_in)
            window.count += 1
            return RateLimitDecision(True, self._quota - window.count, reset_in)

    def acquire(self, identity: str) -> int:
        """Like ``check`` but raises ``RateLimitExceeded``; returns the remaining quota."""
        decision = self.check(identity)
        if not decision.allowed:
            LOGGER.warning("rate_limit.exceeded", identity=identity, reset_in=decision.reset_in)
            raise RateLimitExceeded(identity, remaining=0, reset_in=decision.reset_in)
        return decision.remaining

    def reset(self, identity: str | None = None) -> None:
        with self._lock:
            if identity is None:
                self._windows.clear()
            else:
                self._windows.pop(identity, None)

    def _prune(self, now: float) -> None:
        # Caller holds the lock.
        expired = [identity for identity, window in self._windows.items() if now >= window.reset_at]
        for identity in expired:
            del self._windows[identity]
