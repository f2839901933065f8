from __future__ import annotations

import pytest

from lca_impact_engine.core.exceptions import RateLimitExceeded
from lca_impact_engine.suggestions import RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_quota_is_counted_per_window() -> None:
    clock = FakeClock()
    limiter = RateLimiter(3, 3600, clock=clock)

    decisions = [limiter.check("org-1") for _ in range(4)]

    assert [item.allowed for item in decisions] == [True, True, True, False]
    assert [item.remaining for item in decisions] == [2, 1, 0, 0]
    assert decisions[0].reset_in == 3600


def test_identities_do_not_share_quota() -> None:
    limiter = RateLimiter(1, 60, clock=FakeClock())

    assert limiter.check("org-1").allowed is True
    assert limiter.check("org-2").allowed is True
    assert limiter.check("org-1").allowed is False


def test_window_resets_after_expiry() -> None:
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    limiter.acquire("org-1")

    clock.now = 45.0
    with pytest.raises(RateLimitExceeded) as excinfo:
        limiter.acquire("org-1")
    assert excinfo.value.reset_in == pytest.approx(15.0)
    assert excinfo.value.remaining == 0

    clock.now = 60.0
    assert limiter.acquire("org-1") == 0


def test_reset_clears_windows() -> None:
    limiter = RateLimiter(1, 60, clock=FakeClock())
    limiter.acquire("org-1")

    limiter.reset("org-1")

    assert limiter.check("org-1").allowed is True


def test_expired_windows_are_dropped_on_new_window() -> None:
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    for index in range(10):
        limiter.check(f"org-{index}")

    clock.now = 61.0
    limiter.check("org-new")

    assert list(limiter._windows) == ["org-new"]
