"""Shared constant values used across the impact engine."""

from __future__ import annotations

from typing import Final

# PRN tolerance band: purchases within 0.1% of the obligation count as fulfilled.
# The regulatory basis for this exact band is undocumented; keep it named.
PRN_FULFILLED_TOLERANCE: Final[float] = 0.999
PRN_EXCEEDED_TOLERANCE: Final[float] = 1.001
TONNAGE_DECIMALS: Final[int] = 3
CURRENCY_DECIMALS: Final[int] = 2

LOOKUP_CACHE_TTL_HOURS: Final[float] = 24.0
SEARCH_CACHE_KIND: Final[str] = "search"
FACTOR_CACHE_KIND: Final[str] = "factor"

MAX_SEARCH_RESULTS: Final[int] = 50
LONG_NAME_THRESHOLD: Final[int] = 120
