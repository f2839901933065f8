"""Shared core utilities for the impact resolution and allocation engine."""

from .config import Settings, get_settings
from .exceptions import (
    AllocationError,
    CatalogueError,
    ImpactEngineError,
    InputValidationError,
    RateLimitExceeded,
    SuggestionError,
)
from .logging import configure_logging
from .models import (
    ImpactTotals,
    MaterialImpactFactor,
    MaterialLine,
    PRNObligation,
    PRNTarget,
    ProcessRecord,
    ProductImpacts,
    ProxySuggestion,
    ProxySuggestionRequest,
    ProxySuggestionResponse,
    SearchRequest,
    SearchResponse,
    SiteAllocation,
    Uncertainty,
)

__all__ = [
    "Settings",
    "ProcessRecord",
    "MaterialImpactFactor",
    "MaterialLine",
    "Uncertainty",
    "ImpactTotals",
    "ProductImpacts",
    "SiteAllocation",
    "PRNTarget",
    "PRNObligation",
    "ProxySuggestion",
    "ProxySuggestionRequest",
    "ProxySuggestionResponse",
    "SearchRequest",
    "SearchResponse",
    "ImpactEngineError",
    "InputValidationError",
    "CatalogueError",
    "SuggestionError",
    "AllocationError",
    "RateLimitExceeded",
    "get_settings",
    "configure_logging",
]
