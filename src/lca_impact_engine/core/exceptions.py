"""Custom exception hierarchy for the impact engine."""

from __future__ import annotations


class ImpactEngineError(Exception):
    """Base error for the impact resolution and allocation engine."""


class InputValidationError(ImpactEngineError):
    """Raised when caller input is missing or malformed."""


class CatalogueError(ImpactEngineError):
    """Raised when an inventory provider cannot be reached or answers badly."""


class SuggestionError(ImpactEngineError):
    """Raised when proxy suggestions cannot be produced by the language model."""


class AllocationError(ImpactEngineError):
    """Raised when a production-site allocation cannot be applied consistently."""


class RateLimitExceeded(ImpactEngineError):
    """Raised when an identity has used its suggestion quota for the window."""

    def __init__(self, identity: str, *, remaining: int = 0, reset_in: float = 0.0) -> None:
        super().__init__(f"Rate limit exceeded for '{identity}'")
        self.identity = identity
        self.remaining = remaining
        self.reset_in = reset_in
