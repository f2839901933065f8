"""Proxy-suggestion entry point."""

from __future__ import annotations

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.exceptions import InputValidationError, RateLimitExceeded
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import ProxySuggestionRequest, ProxySuggestionResponse

from .advisor import ProxyAdvisor
from .rate_limit import RateLimiter
from .validator import SearchBackend, SuggestionValidator

LOGGER = get_logger(__name__)

ANONYMOUS_IDENTITY = "anonymous"


class ProxySuggestionService:
    """Rate-limits, asks the advisor, then validates the suggestions."""

    def __init__(
        self,
        search: SearchBackend,
        settings: Settings | None = None,
        *,
        advisor: ProxyAdvisor | None = None,
        validator: SuggestionValidator | None = None,
        limiter: RateLimiter | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._advisor = advisor or ProxyAdvisor(self._settings)
        self._validator = validator or SuggestionValidator(search, self._settings)
        self._limiter = limiter or RateLimiter(
            self._settings.suggestion_rate_limit,
            self._settings.suggestion_rate_window_seconds,
        )

    def suggest(self, request: ProxySuggestionRequest) -> ProxySuggestionResponse:
        if not (request.ingredient_name or "").strip():
            raise InputValidationError("ingredient_name is required")
        if request.ingredient_type not in ("ingredient", "packaging"):
            raise InputValidationError(f"Unsupported ingredient_type: {request.ingredient_type}")

        identity = request.organization_id or ANONYMOUS_IDENTITY
        try:
            remaining = self._limiter.acquire(identity)
        except RateLimitExceeded as exc:
            return ProxySuggestionResponse(
                success=False,
                remaining=exc.remaining,
                error="Rate limit exceeded. Please try again later.",
                reset_in_seconds=exc.reset_in,
            )

        advice = self._advisor.advise(request)
        suggestions = self._validator.validate(advice.suggestions, organization_id=request.organization_id)
        LOGGER.info(
            "proxy_suggestions.response",
            ingredient=request.ingredient_name,
            identity=identity,
            count=len(suggestions),
            cached=advice.cached,
            from_fallback=advice.from_fallback,
            remaining=remaining,
        )
        return ProxySuggestionResponse(
            success=True,
            suggestions=suggestions,
            cached=advice.cached,
            from_fallback=advice.from_fallback,
            remaining=remaining,
        )
