"""AI-assisted proxy suggestions with live validation and rate limiting."""

from .advisor import AdvisorResult, ProxyAdvisor, normalize_suggestion, static_suggestions
from .llm import LanguageModelProtocol, OpenAIChatModel
from .rate_limit import RateLimitDecision, RateLimiter
from .service import ProxySuggestionService
from .validator import SuggestionValidator, retain_validated

__all__ = [
    "AdvisorResult",
    "ProxyAdvisor",
    "normalize_suggestion",
    "static_suggestions",
    "LanguageModelProtocol",
    "OpenAIChatModel",
    "RateLimitDecision",
    "RateLimiter",
    "ProxySuggestionService",
    "SuggestionValidator",
    "retain_validated",
]
