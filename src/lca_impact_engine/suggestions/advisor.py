"""Proxy-factor advisor for ingredients that direct search cannot resolve."""

from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.exceptions import ImpactEngineError, SuggestionError
from lca_impact_engine.core.json_utils import parse_json_response
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import IngredientType, ProxySuggestion, ProxySuggestionRequest

from .llm import LanguageModelProtocol, OpenAIChatModel
from .prompts import PROXY_ADVISOR_PROMPT, build_user_prompt

LOGGER = get_logger(__name__)

CONFIDENCE_LEVELS = ("high", "medium", "low")

_BOTANICAL = re.compile(r"\b(root|herb|botanical|flower|blossom|petal|leaf|leaves|bark|seed|berry|berries)\b", re.I)
_ACID = re.compile(r"\b(acid|sorbate|benzoate|sulphite|sulfite|preservative|antioxidant)\b", re.I)
_GUM = re.compile(r"\b(gum|stabiliser|stabilizer|thickener|emulsifier|carrageenan|pectin|agar|xanthan|gelatin)\b", re.I)
_EXTRACT = re.compile(r"\b(extract|concentrate|flavour|flavor|essence|tincture|infusion|distillate)\b", re.I)
_SUGAR = re.compile(r"\b(sugar|sweetener|syrup|dextrose|fructose|glucose|sucrose)\b", re.I)


def _proxy(name: str, query: str, category: str, reasoning: str, confidence: str, uncertainty: str) -> ProxySuggestion:
    return ProxySuggestion(
        proxy_name=name,
        search_query=query,
        category=category,
        reasoning=reasoning,
        confidence=confidence,  # type: ignore[arg-type]
        uncertainty_impact=uncertainty,
    )


DRIED_HERB = _proxy(
    "Dried herb (generic)",
    "herb dried",
    "Botanicals/spices",
    "Generic dried herb proxy suitable for botanical ingredients with no specific database entry.",
    "medium",
    "±30-50%",
)
SPICE = _proxy(
    "Spice (generic)",
    "spice",
    "Botanicals/spices",
    "Spices and botanicals have similar agricultural and processing profiles.",
    "low",
    "±40-60%",
)
NATURAL_FLAVOURING = _proxy(
    "Natural flavouring (generic)",
    "natural flavouring",
    "Flavourings",
    "Weighted average of common beverage flavouring categories.",
    "low",
    "±55%",
)


def static_suggestions(ingredient_name: str, ingredient_type: IngredientType) -> list[ProxySuggestion]:
    """Keyword-based proxies used whenever the language model is unavailable."""
    if ingredient_type == "packaging":
        return [
            _proxy(
                "Generic packaging material",
                "packaging",
                "Packaging",
                "Generic packaging proxy. Select a more specific material for better accuracy.",
                "low",
                "±50-100%",
            )
        ]
    name = ingredient_name.lower()
    if _BOTANICAL.search(name):
        return [DRIED_HERB, SPICE, NATURAL_FLAVOURING]
    if _ACID.search(name):
        return [
            _proxy(
                "Citric acid",
                "citric acid",
                "Acids & preservatives",
                "Common proxy for food-grade organic acids and preservatives with similar synthetic production.",
                "medium",
                "±25-40%",
            ),
            _proxy(
                "Malic acid",
                "malic acid",
                "Acids & preservatives",
                "DL-malic acid proxy for food-grade acid additives.",
                "medium",
                "±25-40%",
            ),
        ]
    if _GUM.search(name):
        return [
            _proxy(
                "Starch (generic)",
                "starch",
                "Additives",
                "Plant-derived starch proxy for hydrocolloid stabilisers and thickeners.",
                "low",
                "±40-60%",
            ),
            replace(
                DRIED_HERB,
                reasoning="For plant-extracted gums, dried plant material is a reasonable agricultural proxy.",
                confidence="low",
                uncertainty_impact="±50-70%",
            ),
        ]
    if _EXTRACT.search(name):
        return [
            replace(
                NATURAL_FLAVOURING,
                reasoning="Industry average for beverage flavourings; suits extracts and concentrated flavours.",
                confidence="medium",
            ),
            replace(
                DRIED_HERB,
                reasoning="For botanical extracts the base herb proxy captures the agricultural footprint.",
                confidence="low",
                uncertainty_impact="±40-60%",
            ),
        ]
    if _SUGAR.search(name):
        return [
            _proxy(
                "Sugar (cane)",
                "cane sugar",
                "Sweeteners",
                "Generic cane sugar proxy for sugar-based ingredients.",
                "medium",
                "±20-30%",
            )
        ]
    return [
        replace(NATURAL_FLAVOURING, reasoning="Generic proxy for unclassified ingredients."),
        replace(
            DRIED_HERB,
            reasoning="Generic botanical proxy; suitable if the ingredient is plant-based.",
            confidence="low",
            uncertainty_impact="±50-70%",
        ),
    ]


def normalize_suggestion(raw: Mapping[str, Any]) -> ProxySuggestion:
    proxy_name = str(raw.get("proxy_name") or raw.get("name") or "Unknown proxy")
    confidence = raw.get("confidence_note") or raw.get("confidence")
    uncertainty = raw.get("uncertainty_impact")
    return ProxySuggestion(
        proxy_name=proxy_name,
        search_query=str(raw.get("search_query") or raw.get("proxy_name") or ""),
        category=str(raw.get("category") or "Unknown"),
        reasoning=str(raw.get("reasoning") or ""),
        confidence=confidence if confidence in CONFIDENCE_LEVELS else "low",
        uncertainty_impact=str(uncertainty) if uncertainty else None,
    )


@dataclass(slots=True)
class AdvisorResult:
    suggestions: list[ProxySuggestion] = field(default_factory=list)
    cached: bool = False
    from_fallback: bool = False


class ProxyAdvisor:
    """Suggests proxy materials with a language model, falling back to keyword rules.

    Results (including fallbacks) are memoized per ``name:type`` for the
    configured TTL.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        llm: LanguageModelProtocol | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or get_settings()
        if llm is None and self._settings.openai_api_key:
            llm = OpenAIChatModel(
                self._settings.openai_api_key,
                self._settings.openai_model,
                timeout=self._settings.request_timeout,
            )
        self._llm = llm
        self._clock = clock
        self._ttl = self._settings.advisor_cache_ttl_seconds
        self._max_suggestions = max(1, self._settings.advisor_max_suggestions)
        self._cache: dict[str, tuple[float, AdvisorResult]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def cache_key(request: ProxySuggestionRequest) -> str:
        return f"{request.ingredient_name.lower().strip()}:{request.ingredient_type}"

    def advise(self, request: ProxySuggestionRequest) -> AdvisorResult:
        key = self.cache_key(request)
        cached = self._get_cached(key)
        if cached is not None:
            LOGGER.info("proxy_advisor.cache_hit", key=key)
            return cached

        if self._llm is None:
            LOGGER.info("proxy_advisor.no_model", ingredient=request.ingredient_name)
            result = self._fallback(request)
        else:
            try:
                suggestions = self._ask_model(request)
                result = AdvisorResult(suggestions=suggestions[: self._max_suggestions])
            except Exception as exc:  # pylint: disable=broad-except
                LOGGER.warning(
                    "proxy_advisor.model_failed",
                    ingredient=request.ingredient_name,
                    error=str(exc),
                )
                result = self._fallback(request)
        self._store(key, result)
        LOGGER.info(
            "proxy_advisor.suggested",
            ingredient=request.ingredient_name,
            count=len(result.suggestions),
            from_fallback=result.from_fallback,
        )
        return result

    def _ask_model(self, request: ProxySuggestionRequest) -> list[ProxySuggestion]:
        assert self._llm is not None
        response = self._llm.invoke(
            {
                "prompt": PROXY_ADVISOR_PROMPT,
                "context": build_user_prompt(
                    request.ingredient_name,
                    request.ingredient_type,
                    request.product_context,
                ),
                "response_format": {"type": "json_object"},
            }
        )
        try:
            payload = response if isinstance(response, Mapping) else parse_json_response(str(response))
        except ImpactEngineError as exc:
            raise SuggestionError("Proxy advisor returned no usable JSON") from exc
        raw_items = payload.get("suggestions") if isinstance(payload, Mapping) else None
        suggestions = [normalize_suggestion(item) for item in raw_items or [] if isinstance(item, Mapping)]
        if not suggestions:
            raise SuggestionError("Proxy advisor returned no suggestions")
        return suggestions

    def _fallback(self, request: ProxySuggestionRequest) -> AdvisorResult:
        suggestions = static_suggestions(request.ingredient_name, request.ingredient_type)
        return AdvisorResult(suggestions=suggestions[: self._max_suggestions], from_fallback=True)

    def _get_cached(self, key: str) -> AdvisorResult | None:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            stored_at, result = entry
            if self._clock() - stored_at > self._ttl:
                del self._cache[key]
                return None
        return AdvisorResult(suggestions=list(result.suggestions), cached=True, from_fallback=result.from_fallback)

    def _store(self, key: str, result: AdvisorResult) -> None:
        now = self._clock()
        with self._lock:
            stale = [name for name, (stored_at, _) in self._cache.items() if now - stored_at > self._ttl]
            for name in stale:
                del self._cache[name]
            self._cache[key] = (now, result)
