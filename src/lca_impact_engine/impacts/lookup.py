"""Cache-backed resolution of a search term to a material impact factor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.constants import FACTOR_CACHE_KIND
from lca_impact_engine.core.exceptions import CatalogueError, InputValidationError
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import (
    IMPACT_CATEGORIES,
    InventorySource,
    MaterialImpactFactor,
    ProcessRecord,
    SearchRequest,
)
from lca_impact_engine.resolution.service import SearchService
from lca_impact_engine.storage.cache import LookupCache, normalize_term

LOGGER = get_logger(__name__)

# Substring of the impact-category name -> engine category. Sub-categories
# ("climate change, fossil") are ignored once the parent category is seen.
IMPACT_CATEGORY_MAPPING: tuple[tuple[str, str], ...] = (
    ("climate change", "climate"),
    ("global warming", "climate"),
    ("gwp100", "climate"),
    ("water consumption", "water"),
    ("water use", "water"),
    ("water scarcity", "water"),
    ("land use", "land"),
    ("agricultural land occupation", "land"),
)

PLACEHOLDER_REFERENCE = "placeholder:no-provider"


class ImpactCalculator(Protocol):
    def calculate_process(self, process_id: str, method_name: str, amount: float = 1.0) -> list[dict[str, Any]]:  # pragma: no cover - protocol
        ...


@dataclass(slots=True, frozen=True)
class FactorLookupResult:
    term: str
    factor: MaterialImpactFactor | None
    process: ProcessRecord | None = None
    source: InventorySource | None = None
    cached: bool = False
    mock: bool = False

    @property
    def resolved(self) -> bool:
        return self.factor is not None


def map_impact_results(impacts: Iterable[Mapping[str, Any]]) -> dict[str, float]:
    """Map provider impact results onto the four engine categories."""
    values = dict.fromkeys(IMPACT_CATEGORIES, 0.0)
    seen: set[str] = set()
    entries = []
    for impact in impacts:
        category = impact.get("impactCategory") or {}
        name = str(category.get("name") if isinstance(category, Mapping) else category or "").lower()
        entries.append((name, impact))
    for name, impact in sorted(entries, key=lambda item: len(item[0])):
        for pattern, target in IMPACT_CATEGORY_MAPPING:
            if pattern in name:
                if target not in seen:
                    amount = impact.get("amount")
                    if amount is None:
                        amount = impact.get("value")
                    values[target] = float(amount or 0.0)
                    seen.add(target)
                break
    return values


def _factor_payload(factor: MaterialImpactFactor) -> dict[str, Any]:
    return {
        "climate": factor.climate,
        "water": factor.water,
        "land": factor.land,
        "waste": factor.waste,
        "data_quality": factor.data_quality,
        "source_reference": factor.source_reference,
    }


def _factor_from_payload(payload: Mapping[str, Any]) -> MaterialImpactFactor:
    return MaterialImpactFactor(
        climate=float(payload.get("climate") or 0.0),
        water=float(payload.get("water") or 0.0),
        land=float(payload.get("land") or 0.0),
        waste=float(payload.get("waste") or 0.0),
        data_quality=payload.get("data_quality") or "secondary_modelled",
        source_reference=payload.get("source_reference"),
    )


class FactorLookupService:
    """Resolves a term through search, then calculates the top process's impacts.

    Results are cached by normalized term for the cache TTL; a hit skips both
    the search and the calculation.
    """

    def __init__(
        self,
        search: SearchService,
        settings: Settings | None = None,
        *,
        cache: LookupCache | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._search = search
        self._cache = cache

    def lookup(self, term: str, *, organization_id: str | None = None) -> FactorLookupResult:
        key = normalize_term(term or "")
        if len(key) < self._settings.min_query_length:
            raise InputValidationError(
                f"Search term must be at least {self._settings.min_query_length} characters"
            )

        if self._cache is not None:
            payload = self._cache.get(key, FACTOR_CACHE_KIND)
            if payload is not None:
                LOGGER.info("factor_lookup.cache_hit", term=key)
                process = payload.get("process")
                return FactorLookupResult(
                    term=key,
                    factor=_factor_from_payload(payload["factor"]),
                    process=ProcessRecord.from_payload(process) if process else None,
                    source=payload.get("source"),
                    cached=True,
                )

        if not self._search.catalogue.is_configured():
            LOGGER.warning("factor_lookup.placeholder", term=key)
            factor = MaterialImpactFactor(
                climate=0.0,
                water=0.0,
                land=0.0,
                waste=0.0,
                data_quality="secondary_modelled",
                source_reference=PLACEHOLDER_REFERENCE,
            )
            return FactorLookupResult(term=key, factor=factor, mock=True)

        response = self._search.search(SearchRequest(query=key, organization_id=organization_id))
        if not response.results or response.preferred_database is None:
            LOGGER.info("factor_lookup.unresolved", term=key)
            return FactorLookupResult(term=key, factor=None)

        process = response.results[0]
        source = response.preferred_database
        calculator = self._search.catalogue.client(source)
        if calculator is None or not hasattr(calculator, "calculate_process"):
            raise CatalogueError(f"No calculation backend configured for {source}")
        impacts = calculator.calculate_process(process.id, self._settings.openlca_impact_method)
        values = map_impact_results(impacts)
        factor = MaterialImpactFactor(
            **values,
            data_quality="secondary_modelled",
            source_reference=f"{source}:{process.id}",
        )
        LOGGER.info("factor_lookup.calculated", term=key, process=process.name, source=source, climate=factor.climate)

        if self._cache is not None:
            self._cache.put(
                key,
                FACTOR_CACHE_KIND,
                {"factor": _factor_payload(factor), "process": process.as_dict(), "source": source},
            )
        return FactorLookupResult(term=key, factor=factor, process=process, source=source)
