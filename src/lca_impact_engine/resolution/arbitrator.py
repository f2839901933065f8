"""Chooses which inventory answers a query when both return candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from lca_impact_engine.catalogue.aliases import (
    ECOINVENT_PREFERRED_TERMS,
    first_agribalyse_alias,
    matches_at_word_boundary,
)
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import InventorySource, ProcessRecord

from .ranker import RelevanceRanker, agribalyse_ranker, ecoinvent_ranker

LOGGER = get_logger(__name__)


class PreferenceStrategy(Protocol):
    """Decides whether a query describes a food-chain ingredient."""

    def is_food_ingredient(self, query: str) -> bool:  # pragma: no cover - protocol
        ...


class FoodIngredientStrategy:
    """Vocabulary-based domain classification.

    Energy, transport, packaging and industrial chemical terms always go to
    the industrial inventory; anything matching a food-inventory alias is a
    food ingredient; everything else defaults to industrial.
    """

    def __init__(self, industrial_terms: Sequence[str] = ECOINVENT_PREFERRED_TERMS) -> None:
        self._industrial_terms = tuple(term.lower() for term in industrial_terms)

    def is_food_ingredient(self, query: str) -> bool:
        text = query.lower().strip()
        if any(text == term or matches_at_word_boundary(text, term) for term in self._industrial_terms):
            return False
        return first_agribalyse_alias(text) is not None


@dataclass(slots=True)
class ArbitrationResult:
    preferred: list[ProcessRecord] = field(default_factory=list)
    preferred_database: InventorySource | None = None
    secondary: list[ProcessRecord] = field(default_factory=list)


class CrossDatabaseArbitrator:
    """Ranks both inventories and decides which list is authoritative."""

    def __init__(
        self,
        *,
        strategy: PreferenceStrategy | None = None,
        industrial_ranker: RelevanceRanker | None = None,
        food_ranker: RelevanceRanker | None = None,
    ) -> None:
        self._strategy = strategy or FoodIngredientStrategy()
        self._industrial_ranker = industrial_ranker or ecoinvent_ranker()
        self._food_ranker = food_ranker or agribalyse_ranker()

    def preferred_database(self, query: str) -> InventorySource:
        return "agribalyse" if self._strategy.is_food_ingredient(query) else "ecoinvent"

    def arbitrate(
        self,
        query: str,
        industrial: Iterable[ProcessRecord],
        food: Iterable[ProcessRecord],
    ) -> ArbitrationResult:
        industrial_ranked = self._industrial_ranker.rank(query, industrial)
        food_ranked = self._food_ranker.rank(query, food)
        return self.select(query, industrial_ranked, food_ranked)

    def select(
        self,
        query: str,
        industrial_ranked: list[ProcessRecord],
        food_ranked: list[ProcessRecord],
    ) -> ArbitrationResult:
        """Apply the preference policy to already-ranked lists."""
        if not industrial_ranked and not food_ranked:
            return ArbitrationResult(preferred=[], preferred_database=None, secondary=[])

        if self._strategy.is_food_ingredient(query) and food_ranked:
            result = ArbitrationResult(food_ranked, "agribalyse", industrial_ranked)
        else:
            result = ArbitrationResult(industrial_ranked, "ecoinvent", food_ranked)

        if not result.preferred:
            swapped: InventorySource = "agribalyse" if result.preferred_database == "ecoinvent" else "ecoinvent"
            LOGGER.info("arbitration.swap", query=query, preferred=swapped)
            result = ArbitrationResult(result.secondary, swapped, [])
        LOGGER.debug(
            "arbitration.selected",
            query=query,
            preferred=result.preferred_database,
            preferred_count=len(result.preferred),
            secondary_count=len(result.secondary),
        )
        return result
