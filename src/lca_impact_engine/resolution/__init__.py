"""Query resolution: relevance ranking, cross-inventory arbitration and search."""

from .arbitrator import ArbitrationResult, CrossDatabaseArbitrator, FoodIngredientStrategy, PreferenceStrategy
from .ranker import (
    AGRIBALYSE_RULES,
    ECOINVENT_RULES,
    RankedProcess,
    RelevanceRanker,
    ScoringRule,
    agribalyse_ranker,
    ecoinvent_ranker,
)
from .service import SearchService, mock_results

__all__ = [
    "ArbitrationResult",
    "CrossDatabaseArbitrator",
    "FoodIngredientStrategy",
    "PreferenceStrategy",
    "AGRIBALYSE_RULES",
    "ECOINVENT_RULES",
    "RankedProcess",
    "RelevanceRanker",
    "ScoringRule",
    "agribalyse_ranker",
    "ecoinvent_ranker",
    "SearchService",
    "mock_results",
]
