"""Impact factor lookup and product-level aggregation."""

from .aggregator import ImpactAggregator, quality_disclosure, sum_impacts
from .lookup import FactorLookupResult, FactorLookupService, map_impact_results

__all__ = [
    "ImpactAggregator",
    "quality_disclosure",
    "sum_impacts",
    "FactorLookupResult",
    "FactorLookupService",
    "map_impact_results",
]
