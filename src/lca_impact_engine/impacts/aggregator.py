"""Product-level aggregation of per-material impact factors."""

from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Callable, Iterable, Sequence

from lca_impact_engine.core.exceptions import InputValidationError
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import (
    IMPACT_CATEGORIES,
    ImpactTotals,
    MaterialContribution,
    MaterialLine,
    ProductImpacts,
)

LOGGER = get_logger(__name__)


def _material_impacts(line: MaterialLine) -> ImpactTotals:
    return ImpactTotals(**{category: line.quantity * line.factor.value(category) for category in IMPACT_CATEGORIES})


def sum_impacts(contributions: Iterable[ImpactTotals]) -> ImpactTotals:
    """Sum each category independently."""
    totals = dict.fromkeys(IMPACT_CATEGORIES, 0.0)
    for impacts in contributions:
        for category in IMPACT_CATEGORIES:
            totals[category] += getattr(impacts, category)
    return ImpactTotals(**totals)


def quality_disclosure(contributions: Sequence[MaterialContribution], total_climate: float) -> dict[str, dict[str, float]]:
    """Material count and share of the climate total per data-quality tag.

    Quality is reported alongside the totals; it never changes the numbers.
    """
    grouped: dict[str, list[MaterialContribution]] = defaultdict(list)
    for contribution in contributions:
        grouped[contribution.data_quality].append(contribution)
    disclosure: dict[str, dict[str, float]] = {}
    for tag, members in grouped.items():
        climate = sum(member.impacts.climate for member in members)
        share = climate / total_climate * 100 if total_climate else 0.0
        disclosure[tag] = {"materials": float(len(members)), "climate_share_pct": share}
    return disclosure


class ImpactAggregator:
    """Builds immutable ``ProductImpacts`` calculations from material lines."""

    def __init__(self, *, id_factory: Callable[[], str] | None = None) -> None:
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def aggregate(
        self,
        product_id: str,
        materials: Sequence[MaterialLine],
        *,
        supersedes: str | None = None,
    ) -> ProductImpacts:
        if not product_id:
            raise InputValidationError("product_id is required")
        contributions: list[MaterialContribution] = []
        for line in materials:
            if line.quantity < 0:
                raise InputValidationError(f"Material '{line.name}' has a negative quantity")
            contributions.append(
                MaterialContribution(
                    name=line.name,
                    quantity=line.quantity,
                    impacts=_material_impacts(line),
                    data_quality=line.factor.data_quality,
                )
            )
        totals = sum_impacts(item.impacts for item in contributions)
        result = ProductImpacts(
            calculation_id=self._id_factory(),
            product_id=product_id,
            totals=totals,
            contributions=tuple(contributions),
            quality_disclosure=quality_disclosure(contributions, totals.climate),
            supersedes=supersedes,
        )
        LOGGER.info(
            "impacts.aggregated",
            product=product_id,
            calculation=result.calculation_id,
            materials=len(contributions),
            climate=totals.climate,
        )
        return result

    def supersede(self, previous: ProductImpacts, materials: Sequence[MaterialLine]) -> ProductImpacts:
        """Recalculate after a material-list change; ``previous`` is left untouched."""
        return self.aggregate(previous.product_id, materials, supersedes=previous.calculation_id)
