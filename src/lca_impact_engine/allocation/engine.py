"""Production-volume weighting of facility emission intensities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from lca_impact_engine.core.exceptions import InputValidationError
from lca_impact_engine.core.models import SiteAllocation, SiteDataSource

PRIMARY_DATA_SOURCE_TYPE = "Primary"


@dataclass(slots=True, frozen=True)
class SiteInput:
    facility_id: str
    production_volume: float
    facility_intensity: float = 0.0
    data_source: SiteDataSource = "Industry_Average"


def data_source_for(data_source_type: str | None) -> SiteDataSource:
    """Primary-metered rollups are ``Verified``; anything else is an industry average."""
    return "Verified" if data_source_type == PRIMARY_DATA_SOURCE_TYPE else "Industry_Average"


def production_shares(volumes: Sequence[float]) -> list[float]:
    """Percentage share of each volume; all zero when the total is zero."""
    if any(volume < 0 for volume in volumes):
        raise InputValidationError("Production volumes must be non-negative")
    total = sum(volumes)
    if total <= 0:
        return [0.0 for _ in volumes]
    return [volume / total * 100 for volume in volumes]


def allocate(product_id: str, sites: Sequence[SiteInput]) -> list[SiteAllocation]:
    """Recompute every sibling's share in one pass.

    The attributable figure is the facility intensity verbatim; the share is
    applied by ``weighted_intensity``.
    """
    if not product_id:
        raise InputValidationError("product_id is required")
    shares = production_shares([site.production_volume for site in sites])
    return [
        SiteAllocation(
            product_id=product_id,
            facility_id=site.facility_id,
            production_volume=site.production_volume,
            share_of_production=share,
            facility_intensity=site.facility_intensity,
            attributable_emissions_per_unit=site.facility_intensity,
            data_source=site.data_source,
        )
        for site, share in zip(sites, shares)
    ]


def weighted_intensity(allocations: Iterable[SiteAllocation]) -> float:
    """Product per-unit intensity: ``Σ share_i / 100 × intensity_i``."""
    return sum(item.share_of_production / 100 * item.facility_intensity for item in allocations)
