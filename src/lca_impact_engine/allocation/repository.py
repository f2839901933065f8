"""Persistent production-site links with transactional sibling recalculation."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from lca_impact_engine.core.exceptions import AllocationError, InputValidationError
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import SiteAllocation
from lca_impact_engine.storage.models import FacilityEmissionsRollup, ProductionSite

from . import engine
from .engine import SiteInput

LOGGER = get_logger(__name__)


def _to_allocation(row: ProductionSite) -> SiteAllocation:
    return SiteAllocation(
        product_id=row.product_id,
        facility_id=row.facility_id,
        production_volume=row.production_volume,
        share_of_production=row.share_of_production,
        facility_intensity=row.facility_intensity,
        attributable_emissions_per_unit=row.attributable_emissions_per_unit,
        data_source=row.data_source,  # type: ignore[arg-type]
    )


class ProductionSiteRepository:
    """Every write recomputes all sibling shares of the product in the same transaction.

    If anything fails the transaction rolls back and the previously stored
    shares stay untouched.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def link_site(self, product_id: str, facility_id: str, production_volume: float) -> list[SiteAllocation]:
        _require_ids(product_id, facility_id)
        _require_volume(production_volume)
        try:
            with self._session_factory.begin() as session:
                if self._find(session, product_id, facility_id) is not None:
                    raise AllocationError(f"Facility {facility_id} is already linked to product {product_id}")
                intensity, data_source = self._latest_intensity(session, facility_id)
                session.add(
                    ProductionSite(
                        product_id=product_id,
                        facility_id=facility_id,
                        production_volume=production_volume,
                        facility_intensity=intensity,
                        attributable_emissions_per_unit=intensity,
                        data_source=data_source,
                    )
                )
                session.flush()
                allocations = self._recompute(session, product_id)
        except IntegrityError as exc:
            raise AllocationError(f"Facility {facility_id} is already linked to product {product_id}") from exc
        LOGGER.info("allocation.site_linked", product=product_id, facility=facility_id, sites=len(allocations))
        return allocations

    def update_volume(self, product_id: str, facility_id: str, production_volume: float) -> list[SiteAllocation]:
        _require_ids(product_id, facility_id)
        _require_volume(production_volume)
        with self._session_factory.begin() as session:
            row = self._find(session, product_id, facility_id)
            if row is None:
                raise AllocationError(f"Facility {facility_id} is not linked to product {product_id}")
            row.production_volume = production_volume
            session.flush()
            allocations = self._recompute(session, product_id)
        LOGGER.info("allocation.volume_updated", product=product_id, facility=facility_id, volume=production_volume)
        return allocations

    def unlink_site(self, product_id: str, facility_id: str) -> list[SiteAllocation]:
        """Delete a link and recompute the remaining siblings only."""
        _require_ids(product_id, facility_id)
        with self._session_factory.begin() as session:
            row = self._find(session, product_id, facility_id)
            if row is None:
                raise AllocationError(f"Facility {facility_id} is not linked to product {product_id}")
            session.delete(row)
            session.flush()
            allocations = self._recompute(session, product_id)
        LOGGER.info("allocation.site_unlinked", product=product_id, facility=facility_id, sites=len(allocations))
        return allocations

    def refresh_intensities(self, product_id: str) -> list[SiteAllocation]:
        """Re-read every site's cached intensity from the latest facility rollup."""
        with self._session_factory.begin() as session:
            for row in self._siblings(session, product_id):
                intensity, data_source = self._latest_intensity(session, row.facility_id)
                row.facility_intensity = intensity
                row.data_source = data_source
            session.flush()
            return self._recompute(session, product_id)

    def list_sites(self, product_id: str) -> list[SiteAllocation]:
        with self._session_factory() as session:
            return [_to_allocation(row) for row in self._siblings(session, product_id)]

    def weighted_intensity(self, product_id: str) -> float:
        return engine.weighted_intensity(self.list_sites(product_id))

    # Internals ---------------------------------------------------------------
    @staticmethod
    def _find(session: Session, product_id: str, facility_id: str) -> ProductionSite | None:
        return session.scalars(
            select(ProductionSite).where(
                ProductionSite.product_id == product_id,
                ProductionSite.facility_id == facility_id,
            )
        ).first()

    @staticmethod
    def _siblings(session: Session, product_id: str) -> list[ProductionSite]:
        return list(
            session.scalars(
                select(ProductionSite)
                .where(ProductionSite.product_id == product_id)
                .order_by(ProductionSite.facility_id)
            ).all()
        )

    @staticmethod
    def _latest_intensity(session: Session, facility_id: str) -> tuple[float, str]:
        rollup = session.scalars(
            select(FacilityEmissionsRollup)
            .where(FacilityEmissionsRollup.facility_id == facility_id)
            .order_by(
                FacilityEmissionsRollup.reporting_year.desc(),
                FacilityEmissionsRollup.reporting_period.desc(),
            )
        ).first()
        if rollup is None:
            return 0.0, "Industry_Average"
        return float(rollup.calculated_intensity or 0.0), engine.data_source_for(rollup.data_source_type)

    def _recompute(self, session: Session, product_id: str) -> list[SiteAllocation]:
        rows = self._siblings(session, product_id)
        allocations = engine.allocate(
            product_id,
            [
                SiteInput(
                    facility_id=row.facility_id,
                    production_volume=row.production_volume,
                    facility_intensity=row.facility_intensity,
                    data_source=row.data_source,  # type: ignore[arg-type]
                )
                for row in rows
            ],
        )
        for row, allocation in zip(rows, allocations):
            row.share_of_production = allocation.share_of_production
            row.attributable_emissions_per_unit = allocation.attributable_emissions_per_unit
        return allocations


def _require_ids(product_id: str, facility_id: str) -> None:
    if not product_id or not facility_id:
        raise InputValidationError("product_id and facility_id are required")


def _require_volume(volume: float) -> None:
    if volume < 0:
        raise InputValidationError("production_volume must be non-negative")
