"""Persistence of PRN targets and per-organization obligations."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from lca_impact_engine.core.exceptions import InputValidationError
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import PRNObligation, PRNTarget
from lca_impact_engine.storage.models import PRNObligationRow, PRNTargetRow

from . import prn

LOGGER = get_logger(__name__)


def _to_obligation(row: PRNObligationRow) -> PRNObligation:
    return PRNObligation(
        organization_id=row.organization_id,
        obligation_year=row.obligation_year,
        material_code=row.material_code,
        material_name=row.material_name,
        total_tonnage_placed=row.total_tonnage_placed,
        recycling_target_pct=row.recycling_target_pct,
        obligation_tonnage=row.obligation_tonnage,
        prns_purchased_tonnage=row.prns_purchased_tonnage,
        prn_cost_per_tonne=row.prn_cost_per_tonne,
        total_prn_cost=row.total_prn_cost,
        status=row.status,  # type: ignore[arg-type]
    )


def _apply(row: PRNObligationRow, obligation: PRNObligation) -> None:
    row.material_name = obligation.material_name
    row.total_tonnage_placed = obligation.total_tonnage_placed
    row.recycling_target_pct = obligation.recycling_target_pct
    row.obligation_tonnage = obligation.obligation_tonnage
    row.prns_purchased_tonnage = obligation.prns_purchased_tonnage
    row.prn_cost_per_tonne = obligation.prn_cost_per_tonne
    row.total_prn_cost = obligation.total_prn_cost
    row.status = obligation.status


class PRNObligationRepository:
    """Rows keyed by ``(organization_id, obligation_year, material_code)``."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # Targets -----------------------------------------------------------------
    def upsert_targets(self, targets: Iterable[PRNTarget]) -> int:
        count = 0
        with self._session_factory.begin() as session:
            for target in targets:
                row = session.scalars(
                    select(PRNTargetRow).where(
                        PRNTargetRow.obligation_year == target.obligation_year,
                        PRNTargetRow.material_code == target.material_code,
                    )
                ).first()
                if row is None:
                    row = PRNTargetRow(obligation_year=target.obligation_year, material_code=target.material_code)
                    session.add(row)
                row.material_name = target.material_name
                row.recycling_target_pct = target.recycling_target_pct
                count += 1
        return count

    def targets_for_year(self, obligation_year: int) -> list[PRNTarget]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(PRNTargetRow)
                .where(PRNTargetRow.obligation_year == obligation_year)
                .order_by(PRNTargetRow.material_code)
            ).all()
            return [
                PRNTarget(
                    obligation_year=row.obligation_year,
                    material_code=row.material_code,
                    recycling_target_pct=row.recycling_target_pct,
                    material_name=row.material_name,
                )
                for row in rows
            ]

    # Obligations -------------------------------------------------------------
    def create_for_year(
        self,
        organization_id: str,
        obligation_year: int,
        tonnage_by_material: Mapping[str, float],
    ) -> list[PRNObligation]:
        """Build obligations from stored targets; existing rows keep their purchases."""
        targets = self.targets_for_year(obligation_year)
        built = prn.build_prn_obligations(organization_id, obligation_year, tonnage_by_material, targets)
        results: list[PRNObligation] = []
        with self._session_factory.begin() as session:
            for obligation in built:
                row = self._find(session, organization_id, obligation_year, obligation.material_code)
                if row is None:
                    row = PRNObligationRow(
                        organization_id=organization_id,
                        obligation_year=obligation_year,
                        material_code=obligation.material_code,
                    )
                    session.add(row)
                    _apply(row, obligation)
                else:
                    # Re-snapshot tonnage while preserving recorded purchases.
                    existing = _to_obligation(row)
                    refreshed = prn.record_purchase(
                        obligation,
                        existing.prns_purchased_tonnage,
                        existing.prn_cost_per_tonne,
                    )
                    _apply(row, refreshed)
                results.append(_to_obligation(row))
        LOGGER.info(
            "prn.obligations_created",
            organization=organization_id,
            year=obligation_year,
            materials=len(results),
        )
        return results

    def record_purchase(
        self,
        organization_id: str,
        obligation_year: int,
        material_code: str,
        purchased_tonnage: float,
        cost_per_tonne: float,
    ) -> PRNObligation:
        with self._session_factory.begin() as session:
            row = self._find(session, organization_id, obligation_year, material_code)
            if row is None:
                raise InputValidationError(
                    f"No PRN obligation for {organization_id}/{obligation_year}/{material_code}"
                )
            updated = prn.record_purchase(_to_obligation(row), purchased_tonnage, cost_per_tonne)
            _apply(row, updated)
        LOGGER.info(
            "prn.purchase_recorded",
            organization=organization_id,
            year=obligation_year,
            material=material_code,
            purchased=purchased_tonnage,
            status=updated.status,
        )
        return updated

    def list_for_year(self, organization_id: str, obligation_year: int) -> list[PRNObligation]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(PRNObligationRow)
                .where(
                    PRNObligationRow.organization_id == organization_id,
                    PRNObligationRow.obligation_year == obligation_year,
                )
                .order_by(PRNObligationRow.material_code)
            ).all()
            return [_to_obligation(row) for row in rows]

    def summary(self, organization_id: str, obligation_year: int) -> dict[str, Any]:
        return prn.summarize_obligations(obligation_year, self.list_for_year(organization_id, obligation_year))

    @staticmethod
    def _find(
        session: Session,
        organization_id: str,
        obligation_year: int,
        material_code: str,
    ) -> PRNObligationRow | None:
        return session.scalars(
            select(PRNObligationRow).where(
                PRNObligationRow.organization_id == organization_id,
                PRNObligationRow.obligation_year == obligation_year,
                PRNObligationRow.material_code == material_code,
            )
        ).first()
