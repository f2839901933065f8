"""Packaging Recovery Note (PRN) obligation arithmetic.

All functions are pure. Tonnages round to 3 decimal places and currency to
2, half-up (``floor(x * 10**dp + 0.5) / 10**dp``), so figures match what
finance teams see in spreadsheet tooling.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Iterable, Mapping, Sequence

from lca_impact_engine.core.constants import (
    CURRENCY_DECIMALS,
    PRN_EXCEEDED_TOLERANCE,
    PRN_FULFILLED_TOLERANCE,
    TONNAGE_DECIMALS,
)
from lca_impact_engine.core.exceptions import InputValidationError
from lca_impact_engine.core.models import PRNObligation, PRNStatus, PRNTarget


def round_half_up(value: float, decimals: int) -> float:
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def obligation_tonnage(total_tonnage_placed: float, recycling_target_pct: float) -> float:
    return round_half_up(total_tonnage_placed * recycling_target_pct / 100, TONNAGE_DECIMALS)


def remaining_obligation(obligation: float, purchased: float) -> float:
    return max(0.0, round_half_up(obligation - purchased, TONNAGE_DECIMALS))


def prn_cost(tonnage: float, cost_per_tonne: float) -> float:
    return round_half_up(tonnage * cost_per_tonne, CURRENCY_DECIMALS)


def prn_status(obligation: float, purchased: float) -> PRNStatus:
    """not_started -> partial -> fulfilled (within 0.1%) -> exceeded (more than 0.1% over)."""
    if obligation <= 0:
        return "fulfilled"
    if purchased <= 0:
        return "not_started"
    if purchased >= obligation * PRN_EXCEEDED_TOLERANCE:
        return "exceeded"
    if purchased >= obligation * PRN_FULFILLED_TOLERANCE:
        return "fulfilled"
    return "partial"


def overall_fulfilment_pct(obligations: Iterable[PRNObligation]) -> int:
    """Purchased over obligated tonnage as a whole percentage, clamped to [0, 100]."""
    items = list(obligations)
    total_obligation = sum(item.obligation_tonnage for item in items)
    if not items or total_obligation <= 0:
        return 100
    total_purchased = sum(item.prns_purchased_tonnage for item in items)
    pct = math.floor(total_purchased / total_obligation * 100 + 0.5)
    return max(0, min(100, pct))


def total_prn_spend(obligations: Iterable[PRNObligation]) -> float:
    return round_half_up(sum(item.total_prn_cost for item in obligations), CURRENCY_DECIMALS)


def build_prn_obligations(
    organization_id: str,
    obligation_year: int,
    tonnage_by_material: Mapping[str, float],
    targets: Sequence[PRNTarget],
) -> list[PRNObligation]:
    """One obligation per material targeted in ``obligation_year``.

    Materials missing from the tonnage snapshot get zero tonnage, which makes
    them trivially fulfilled.
    """
    if not organization_id:
        raise InputValidationError("organization_id is required")
    obligations: list[PRNObligation] = []
    for target in targets:
        if target.obligation_year != obligation_year:
            continue
        tonnage = float(tonnage_by_material.get(target.material_code, 0.0) or 0.0)
        obligations.append(
            PRNObligation(
                organization_id=organization_id,
                obligation_year=obligation_year,
                material_code=target.material_code,
                material_name=target.material_name,
                total_tonnage_placed=tonnage,
                recycling_target_pct=target.recycling_target_pct,
                obligation_tonnage=obligation_tonnage(tonnage, target.recycling_target_pct),
                prns_purchased_tonnage=0.0,
                prn_cost_per_tonne=0.0,
                total_prn_cost=0.0,
                status="not_started" if tonnage > 0 else "fulfilled",
            )
        )
    return obligations


def record_purchase(obligation: PRNObligation, purchased_tonnage: float, cost_per_tonne: float) -> PRNObligation:
    """Set (not add to) the purchased tonnage and price; derived fields follow."""
    if purchased_tonnage < 0 or cost_per_tonne < 0:
        raise InputValidationError("Purchased tonnage and cost per tonne must be non-negative")
    return replace(
        obligation,
        prns_purchased_tonnage=purchased_tonnage,
        prn_cost_per_tonne=cost_per_tonne,
        total_prn_cost=prn_cost(purchased_tonnage, cost_per_tonne),
        status=prn_status(obligation.obligation_tonnage, purchased_tonnage),
    )


def summarize_obligations(obligation_year: int, obligations: Sequence[PRNObligation]) -> dict[str, Any]:
    return {
        "year": obligation_year,
        "total_prn_spend": total_prn_spend(obligations),
        "overall_fulfilment_pct": overall_fulfilment_pct(obligations),
        "materials_count": len(obligations),
        "fulfilled_count": sum(1 for item in obligations if item.status in ("fulfilled", "exceeded")),
    }
