"""Extended producer responsibility: PRN obligations and fulfilment."""

from .prn import (
    build_prn_obligations,
    obligation_tonnage,
    overall_fulfilment_pct,
    prn_cost,
    prn_status,
    record_purchase,
    remaining_obligation,
    round_half_up,
    summarize_obligations,
    total_prn_spend,
)
from .repository import PRNObligationRepository

__all__ = [
    "build_prn_obligations",
    "obligation_tonnage",
    "overall_fulfilment_pct",
    "prn_cost",
    "prn_status",
    "record_purchase",
    "remaining_obligation",
    "round_half_up",
    "summarize_obligations",
    "total_prn_spend",
    "PRNObligationRepository",
]
