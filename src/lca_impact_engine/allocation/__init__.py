"""Facility allocation: production-volume weighted site intensities."""

from .engine import SiteInput, allocate, data_source_for, production_shares, weighted_intensity
from .repository import ProductionSiteRepository

__all__ = [
    "SiteInput",
    "allocate",
    "data_source_for",
    "production_shares",
    "weighted_intensity",
    "ProductionSiteRepository",
]
