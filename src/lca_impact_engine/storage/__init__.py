"""Relational persistence for caches, allocations and PRN obligations."""

from .cache import LookupCache, normalize_term
from .database import create_db_engine, create_session_factory, init_db
from .models import (
    Base,
    FacilityEmissionsRollup,
    LookupCacheEntry,
    PRNObligationRow,
    PRNTargetRow,
    ProductionSite,
)

__all__ = [
    "LookupCache",
    "normalize_term",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "Base",
    "FacilityEmissionsRollup",
    "LookupCacheEntry",
    "PRNObligationRow",
    "PRNTargetRow",
    "ProductionSite",
]
