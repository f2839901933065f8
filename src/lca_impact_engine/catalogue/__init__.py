"""Inventory catalogue access and scope classification."""

from .aliases import (
    AGRIBALYSE_ALIASES,
    ECOINVENT_ALIASES,
    ECOINVENT_PREFERRED_TERMS,
    InventoryAlias,
    find_matching_aliases,
    matches_at_word_boundary,
)
from .classifier import CategoryClassifier, NamePatternClassifier, ProcessClassifier, classify_processes
from .client import OpenLCAClient
from .service import CatalogueService

__all__ = [
    "AGRIBALYSE_ALIASES",
    "ECOINVENT_ALIASES",
    "ECOINVENT_PREFERRED_TERMS",
    "InventoryAlias",
    "find_matching_aliases",
    "matches_at_word_boundary",
    "CategoryClassifier",
    "NamePatternClassifier",
    "ProcessClassifier",
    "classify_processes",
    "OpenLCAClient",
    "CatalogueService",
]
