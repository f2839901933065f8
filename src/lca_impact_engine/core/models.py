"""Shared data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Mapping

InventorySource = Literal["ecoinvent", "agribalyse"]
DataQualityTag = Literal["primary_verified", "secondary_modelled", "hybrid_proxy"]
PRNStatus = Literal["not_started", "partial", "fulfilled", "exceeded"]
SiteDataSource = Literal["Verified", "Industry_Average"]
IngredientType = Literal["ingredient", "packaging"]
Confidence = Literal["high", "medium", "low"]

IMPACT_CATEGORIES: tuple[str, ...] = ("climate", "water", "land", "waste")


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    id: str
    name: str
    category: str = ""
    unit: str = "kg"
    location: str | None = None
    process_type: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProcessRecord":
        return cls(
            id=str(payload.get("id") or payload.get("@id") or ""),
            name=str(payload.get("name") or ""),
            category=str(payload.get("category") or ""),
            unit=str(payload.get("unit") or payload.get("refUnit") or "kg"),
            location=payload.get("location") or None,
            process_type=payload.get("process_type") or payload.get("processType") or None,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    def summary(self) -> dict[str, str]:
        """Return the public ``{id, name, category, unit}`` shape."""
        return {"id": self.id, "name": self.name, "category": self.category, "unit": self.unit}


@dataclass(slots=True, frozen=True)
class Uncertainty:
    low: float | None = None
    high: float | None = None
    std_dev: float | None = None
    pedigree: tuple[int, ...] | None = None


@dataclass(slots=True, frozen=True)
class MaterialImpactFactor:
    """Per-unit impacts of one material; never mutated once attached to a calculation."""

    climate: float
    water: float
    land: float
    waste: float
    data_quality: DataQualityTag = "secondary_modelled"
    uncertainty: Uncertainty | None = None
    source_reference: str | None = None

    def value(self, category: str) -> float:
        return float(getattr(self, category))


@dataclass(slots=True, frozen=True)
class MaterialLine:
    name: str
    quantity: float
    factor: MaterialImpactFactor
    unit: str = "kg"


@dataclass(slots=True, frozen=True)
class ImpactTotals:
    climate: float = 0.0
    water: float = 0.0
    land: float = 0.0
    waste: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class MaterialContribution:
    name: str
    quantity: float
    impacts: ImpactTotals
    data_quality: DataQualityTag


@dataclass(slots=True, frozen=True)
class ProductImpacts:
    calculation_id: str
    product_id: str
    totals: ImpactTotals
    contributions: tuple[MaterialContribution, ...]
    quality_disclosure: Mapping[str, Mapping[str, float]]
    supersedes: str | None = None


@dataclass(slots=True, frozen=True)
class SiteAllocation:
    product_id: str
    facility_id: str
    production_volume: float
    share_of_production: float
    facility_intensity: float
    attributable_emissions_per_unit: float
    data_source: SiteDataSource = "Industry_Average"


@dataclass(slots=True, frozen=True)
class PRNTarget:
    obligation_year: int
    material_code: str
    recycling_target_pct: float
    material_name: str = ""


@dataclass(slots=True, frozen=True)
class PRNObligation:
    organization_id: str
    obligation_year: int
    material_code: str
    total_tonnage_placed: float
    recycling_target_pct: float
    obligation_tonnage: float
    prns_purchased_tonnage: float = 0.0
    prn_cost_per_tonne: float = 0.0
    total_prn_cost: float = 0.0
    status: PRNStatus = "not_started"
    material_name: str = ""

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class ProxySuggestion:
    proxy_name: str
    search_query: str
    category: str = "Unknown"
    reasoning: str = ""
    confidence: Confidence = "low"
    uncertainty_impact: str | None = None
    validated: bool | None = None
    result_count: int | None = None
    top_match_name: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(slots=True, frozen=True)
class SearchRequest:
    query: str
    organization_id: str | None = None


@dataclass(slots=True)
class SearchResponse:
    results: list[ProcessRecord]
    cached: bool = False
    mock: bool = False
    preferred_database: InventorySource | None = None
    secondary: list[ProcessRecord] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "results": [record.summary() for record in self.results],
            "cached": self.cached,
            "mock": self.mock,
            "preferred_database": self.preferred_database,
            "secondary": [record.summary() for record in self.secondary],
        }


@dataclass(slots=True, frozen=True)
class ProxySuggestionRequest:
    ingredient_name: str
    ingredient_type: IngredientType = "ingredient"
    product_context: str | None = None
    organization_id: str | None = None


@dataclass(slots=True)
class ProxySuggestionResponse:
    success: bool
    suggestions: list[ProxySuggestion] = field(default_factory=list)
    cached: bool = False
    from_fallback: bool = False
    remaining: int = 0
    error: str | None = None
    reset_in_seconds: float | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "suggestions": [item.as_dict() for item in self.suggestions],
            "cached": self.cached,
            "from_fallback": self.from_fallback,
            "remaining": self.remaining,
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.reset_in_seconds is not None:
            payload["reset_in_seconds"] = self.reset_in_seconds
        return payload
