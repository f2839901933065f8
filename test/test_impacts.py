from __future__ import annotations

from typing import Any

import pytest

from lca_impact_engine.catalogue import CatalogueService
from lca_impact_engine.core.config import Settings
from lca_impact_engine.core.exceptions import InputValidationError
from lca_impact_engine.core.models import MaterialImpactFactor, MaterialLine, ProcessRecord
from lca_impact_engine.impacts import FactorLookupService, ImpactAggregator, map_impact_results
from lca_impact_engine.resolution import SearchService
from lca_impact_engine.storage import LookupCache, create_db_engine, create_session_factory, init_db

MALT = MaterialImpactFactor(climate=0.8, water=2.0, land=1.5, waste=0.01, data_quality="secondary_modelled")
GLASS = MaterialImpactFactor(climate=1.2, water=0.5, land=0.02, waste=0.05, data_quality="primary_verified")


class FakeCalculatingClient:
    def __init__(self, records: list[ProcessRecord], impacts: list[dict[str, Any]]) -> None:
        self.records = records
        self.impacts = impacts
        self.calculations: list[tuple[str, str]] = []

    def list_processes(self) -> list[ProcessRecord]:
        return list(self.records)

    def calculate_process(self, process_id: str, method_name: str, amount: float = 1.0) -> list[dict[str, Any]]:
        self.calculations.append((process_id, method_name))
        return self.impacts

    def close(self) -> None:
        pass


def _ids() -> Any:
    counter = iter(range(1, 100))
    return lambda: f"calc-{next(counter)}"


def test_aggregate_sums_each_category() -> None:
    aggregator = ImpactAggregator(id_factory=_ids())
    lines = [
        MaterialLine(name="malt", quantity=2.0, factor=MALT),
        MaterialLine(name="glass bottle", quantity=0.5, factor=GLASS),
    ]

    result = aggregator.aggregate("gin-70cl", lines)

    assert result.calculation_id == "calc-1"
    assert result.totals.climate == pytest.approx(2.2)
    assert result.totals.water == pytest.approx(4.25)
    assert result.totals.land == pytest.approx(3.01)
    assert result.totals.waste == pytest.approx(0.045)
    assert [item.name for item in result.contributions] == ["malt", "glass bottle"]
    assert result.quality_disclosure["secondary_modelled"]["materials"] == 1.0
    assert result.quality_disclosure["secondary_modelled"]["climate_share_pct"] == pytest.approx(1.6 / 2.2 * 100)
    assert result.quality_disclosure["primary_verified"]["climate_share_pct"] == pytest.approx(0.6 / 2.2 * 100)


def test_supersede_leaves_previous_calculation_untouched() -> None:
    aggregator = ImpactAggregator(id_factory=_ids())
    original = aggregator.aggregate("gin-70cl", [MaterialLine(name="malt", quantity=1.0, factor=MALT)])

    updated = aggregator.supersede(
        original,
        [MaterialLine(name="malt", quantity=1.0, factor=MALT), MaterialLine(name="glass", quantity=1.0, factor=GLASS)],
    )

    assert updated.supersedes == original.calculation_id
    assert updated.calculation_id != original.calculation_id
    assert original.totals.climate == pytest.approx(0.8)
    assert updated.totals.climate == pytest.approx(2.0)


def test_empty_material_list_gives_zero_totals() -> None:
    result = ImpactAggregator(id_factory=_ids()).aggregate("water-only", [])

    assert result.totals.as_dict() == {"climate": 0.0, "water": 0.0, "land": 0.0, "waste": 0.0}
    assert result.quality_disclosure == {}


def test_invalid_inputs_are_rejected() -> None:
    aggregator = ImpactAggregator(id_factory=_ids())

    with pytest.raises(InputValidationError):
        aggregator.aggregate("gin-70cl", [MaterialLine(name="malt", quantity=-1.0, factor=MALT)])
    with pytest.raises(InputValidationError):
        aggregator.aggregate("", [])


def test_map_impact_results_prefers_parent_categories() -> None:
    values = map_impact_results(
        [
            {"impactCategory": {"name": "Climate change - Fossil"}, "amount": 1.0},
            {"impactCategory": {"name": "Climate change"}, "amount": 3.0},
            {"impactCategory": {"name": "Water consumption"}, "value": 0.2},
            {"impactCategory": {"name": "Land use"}, "amount": 0.5},
            {"impactCategory": {"name": "Ozone depletion"}, "amount": 9.9},
        ]
    )

    assert values == {"climate": 3.0, "water": 0.2, "land": 0.5, "waste": 0.0}


def _lookup_service(clients: dict[str, FakeCalculatingClient]) -> tuple[FactorLookupService, LookupCache]:
    settings = Settings(openlca_impact_method="ReCiPe 2016", min_query_length=2)
    engine = create_db_engine("sqlite://")
    init_db(engine)
    cache = LookupCache(create_session_factory(engine), ttl_hours=24.0)
    search = SearchService(settings, catalogue=CatalogueService(settings, clients=clients), cache=cache)
    return FactorLookupService(search, settings, cache=cache), cache


def test_lookup_calculates_top_process_and_caches() -> None:
    client = FakeCalculatingClient(
        [ProcessRecord(id="e-glass", name="market for packaging glass, green", category="C:Manufacturing/23")],
        [{"impactCategory": {"name": "Climate change"}, "amount": 1.1}],
    )
    service, _ = _lookup_service({"ecoinvent": client})

    first = service.lookup("Glass Bottle")
    second = service.lookup("glass bottle")

    assert first.resolved is True
    assert first.cached is False
    assert first.source == "ecoinvent"
    assert first.factor is not None
    assert first.factor.climate == pytest.approx(1.1)
    assert first.factor.source_reference == "ecoinvent:e-glass"
    assert first.factor.data_quality == "secondary_modelled"
    assert client.calculations == [("e-glass", "ReCiPe 2016")]

    assert second.cached is True
    assert second.factor == first.factor
    assert second.process == first.process
    assert len(client.calculations) == 1


def test_lookup_without_matches_is_unresolved() -> None:
    client = FakeCalculatingClient([ProcessRecord(id="e1", name="beer production", category="C:Manufacturing/11")], [])
    service, _ = _lookup_service({"ecoinvent": client})

    result = service.lookup("unobtainium")

    assert result.resolved is False
    assert result.factor is None
    assert client.calculations == []


def test_lookup_without_provider_returns_placeholder() -> None:
    service, cache = _lookup_service({})

    result = service.lookup("barley")

    assert result.mock is True
    assert result.factor is not None
    assert result.factor.climate == 0.0
    assert result.factor.source_reference == "placeholder:no-provider"
    assert cache.get("barley", "factor") is None


def test_lookup_rejects_short_terms() -> None:
    service, _ = _lookup_service({})

    with pytest.raises(InputValidationError):
        service.lookup(" x ")
