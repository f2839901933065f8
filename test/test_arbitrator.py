from __future__ import annotations

from lca_impact_engine.core.models import ProcessRecord
from lca_impact_engine.resolution.arbitrator import CrossDatabaseArbitrator, FoodIngredientStrategy

INDUSTRIAL = [
    ProcessRecord(id="e1", name="market for barley grain"),
    ProcessRecord(id="e2", name="market for electricity, low voltage"),
]
FOOD = [
    ProcessRecord(id="a1", name="Barley, conventional, at farm gate"),
    ProcessRecord(id="a2", name="Orange juice, at plant"),
]


def test_food_strategy_classifies_queries() -> None:
    strategy = FoodIngredientStrategy()

    assert strategy.is_food_ingredient("barley")
    assert strategy.is_food_ingredient("Orange Juice")
    assert not strategy.is_food_ingredient("electricity")
    assert not strategy.is_food_ingredient("glass bottle")
    assert not strategy.is_food_ingredient("sodium hydroxide")


def test_food_ingredient_prefers_food_inventory() -> None:
    result = CrossDatabaseArbitrator().arbitrate("barley", INDUSTRIAL, FOOD)

    assert result.preferred_database == "agribalyse"
    assert [record.id for record in result.preferred] == ["a1"]
    assert [record.id for record in result.secondary] == ["e1"]


def test_industrial_query_prefers_industrial_inventory() -> None:
    result = CrossDatabaseArbitrator().arbitrate("electricity", INDUSTRIAL, FOOD)

    assert result.preferred_database == "ecoinvent"
    assert [record.id for record in result.preferred] == ["e2"]
    assert result.secondary == []


def test_food_query_without_food_results_uses_industrial() -> None:
    result = CrossDatabaseArbitrator().arbitrate("barley", INDUSTRIAL, [])

    assert result.preferred_database == "ecoinvent"
    assert [record.id for record in result.preferred] == ["e1"]


def test_empty_preferred_list_swaps_inventories() -> None:
    food_only = [ProcessRecord(id="a9", name="Electricity mix, France")]

    result = CrossDatabaseArbitrator().arbitrate("electricity", [], food_only)

    assert result.preferred_database == "agribalyse"
    assert [record.id for record in result.preferred] == ["a9"]
    assert result.secondary == []


def test_no_results_anywhere() -> None:
    result = CrossDatabaseArbitrator().arbitrate("unobtainium", INDUSTRIAL, FOOD)

    assert result.preferred == []
    assert result.preferred_database is None
    assert result.secondary == []


def test_preferred_database_does_not_need_results() -> None:
    arbitrator = CrossDatabaseArbitrator()

    assert arbitrator.preferred_database("honey") == "agribalyse"
    assert arbitrator.preferred_database("lorry transport") == "ecoinvent"
