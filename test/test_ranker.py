from __future__ import annotations

from lca_impact_engine.catalogue.aliases import alias_patterns, find_matching_aliases
from lca_impact_engine.core.models import ProcessRecord
from lca_impact_engine.resolution.ranker import (
    RelevanceRanker,
    ScoringRule,
    agribalyse_ranker,
    ecoinvent_ranker,
)


def _records(*names: str) -> list[ProcessRecord]:
    return [ProcessRecord(id=f"p{index}", name=name) for index, name in enumerate(names)]


def test_aluminium_can_prefers_market_average_alloy() -> None:
    records = _records(
        "aluminium oxide production",
        "treatment of used beverage can",
        "market for glass bottle",
        "sheet rolling, aluminium",
        "market for aluminium, wrought alloy",
    )

    scored = ecoinvent_ranker().rank_scored("aluminium can", records)

    assert [(item.record.name, item.score) for item in scored] == [
        ("market for aluminium, wrought alloy", 165),
        ("sheet rolling, aluminium", 115),
        ("treatment of used beverage can", 95),
        ("aluminium oxide production", -15),
    ]


def test_score_breakdown_lists_contributing_rules() -> None:
    record = ProcessRecord(id="1", name="market for aluminium, wrought alloy")

    breakdown = ecoinvent_ranker().score("aluminium can", record)

    assert breakdown == {"alias": 100, "market_average": 50, "packaging_context": 15}


def test_ties_are_broken_alphabetically() -> None:
    records = _records(
        "barley grain production, organic",
        "malt production",
        "barley grain production, conventional",
    )

    scored = ecoinvent_ranker().rank_scored("barley", records)

    assert [(item.record.name, item.score) for item in scored] == [
        ("barley grain production, conventional", 130),
        ("barley grain production, organic", 130),
        ("malt production", 100),
    ]


def test_ranking_is_deterministic() -> None:
    records = _records("market for barley grain", "barley grain production", "market for malt")
    ranker = ecoinvent_ranker()

    first = ranker.rank("barley", records)
    second = ranker.rank("barley", list(reversed(records)))

    assert first == second


def test_aliases_respect_word_boundaries() -> None:
    patterns = alias_patterns("liquorice")
    ranked = ecoinvent_ranker().rank("liquorice", _records("market for rice", "liquorice root, dried"))

    assert "market for rice" not in patterns
    assert [record.name for record in ranked] == ["liquorice root, dried"]


def test_compound_query_triggers_every_matching_alias() -> None:
    terms = {alias.search_terms[0] for alias in find_matching_aliases("aluminium can")}

    assert {"aluminium can", "aluminium"} <= terms
    assert "aluminium foil" not in terms


def test_query_without_usable_words_returns_nothing() -> None:
    assert ecoinvent_ranker().rank("a", _records("a process")) == []


def test_long_names_are_penalised() -> None:
    long_name = "market for barley grain, " + "x" * 120
    breakdown = ecoinvent_ranker().score("barley", ProcessRecord(id="1", name=long_name))

    assert breakdown["long_name"] == -10


def test_agribalyse_prefers_conventional_variant() -> None:
    records = _records("Orange, organic", "Orange juice, conventional, at plant")

    scored = agribalyse_ranker().rank_scored("orange juice", records)

    assert [(item.record.name, item.score) for item in scored] == [
        ("Orange juice, conventional, at plant", 135),
        ("Orange, organic", 100),
    ]


def test_rules_are_data() -> None:
    rules = (ScoringRule("has_organic", 7, lambda name, _query: "organic" in name),)
    ranker = RelevanceRanker(rules, alias_lookup=lambda _query: ())

    scored = ranker.rank_scored("barley", _records("barley, organic", "barley"))

    assert [(item.record.name, item.score) for item in scored] == [("barley, organic", 7), ("barley", 0)]
