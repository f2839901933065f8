from __future__ import annotations

from lca_impact_engine.catalogue.classifier import (
    CategoryClassifier,
    NamePatternClassifier,
    classify_processes,
)
from lca_impact_engine.core.models import ProcessRecord

BEVERAGES = "C:Manufacturing/11:Manufacture of beverages/1103:Manufacture of malt liquors and malt"
METALS = "C:Manufacturing/25:Manufacture of fabricated metal products"
CHEMICALS = "C:Manufacturing/20:Manufacture of chemicals and chemical products"
RECOVERY = "E:Water supply; sewerage, waste management and remediation activities/38/383:Materials recovery"
MINING = "B:Mining and quarrying/05:Mining of coal and lignite"
ELECTRICITY = "D:Electricity, gas, steam and air conditioning supply/351:Electric power generation"


def _catalogue() -> list[ProcessRecord]:
    return [
        ProcessRecord(id="1", name="beer production", category=BEVERAGES),
        ProcessRecord(id="2", name="coal mining, open cast", category=MINING),
        ProcessRecord(id="3", name="treatment of used beverage can, incineration of residues", category=RECOVERY),
        ProcessRecord(id="4", name="pesticide production, unspecified", category=CHEMICALS),
        ProcessRecord(id="5", name="electricity production, hard coal", category=ELECTRICITY),
        ProcessRecord(id="6", name="lorry production, 16 metric ton", category=METALS),
        ProcessRecord(id="7", name="market for citric acid", category=CHEMICALS),
        ProcessRecord(id="8", name="landfill of glass, packaging glass cullet", category=RECOVERY),
    ]


def test_category_gate_and_exclusions() -> None:
    kept = {record.id for record in CategoryClassifier().filter(_catalogue())}

    assert kept == {"1", "3", "5", "7", "8"}


def test_keep_pattern_overrides_exclusion() -> None:
    classifier = CategoryClassifier()
    can = ProcessRecord(id="3", name="treatment of used beverage can, incineration of residues", category=RECOVERY)
    plain_incineration = ProcessRecord(id="9", name="incineration of residues", category=RECOVERY)

    assert classifier.is_relevant(can)
    assert not classifier.is_relevant(plain_incineration)


def test_keep_pattern_does_not_bypass_category_gate() -> None:
    record = ProcessRecord(id="x", name="beverage carton production", category="F:Construction")

    assert not CategoryClassifier().is_relevant(record)


def test_classifier_is_idempotent() -> None:
    once = classify_processes(_catalogue())
    twice = classify_processes(once)

    assert twice == once


def test_matching_is_case_insensitive() -> None:
    record = ProcessRecord(id="1", name="Market for PACKAGING GLASS, brown", category=RECOVERY)
    excluded = ProcessRecord(id="2", name="Semiconductor Wafer Production", category=CHEMICALS)

    assert CategoryClassifier().filter([record, excluded]) == [record]


def test_name_pattern_classifier_excludes_before_keeping() -> None:
    records = [
        ProcessRecord(id="a", name="Apple juice, pasteurised, at plant"),
        ProcessRecord(id="b", name="Beef, minced, raw"),
        ProcessRecord(id="c", name="Wheat bread, sliced"),
        ProcessRecord(id="d", name="Glass bottle, 75 cl"),
        ProcessRecord(id="e", name="Lait demi-écrémé, UHT"),
        ProcessRecord(id="f", name="Cotton textile, woven"),
        ProcessRecord(id="g", name="Potato, boiled"),
    ]

    kept = NamePatternClassifier().filter(records)

    assert [record.id for record in kept] == ["a", "d", "e"]
    assert NamePatternClassifier().filter(kept) == kept


def test_name_pattern_classifier_keeps_drinks_inputs() -> None:
    records = [
        ProcessRecord(id="w", name="Water, spring, bottled"),
        ProcessRecord(id="m", name="Malt, for brewing"),
        ProcessRecord(id="c", name="Cashew nut, roasted"),
        ProcessRecord(id="k", name="Cardamom, dried"),
        ProcessRecord(id="l", name="Licorice root, dried"),
        ProcessRecord(id="z", name="Gravel, crushed"),
    ]

    kept = NamePatternClassifier().filter(records)

    assert [record.id for record in kept] == ["w", "m", "c", "k", "l"]
