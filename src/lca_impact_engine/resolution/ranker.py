"""Alias-aware relevance ranking of inventory process records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from lca_impact_engine.catalogue.aliases import agribalyse_patterns, alias_patterns
from lca_impact_engine.core.constants import LONG_NAME_THRESHOLD
from lca_impact_engine.core.models import ProcessRecord

END_OF_LIFE_INDICATORS: tuple[str, ...] = ("treatment of waste", "treatment of used")
CHEMICAL_INDICATORS: tuple[str, ...] = (
    "oxide",
    "fluoride",
    "chloride",
    "hydroxide",
    "sulfate",
    "sulphate",
    "nitrate",
    "carbonate",
)
PACKAGING_INDICATORS: tuple[str, ...] = (
    "packaging",
    "beverage",
    "bottle",
    "wrought",
    "sheet rolling",
    "deep drawing",
)


@dataclass(slots=True, frozen=True)
class RankingQuery:
    """A normalized query plus the alias patterns it triggers."""

    text: str
    words: tuple[str, ...]
    alias_patterns: tuple[str, ...]
    phrase_pattern: re.Pattern[str]

    @classmethod
    def build(cls, query: str, patterns: Sequence[str] = ()) -> "RankingQuery":
        text = query.lower().strip()
        words = tuple(word for word in text.split() if len(word) > 1)
        return cls(
            text=text,
            words=words,
            alias_patterns=tuple(pattern.lower() for pattern in patterns),
            phrase_pattern=re.compile(rf"\b{re.escape(text)}\b"),
        )

    def matches_alias(self, name: str) -> bool:
        return any(pattern in name for pattern in self.alias_patterns)

    def recalls(self, name: str) -> bool:
        """Recall gate: the name must contain a query word or an alias pattern."""
        return any(word in name for word in self.words) or self.matches_alias(name)


Predicate = Callable[[str, RankingQuery], bool]


@dataclass(slots=True, frozen=True)
class ScoringRule:
    """A named signed weight applied when ``predicate(lowercase_name, query)`` holds."""

    name: str
    weight: int
    predicate: Predicate

    def apply(self, name: str, query: RankingQuery) -> int:
        return self.weight if self.predicate(name, query) else 0


@dataclass(slots=True, frozen=True)
class RankedProcess:
    record: ProcessRecord
    score: int


def _contains_any(indicators: Iterable[str]) -> Predicate:
    frozen = tuple(indicators)
    return lambda name, _query: any(indicator in name for indicator in frozen)


ALIAS_RULE = ScoringRule("alias", 100, lambda name, query: query.matches_alias(name))
WHOLE_PHRASE_RULE = ScoringRule("whole_word", 20, lambda name, query: bool(query.phrase_pattern.search(name)))
ALL_WORDS_RULE = ScoringRule("all_words", 10, lambda name, query: all(word in name for word in query.words))
LONG_NAME_RULE = ScoringRule("long_name", -10, lambda name, _query: len(name) > LONG_NAME_THRESHOLD)

ECOINVENT_RULES: tuple[ScoringRule, ...] = (
    ALIAS_RULE,
    ScoringRule("market_average", 50, lambda name, _query: name.startswith("market for")),
    WHOLE_PHRASE_RULE,
    ALL_WORDS_RULE,
    ScoringRule("end_of_life", -20, _contains_any(END_OF_LIFE_INDICATORS)),
    ScoringRule("niche_chemical", -15, _contains_any(CHEMICAL_INDICATORS)),
    ScoringRule("packaging_context", 15, _contains_any(PACKAGING_INDICATORS)),
    LONG_NAME_RULE,
)

AGRIBALYSE_RULES: tuple[ScoringRule, ...] = (
    ALIAS_RULE,
    WHOLE_PHRASE_RULE,
    ALL_WORDS_RULE,
    ScoringRule("conventional", 5, lambda name, _query: "conventional" in name),
    LONG_NAME_RULE,
)


class RelevanceRanker:
    """Scores records by summing an ordered tuple of ``ScoringRule`` weights.

    Pure: identical inputs always give the identical ordering. Ties are broken
    alphabetically by name.
    """

    def __init__(
        self,
        rules: Sequence[ScoringRule] = ECOINVENT_RULES,
        *,
        alias_lookup: Callable[[str], Sequence[str]] = alias_patterns,
    ) -> None:
        self._rules = tuple(rules)
        self._alias_lookup = alias_lookup

    @property
    def rules(self) -> tuple[ScoringRule, ...]:
        return self._rules

    def prepare(self, query: str) -> RankingQuery:
        return RankingQuery.build(query, self._alias_lookup(query))

    def rank_scored(self, query: str, records: Iterable[ProcessRecord]) -> list[RankedProcess]:
        prepared = self.prepare(query)
        if not prepared.words:
            return []
        scored: list[RankedProcess] = []
        for record in records:
            name = record.name.lower()
            if not prepared.recalls(name):
                continue
            total = sum(rule.apply(name, prepared) for rule in self._rules)
            scored.append(RankedProcess(record=record, score=total))
        scored.sort(key=lambda item: (-item.score, item.record.name.lower(), item.record.name))
        return scored

    def rank(self, query: str, records: Iterable[ProcessRecord]) -> list[ProcessRecord]:
        return [item.record for item in self.rank_scored(query, records)]

    def score(self, query: str, record: ProcessRecord) -> dict[str, int]:
        """Return the non-zero contribution of each rule, for diagnostics."""
        prepared = self.prepare(query)
        name = record.name.lower()
        breakdown: dict[str, int] = {}
        for rule in self._rules:
            value = rule.apply(name, prepared)
            if value:
                breakdown[rule.name] = value
        return breakdown


def ecoinvent_ranker() -> RelevanceRanker:
    return RelevanceRanker(ECOINVENT_RULES, alias_lookup=alias_patterns)


def agribalyse_ranker() -> RelevanceRanker:
    return RelevanceRanker(AGRIBALYSE_RULES, alias_lookup=agribalyse_patterns)
