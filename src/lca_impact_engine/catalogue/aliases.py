"""Curated alias tables mapping common drinks terms to inventory process names.

When a user searches for a common term (e.g. "aluminium can"), the patterns
listed here are literal, lower-case substrings expected in the canonical
process names of the inventory. Add entries when users report missing or
poorly ranked results; the ranker picks them up without code changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AliasCategory = Literal["ingredient", "packaging", "utility", "transport"]

_BOUNDARY_CHARS = frozenset(" -,._/()")


@dataclass(slots=True, frozen=True)
class InventoryAlias:
    search_terms: tuple[str, ...]
    process_patterns: tuple[str, ...]
    category: AliasCategory


def _alias(terms: tuple[str, ...], patterns: tuple[str, ...], category: AliasCategory) -> InventoryAlias:
    return InventoryAlias(search_terms=terms, process_patterns=patterns, category=category)


# ecoinvent ------------------------------------------------------------------

INGREDIENT_ALIASES: tuple[InventoryAlias, ...] = (
    _alias(("barley", "barley grain"), ("market for barley grain", "barley grain production"), "ingredient"),
    _alias(("malt", "malted barley"), ("malt production", "market for malt"), "ingredient"),
    _alias(("wheat", "wheat grain"), ("market for wheat grain", "wheat grain production"), "ingredient"),
    _alias(("rice", "rice grain"), ("market for rice", "rice production"), "ingredient"),
    _alias(("maize", "corn"), ("market for maize grain", "maize grain production"), "ingredient"),
    _alias(("oats", "oat grain"), ("oat grain production", "market for oat grain", "oat production"), "ingredient"),
    _alias(("rye", "rye grain"), ("rye grain production", "market for rye grain", "ethanol production from rye"), "ingredient"),
    _alias(("sorghum",), ("sorghum grain production", "market for sorghum"), "ingredient"),
    _alias(("hops", "hop"), ("hop production", "market for hop"), "ingredient"),
    _alias(("juniper", "juniper berry"), ("juniper berry", "juniper"), "ingredient"),
    _alias(("coriander",), ("coriander production", "market for coriander"), "ingredient"),
    _alias(("ginger",), ("ginger production", "market for ginger"), "ingredient"),
    _alias(("vanilla",), ("market for vanilla", "vanilla production"), "ingredient"),
    _alias(("cinnamon",), ("cinnamon production", "market for cinnamon"), "ingredient"),
    _alias(("pepper", "black pepper"), ("pepper production", "market for pepper"), "ingredient"),
    _alias(("gentian", "gentiane"), ("gentian", "gentiane"), "ingredient"),
    _alias(("liquorice", "licorice", "liquorice root"), ("liquorice", "licorice", "glycyrrhiza"), "ingredient"),
    _alias(("orris root", "iris root"), ("iris", "orris"), "ingredient"),
    _alias(("angelica", "angelica root"), ("angelica",), "ingredient"),
    _alias(("elderflower", "elder flower", "sureau"), ("elderflower", "elder"), "ingredient"),
    _alias(("wormwood", "absinthe herb"), ("wormwood", "artemisia"), "ingredient"),
    _alias(("cardamom", "cardamome"), ("cardamom", "cardamome"), "ingredient"),
    _alias(("star anise", "badiane"), ("anise", "badiane"), "ingredient"),
    _alias(("fennel", "fenouil"), ("fennel", "fenouil"), "ingredient"),
    _alias(("saffron", "safran"), ("saffron", "safran"), "ingredient"),
    _alias(("carrageenan", "carrageen"), ("carrageenan", "seaweed"), "ingredient"),
    _alias(("acacia gum", "gum arabic", "arabic gum"), ("acacia", "arabic gum"), "ingredient"),
    _alias(("malic acid",), ("malic acid",), "ingredient"),
    _alias(("tartaric acid",), ("tartaric acid",), "ingredient"),
    _alias(("citric acid",), ("citric acid production", "market for citric acid"), "ingredient"),
    _alias(("potassium sorbate",), ("potassium sorbate", "sorbate"), "ingredient"),
    _alias(("sodium benzoate",), ("sodium benzoate", "benzoate"), "ingredient"),
    _alias(
        ("sugar", "cane sugar", "sugar cane"),
        ("market for sugar", "sugar production", "sugarcane production", "sugar beet production"),
        "ingredient",
    ),
    _alias(("molasses",), ("market for molasses", "molasses production"), "ingredient"),
    _alias(("honey",), ("honey production", "market for honey"), "ingredient"),
    _alias(("agave",), ("agave production", "market for agave"), "ingredient"),
    _alias(("syrup", "glucose syrup"), ("glucose production", "market for glucose", "syrup production"), "ingredient"),
    _alias(("yeast",), ("market for fodder yeast", "fodder yeast"), "ingredient"),
    _alias(("grape", "grapes"), ("grape production", "market for grape"), "ingredient"),
    _alias(("apple", "apples"), ("market for apple", "apple production"), "ingredient"),
    _alias(("orange", "oranges"), ("market for orange", "orange production"), "ingredient"),
    _alias(("lemon", "lemons"), ("market for lemon", "lemon production"), "ingredient"),
    _alias(("lime", "limes"), ("market for lime", "lime production"), "ingredient"),
    _alias(("pineapple",), ("market for pineapple", "pineapple production"), "ingredient"),
    _alias(("banana", "bananas"), ("market for banana", "banana production"), "ingredient"),
    _alias(("coconut",), ("market for coconut", "coconut production"), "ingredient"),
    _alias(("almond", "almonds"), ("market for almond", "almond production"), "ingredient"),
    _alias(("soy", "soybean", "soya"), ("market for soybean", "soybean production", "soybean beverage production"), "ingredient"),
    _alias(("coffee", "coffee bean"), ("market for coffee", "coffee green bean production"), "ingredient"),
    _alias(("tea", "tea leaves"), ("tea production", "market for tea"), "ingredient"),
    _alias(("cocoa", "cacao"), ("market for cocoa bean", "cocoa bean production"), "ingredient"),
    _alias(("milk", "dairy milk", "cow milk"), ("market for raw milk", "milk production", "market for milk"), "ingredient"),
    _alias(("cream",), ("cream production", "market for cream"), "ingredient"),
    _alias(("whey",), ("whey production", "market for whey", "ethanol production from whey"), "ingredient"),
    _alias(("carbon dioxide", "co2"), ("carbon dioxide production", "market for carbon dioxide"), "ingredient"),
    _alias(("ethanol", "alcohol"), ("ethanol production", "market for ethanol", "dewatering of ethanol"), "ingredient"),
    _alias(("salt", "sodium chloride"), ("market for sodium chloride", "sodium chloride production"), "ingredient"),
)

PACKAGING_ALIASES: tuple[InventoryAlias, ...] = (
    _alias(
        ("glass bottle", "glass container", "glass packaging"),
        ("packaging glass production", "market for packaging glass"),
        "packaging",
    ),
    _alias(
        ("glass", "glass production"),
        ("packaging glass production", "market for packaging glass", "glass bottle"),
        "packaging",
    ),
    _alias(
        ("aluminium can", "aluminum can", "aluminium cans", "aluminum cans"),
        ("aluminium, wrought alloy", "sheet rolling, aluminium", "deep drawing", "used beverage can"),
        "packaging",
    ),
    _alias(
        ("aluminium", "aluminum"),
        (
            "aluminium, wrought alloy",
            "sheet rolling, aluminium",
            "aluminium, primary, ingot",
            "aluminium alloy production",
            "market for aluminium, wrought",
            "market for aluminium, primary, ingot",
            "market for aluminium alloy",
        ),
        "packaging",
    ),
    _alias(
        ("aluminium foil", "aluminum foil"),
        ("aluminium collector foil", "aluminium, wrought alloy", "sheet rolling, aluminium"),
        "packaging",
    ),
    _alias(("steel can", "tin can", "tinplate"), ("steel production", "tinplate", "sheet rolling, steel", "market for steel"), "packaging"),
    _alias(
        ("pet bottle", "pet", "plastic bottle"),
        ("polyethylene terephthalate, bottle grade", "market for polyethylene terephthalate", "stretch blow moulding"),
        "packaging",
    ),
    _alias(("hdpe", "high density polyethylene"), ("polyethylene, high density", "market for polyethylene, high density"), "packaging"),
    _alias(("ldpe", "low density polyethylene"), ("polyethylene, low density", "market for polyethylene, low density"), "packaging"),
    _alias(("polypropylene", "pp"), ("polypropylene production", "market for polypropylene"), "packaging"),
    _alias(("shrink wrap", "shrink film"), ("polyethylene, low density", "blown film", "market for packaging film"), "packaging"),
    _alias(("corrugated box", "corrugated board", "cardboard box"), ("market for corrugated board box", "corrugated board box"), "packaging"),
    _alias(
        ("cardboard", "carton board"),
        ("corrugated board box", "folding boxboard carton", "market for corrugated board", "carton board box"),
        "packaging",
    ),
    _alias(("beverage carton", "tetra pak", "drink carton"), ("beverage carton converting", "market for beverage carton"), "packaging"),
    _alias(("paper", "paper packaging"), ("market for packaging paper", "single use paper wrap", "paper production"), "packaging"),
    _alias(("label", "bottle label"), ("polyethylene terephthalate, labels", "paper label", "market for label"), "packaging"),
    _alias(("crown cork", "bottle cap", "cap", "closure"), ("steel production", "tinplate", "injection moulding", "polypropylene"), "packaging"),
    _alias(("cork", "wine cork"), ("cork production", "market for cork"), "packaging"),
    _alias(("pallet", "wooden pallet"), ("eur-flat pallet", "market for eur-flat pallet"), "packaging"),
    _alias(("stretch wrap", "pallet wrap"), ("stretch blow moulding", "polyethylene, low density", "blown film"), "packaging"),
    _alias(("multipack", "ring carrier", "can ring"), ("polyethylene, low density", "injection moulding"), "packaging"),
)

UTILITY_ALIASES: tuple[InventoryAlias, ...] = (
    _alias(
        ("electricity", "power", "grid electricity"),
        ("market for electricity", "electricity, low voltage", "market group for electricity"),
        "utility",
    ),
    _alias(("tap water", "water", "process water", "mains water"), ("market for tap water", "tap water production"), "utility"),
    _alias(
        ("natural gas", "gas"),
        ("market for natural gas", "heat production, natural gas", "market for heat, district or industrial, natural gas"),
        "utility",
    ),
    _alias(("steam", "process steam"), ("steam production", "market for steam"), "utility"),
    _alias(("cooling", "refrigeration", "chilling"), ("cooling energy production", "market for cooling energy"), "utility"),
    _alias(("heat", "heating", "thermal energy"), ("heat production", "market for heat"), "utility"),
)

TRANSPORT_ALIASES: tuple[InventoryAlias, ...] = (
    _alias(("truck", "lorry", "road transport", "road freight"), ("transport, freight, lorry", "market for transport, freight, lorry"), "transport"),
    _alias(("ship", "sea freight", "ocean freight", "maritime"), ("transport, freight, sea", "market for transport, freight, sea"), "transport"),
    _alias(("rail", "train", "rail freight"), ("transport, freight train", "market for transport, freight train"), "transport"),
    _alias(("air freight", "air cargo"), ("transport, freight, aircraft", "market for transport, freight, aircraft"), "transport"),
    _alias(("van", "delivery van"), ("transport, freight, light commercial vehicle",), "transport"),
)

ECOINVENT_ALIASES: tuple[InventoryAlias, ...] = (
    INGREDIENT_ALIASES + PACKAGING_ALIASES + UTILITY_ALIASES + TRANSPORT_ALIASES
)

# agribalyse -----------------------------------------------------------------
# Food-chain ingredients where the agricultural inventory has finer-grained,
# more representative data. Patterns include French process-name variants.

AGRIBALYSE_ALIASES: tuple[InventoryAlias, ...] = (
    _alias(("wine grape", "wine grapes", "grape for wine", "raisin de cuve"), ("grape", "raisin", "viticulture"), "ingredient"),
    _alias(("cider apple", "cider apples"), ("pomme cidre", "apple cider", "apple", "pomme"), "ingredient"),
    _alias(("barley", "barley grain", "orge"), ("barley", "orge"), "ingredient"),
    _alias(("wheat", "wheat grain", "ble", "blé"), ("wheat", "ble", "blé"), "ingredient"),
    _alias(("beet sugar", "sugar beet", "sucre betterave"), ("sugar beet", "sucre betterave", "betterave"), "ingredient"),
    _alias(("honey", "miel"), ("honey", "miel"), "ingredient"),
    _alias(("cow milk", "whole milk", "dairy milk", "lait"), ("milk", "lait entier", "lait"), "ingredient"),
    _alias(("cream", "dairy cream", "crème"), ("cream", "creme", "crème"), "ingredient"),
    _alias(("oat milk", "oat drink"), ("oat milk", "boisson avoine", "lait avoine"), "ingredient"),
    _alias(("soy milk", "soya milk"), ("soy milk", "boisson soja", "lait soja"), "ingredient"),
    _alias(("almond milk", "almond drink"), ("almond milk", "boisson amande", "lait amande"), "ingredient"),
    _alias(("coconut milk", "coconut drink"), ("coconut milk", "boisson coco", "lait coco"), "ingredient"),
    _alias(("orange", "orange juice"), ("orange", "jus orange"), "ingredient"),
    _alias(("lemon", "citron"), ("lemon", "citron"), "ingredient"),
    _alias(("pineapple", "ananas"), ("pineapple", "ananas"), "ingredient"),
    _alias(("coffee", "coffee bean", "café"), ("coffee", "cafe", "café"), "ingredient"),
    _alias(("green tea", "thé vert"), ("green tea", "the vert", "thé vert"), "ingredient"),
    _alias(("black tea", "thé noir"), ("black tea", "the noir", "thé noir"), "ingredient"),
    _alias(("cocoa", "cocoa powder", "cacao"), ("cocoa", "cacao", "poudre cacao"), "ingredient"),
    _alias(("ginger", "gingembre"), ("ginger", "gingembre"), "ingredient"),
    _alias(("cinnamon", "cannelle"), ("cinnamon", "cannelle"), "ingredient"),
    _alias(("vanilla", "vanille"), ("vanilla", "vanille"), "ingredient"),
    _alias(("mint", "menthe"), ("mint", "menthe"), "ingredient"),
    _alias(("gentian", "gentiane"), ("gentian", "gentiane"), "ingredient"),
    _alias(("liquorice", "licorice", "réglisse"), ("liquorice", "licorice", "réglisse", "reglisse"), "ingredient"),
    _alias(("saffron", "safran"), ("saffron", "safran"), "ingredient"),
    _alias(("fennel", "fenouil"), ("fennel", "fenouil"), "ingredient"),
    _alias(("elderflower", "sureau", "elder flower"), ("elderflower", "sureau", "elder"), "ingredient"),
    _alias(("almond", "almonds", "amande"), ("almond", "amande"), "ingredient"),
    _alias(("hazelnut", "hazelnuts", "noisette"), ("hazelnut", "noisette"), "ingredient"),
    _alias(("coconut", "noix de coco"), ("coconut", "noix de coco", "coco"), "ingredient"),
)

# Terms for which the broad industrial inventory is authoritative regardless
# of any food alias (energy, transport, packaging, industrial chemicals).
ECOINVENT_PREFERRED_TERMS: tuple[str, ...] = (
    "electricity", "natural gas", "diesel", "fuel", "heating",
    "transport", "hgv", "lorry", "freight", "shipping",
    "glass bottle", "aluminium can", "pet bottle", "cardboard",
    "steel", "plastic", "polyethylene", "polypropylene",
    "sodium hydroxide", "chlorine", "nitrogen gas",
)


def matches_at_word_boundary(haystack: str, needle: str) -> bool:
    """Return True when ``needle`` occurs in ``haystack`` delimited by word boundaries.

    Prevents "liquorice" from triggering the "rice" alias.
    """
    if not needle:
        return False
    start = haystack.find(needle)
    while start != -1:
        end = start + len(needle)
        before_ok = start == 0 or haystack[start - 1] in _BOUNDARY_CHARS
        after_ok = end == len(haystack) or haystack[end] in _BOUNDARY_CHARS
        if before_ok and after_ok:
            return True
        start = haystack.find(needle, start + 1)
    return False


def term_matches(query: str, term: str) -> bool:
    """Exact, query-contains-term, or term-contains-query at a word boundary."""
    return query == term or matches_at_word_boundary(query, term) or matches_at_word_boundary(term, query)


def find_matching_aliases(
    query: str,
    aliases: tuple[InventoryAlias, ...] = ECOINVENT_ALIASES,
) -> list[InventoryAlias]:
    normalized = query.lower().strip()
    if not normalized:
        return []
    return [alias for alias in aliases if any(term_matches(normalized, term) for term in alias.search_terms)]


def alias_patterns(
    query: str,
    aliases: tuple[InventoryAlias, ...] = ECOINVENT_ALIASES,
) -> tuple[str, ...]:
    """Return the flattened process-name patterns for every alias the query triggers."""
    patterns: list[str] = []
    for alias in find_matching_aliases(query, aliases):
        for pattern in alias.process_patterns:
            if pattern not in patterns:
                patterns.append(pattern)
    return tuple(patterns)


def first_agribalyse_alias(query: str) -> InventoryAlias | None:
    """Return the first food-inventory alias whose search term appears in the query.

    Unlike ``find_matching_aliases`` this only checks query-contains-term, so a
    short query such as "wine" does not select the "wine grape" alias.
    """
    normalized = query.lower().strip()
    for alias in AGRIBALYSE_ALIASES:
        if any(normalized == term or matches_at_word_boundary(normalized, term) for term in alias.search_terms):
            return alias
    return None


def agribalyse_patterns(query: str) -> tuple[str, ...]:
    alias = first_agribalyse_alias(query)
    return alias.process_patterns if alias else ()
