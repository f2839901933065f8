"""Scope filters that reduce each inventory to drinks-relevant processes."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from lca_impact_engine.core.models import ProcessRecord

# Hierarchical category prefixes (ISIC-style) relevant to drinks production.
ECOINVENT_ALLOWED_PREFIXES: tuple[str, ...] = (
    "A:Agriculture",
    "C:Manufacturing/10",  # food products
    "C:Manufacturing/11",  # beverages
    "C:Manufacturing/16",  # wood (corks, pallets)
    "C:Manufacturing/17",  # paper and cardboard
    "C:Manufacturing/20",  # chemicals
    "C:Manufacturing/22",  # rubber and plastics
    "C:Manufacturing/23",  # glass and other non-metallic minerals
    "C:Manufacturing/24",  # basic metals
    "C:Manufacturing/25",  # fabricated metal products
    "D:Electricity",
    "E:Water supply; sewerage, waste management and remediation activities/36",
    "E:Water supply; sewerage, waste management and remediation activities/38/383",
    "H:Transportation",
    "I:Accommodation and food",
    "Recycled content cut-off",
)

# Drinks packaging and recycling routes rescued from the exclusion list.
ECOINVENT_KEEP_PATTERNS: tuple[str, ...] = (
    "beverage",
    "packaging glass",
    "bottle",
    "can ",
    "carton",
    "recycling of aluminium",
    "recycling of glass",
    "recycling of pet",
    "recycling of steel",
    "used beverage",
)

ECOINVENT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "coal mining",
    "uranium",
    "nuclear",
    "petroleum refinery operation",
    "vehicle production",
    "car production",
    "aircraft production",
    "lorry production",
    "ship production",
    "railway",
    "building construction",
    "road construction",
    "circuit board",
    "semiconductor",
    "photovoltaic",
    "solar cell",
    "wind turbine",
    "pesticide production",
    "herbicide production",
    "fungicide production",
    "insecticide production",
    "treatment of sewage sludge",
    "treatment of municipal solid waste",
    "landfill of",
    "incineration of",
    "open dump",
    "unsanitary landfill",
    "cattle for slaughtering",
    "pig for slaughtering",
    "poultry for slaughtering",
    "chicken for slaughtering",
)

# Food-inventory names outside the drinks scope; checked before the keep list.
AGRIBALYSE_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "meat",
    "beef",
    "pork",
    "chicken",
    "fish",
    "seafood",
    "sausage",
    "ham",
    "viande",
    "poisson",
    "bread",
    "pasta",
    "pizza",
    "cake",
    "biscuit",
    "pastry",
    "soup",
    "sauce",
    "salad",
    "vegetable dish",
    "cosmetic",
    "detergent",
    "textile",
    "clothing",
)

AGRIBALYSE_KEEP_PATTERNS: tuple[str, ...] = (
    # drinks
    "wine", "beer", "cider", "spirit", "liqueur", "juice", "coffee", "tea",
    "cocoa", "chocolate", "beverage", "drink", "boisson",
    "water, mineral", "water, spring", "water, tap",
    "mineral water", "spring water", "tap water",
    # dairy and alternatives
    "milk", "cream", "yoghurt", "yogurt", "lait", "crème", "creme",
    "soy drink", "oat drink", "almond drink", "coconut drink",
    # fruits
    "apple", "pomme", "grape", "raisin", "orange", "lemon", "citron", "lime",
    "pineapple", "ananas", "berry", "cherry", "peach", "pear", "mango", "banana",
    # grains
    "barley", "orge", "wheat", "ble", "blé", "oat", "avoine", "rye", "corn",
    "maize", "rice", "malt",
    # sweeteners
    "sugar", "sucre", "honey", "miel", "syrup", "sirop", "agave", "maple",
    # botanicals
    "ginger", "gingembre", "cinnamon", "cannelle", "vanilla", "vanille",
    "mint", "menthe", "gentian", "gentiane", "liquorice", "licorice",
    "réglisse", "reglisse", "saffron", "safran", "fennel", "fenouil",
    "elderflower", "sureau", "juniper", "genièvre", "lavender", "rosemary",
    "wormwood", "artemisia", "absinthe", "caraway", "carvi", "cardamom",
    "cardamome", "anise", "anis", "badiane", "angelica", "orris", "iris",
    "pepper", "poivre", "hop", "houblon", "herb", "spice", "épice",
    # additives
    "acid", "carrageenan", "carraghénane", "acacia", "arabic gum", "sorbate",
    "benzoate",
    # nuts
    "almond", "amande", "hazelnut", "noisette", "walnut", "noix", "coconut",
    "cashew",
    # packaging
    "glass bottle", "aluminium", "cardboard", "pet bottle", "packaging",
)


class ProcessClassifier(Protocol):
    """Scope filter applied to a raw catalogue."""

    def filter(self, records: Iterable[ProcessRecord]) -> list[ProcessRecord]:  # pragma: no cover - protocol
        ...


class CategoryClassifier:
    """Category-prefix gate, then keep-pattern override, then name exclusion.

    Matching is case-insensitive substring matching. The keep patterns rescue
    drinks packaging and recycling records that an exclusion pattern would
    otherwise remove (e.g. "treatment of used beverage can").
    """

    def __init__(
        self,
        allowed_prefixes: Sequence[str] = ECOINVENT_ALLOWED_PREFIXES,
        keep_patterns: Sequence[str] = ECOINVENT_KEEP_PATTERNS,
        exclude_patterns: Sequence[str] = ECOINVENT_EXCLUDE_PATTERNS,
    ) -> None:
        self._allowed_prefixes = tuple(allowed_prefixes)
        self._keep_patterns = tuple(pattern.lower() for pattern in keep_patterns)
        self._exclude_patterns = tuple(pattern.lower() for pattern in exclude_patterns)

    def is_relevant(self, record: ProcessRecord) -> bool:
        category = record.category or ""
        if not any(category.startswith(prefix) for prefix in self._allowed_prefixes):
            return False
        name = record.name.lower()
        if any(pattern in name for pattern in self._keep_patterns):
            return True
        return not any(pattern in name for pattern in self._exclude_patterns)

    def filter(self, records: Iterable[ProcessRecord]) -> list[ProcessRecord]:
        return [record for record in records if self.is_relevant(record)]


class NamePatternClassifier:
    """Name-only filter for inventories without hierarchical categories."""

    def __init__(
        self,
        keep_patterns: Sequence[str] = AGRIBALYSE_KEEP_PATTERNS,
        exclude_patterns: Sequence[str] = AGRIBALYSE_EXCLUDE_PATTERNS,
    ) -> None:
        self._keep_patterns = tuple(pattern.lower() for pattern in keep_patterns)
        self._exclude_patterns = tuple(pattern.lower() for pattern in exclude_patterns)

    def is_relevant(self, record: ProcessRecord) -> bool:
        name = record.name.lower()
        if any(pattern in name for pattern in self._exclude_patterns):
            return False
        return any(pattern in name for pattern in self._keep_patterns)

    def filter(self, records: Iterable[ProcessRecord]) -> list[ProcessRecord]:
        return [record for record in records if self.is_relevant(record)]


def classify_processes(records: Iterable[ProcessRecord]) -> list[ProcessRecord]:
    """Filter an industrial catalogue with the default category classifier."""
    return CategoryClassifier().filter(records)
