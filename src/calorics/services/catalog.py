"""Read-only index of known foods for the session."""

import csv
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from calorics.adapters.calorics_client import CaloricsClient
from calorics.domain.nutrition import Food, Serving

_logger = logging.getLogger(__name__)

_DEFAULT_SERVINGS = (("100 grams", 100.0), ("50 grams", 50.0))

# First matching keyword group wins.
_CATEGORY_SERVINGS: tuple[tuple[tuple[str, ...], tuple[tuple[str, float], ...]], ...] = (
    (("oil", "sauce", "dressing"), (("1 tablespoon", 15.0), ("1 teaspoon", 5.0))),
    (
        ("fruit", "apple", "orange", "banana", "pear", "peach"),
        (("1 medium piece", 150.0),),
    ),
    (("egg",), (("1 piece", 50.0),)),
    (("bread", "toast"), (("1 slice", 30.0),)),
    (("rice", "pasta", "noodle"), (("1 cup cooked", 200.0),)),
)

_MIN_CSV_COLUMNS = 6


def standard_servings(name: str) -> tuple[Serving, ...]:
    """Return the generic servings offered for a food without its own."""
    lowered = name.lower()
    pairs = list(_DEFAULT_SERVINGS)
    for keywords, extra in _CATEGORY_SERVINGS:
        if any(keyword in lowered for keyword in keywords):
            pairs.extend(extra)
            break
    return tuple(
        Serving(id=None, description=description, grams=grams)
        for description, grams in pairs
    )


@dataclass
class NutritionCatalog:
    """Foods and servings available for entry, loaded once per session."""

    client: CaloricsClient | None = None
    _foods: dict[int, Food] = field(default_factory=dict)
    _loaded: bool = False

    @classmethod
    def from_foods(cls, foods: list[Food]) -> "NutritionCatalog":
        """Build an already-loaded catalog from food records."""
        catalog = cls()
        catalog._index(foods)
        return catalog

    @classmethod
    def from_csv(cls, path: str | Path) -> "NutritionCatalog":
        """Build a catalog from the per-gram nutrition dataset.

        Columns are name, an unused column, then calories, fat, carbs and
        protein per gram. Rows named ``deprecated`` are skipped.
        """
        foods: list[Food] = []
        with Path(path).open(newline="", encoding="utf-8") as handle:
            reader = csv.reader(handle)
            next(reader, None)
            for record in reader:
                if len(record) < _MIN_CSV_COLUMNS:
                    continue
                name = record[0].strip()
                if not name or name == "deprecated":
                    continue
                foods.append(
                    Food(
                        id=len(foods) + 1,
                        name=name,
                        calories_per_100g=_per_100g(record[2]),
                        fat_per_100g=_per_100g(record[3]),
                        carbs_per_100g=_per_100g(record[4]),
                        protein_per_100g=_per_100g(record[5]),
                    )
                )
        _logger.info("Loaded %s foods from %s", len(foods), path)
        return cls.from_foods(foods)

    @property
    def loaded(self) -> bool:
        """Whether the catalog has been populated."""
        return self._loaded

    @property
    def foods(self) -> list[Food]:
        """Foods in catalog order."""
        return list(self._foods.values())

    @property
    def by_id(self) -> dict[int, Food]:
        """Foods keyed by id."""
        return dict(self._foods)

    async def load(self) -> None:
        """Fetch the catalog from the backend unless it is already loaded."""
        if self._loaded:
            return
        if self.client is None:
            raise RuntimeError("Catalog has no backend client to load from")
        foods = await self.client.list_foods()
        self._index(foods)
        _logger.info("Loaded %s foods from catalog service", len(foods))

    def get(self, food_id: int) -> Food | None:
        """Return a food by id, if present."""
        return self._foods.get(food_id)

    def _index(self, foods: list[Food]) -> None:
        indexed: dict[int, Food] = {}
        for food in foods:
            if not food.servings:
                food = replace(food, servings=standard_servings(food.name))
            indexed[food.id] = food
        self._foods = indexed
        self._loaded = True


def _per_100g(raw: str) -> float:
    try:
        return float(raw.strip()) * 100
    except ValueError:
        return 0.0
