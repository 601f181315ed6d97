"""Food search and the coupled selection state of the entry form."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from calorics.domain.nutrition import Food, Serving


@dataclass
class SearchIndex:
    """Case-insensitive substring filter over catalog foods."""

    limit: int | None = None

    def filter(self, query: str | None, foods: Iterable[Food]) -> list[Food]:
        """Return foods whose name contains the query, in catalog order.

        A blank query yields no results rather than the whole catalog.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []
        matches = [food for food in foods if needle in food.name.lower()]
        if self.limit is not None:
            return matches[: self.limit]
        return matches


@dataclass
class FoodSelection:
    """Live query plus the food, serving and quantity chosen from it."""

    index: SearchIndex = field(default_factory=SearchIndex)
    query: str = ""
    results: list[Food] = field(default_factory=list)
    food: Food | None = None
    serving: Serving | None = None
    quantity: float | None = None

    def set_query(self, query: str, foods: Iterable[Food]) -> list[Food]:
        """Update the query, dropping any selection made from the old one."""
        self.query = query
        self.food = None
        self.serving = None
        self.quantity = None
        self.results = self.index.filter(query, foods)
        return self.results

    def select(self, food: Food, quantity: float = 1.0) -> None:
        """Fix the selection on a food and close the result list."""
        self.food = food
        self.query = food.name
        self.results = []
        self.serving = food.servings[0] if food.servings else None
        self.quantity = quantity

    def choose_serving(self, description: str) -> Serving | None:
        """Pick a serving of the selected food by description."""
        if self.food is None:
            self.serving = None
            return None
        self.serving = self.food.serving(description)
        return self.serving

    def clear(self) -> None:
        """Reset query and selection together."""
        self.query = ""
        self.results = []
        self.food = None
        self.serving = None
        self.quantity = None
