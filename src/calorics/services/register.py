"""Food register form: single entries, set authoring and set application."""

from dataclasses import dataclass, field
from datetime import date

from calorics.adapters.calorics_client import CaloricsClient
from calorics.domain.entries import FoodEntry
from calorics.domain.food_sets import FoodSet, FoodSetEntry
from calorics.domain.nutrition import Food
from calorics.domain.workflow import ApplyingSet, AuthoringSet, RegisterMode, SingleEntry
from calorics.errors import InvalidInput, ValidationError
from calorics.services.calculator import preview_calories, validate_selection
from calorics.services.catalog import NutritionCatalog
from calorics.services.entries import FoodEntryStore
from calorics.services.food_sets import FoodSetApplier, FoodSetBuilder
from calorics.services.search import FoodSelection


@dataclass
class FoodRegister:
    """Shared form state driven by the current register mode."""

    client: CaloricsClient
    catalog: NutritionCatalog
    store: FoodEntryStore
    applier: FoodSetApplier
    selection: FoodSelection = field(default_factory=FoodSelection)
    mode: RegisterMode = field(default_factory=SingleEntry)

    def search(self, query: str) -> list[Food]:
        """Filter the catalog by the live query."""
        return self.selection.set_query(query, self.catalog.foods)

    def select(self, food_id: int, quantity: float = 1.0) -> Food:
        """Select a catalog food for the form."""
        food = self.catalog.get(food_id)
        if food is None:
            raise ValidationError(f"Unknown food: {food_id}")
        self.selection.select(food, quantity=quantity)
        return food

    def choose_serving(self, description: str) -> None:
        """Pick a serving of the selected food."""
        if self.selection.choose_serving(description) is None:
            raise ValidationError(f"Unknown serving: {description!r}")

    def set_quantity(self, quantity: float) -> None:
        """Set the number of servings."""
        self.selection.quantity = quantity

    def preview(self) -> int | None:
        """Rounded kcal for the current selection, or None if incomplete."""
        food, serving, quantity = (
            self.selection.food,
            self.selection.serving,
            self.selection.quantity,
        )
        if food is None or serving is None or quantity is None:
            return None
        try:
            return preview_calories(food, serving, quantity)
        except InvalidInput:
            return None

    async def submit(self, day: date) -> FoodEntry:
        """Log the current selection as a single entry."""
        if not isinstance(self.mode, SingleEntry):
            raise ValidationError("Single entries can only be logged in entry mode")
        food, serving, quantity = validate_selection(
            self.selection.food, self.selection.serving, self.selection.quantity
        )
        entry = await self.store.add(food, serving, quantity, day)
        self.selection.clear()
        return entry

    def start_authoring(self) -> FoodSetBuilder:
        """Switch to composing a new food set."""
        if isinstance(self.mode, AuthoringSet):
            return self.mode.builder
        builder = FoodSetBuilder(client=self.client, selection=self.selection)
        self.mode = AuthoringSet(builder=builder)
        self.selection.clear()
        return builder

    def append_to_set(self) -> FoodSetEntry:
        """Add the current selection to the set being authored."""
        return self._builder().append(
            self.selection.food, self.selection.serving, self.selection.quantity
        )

    def remove_from_set(self, index: int) -> list[FoodSetEntry]:
        """Remove an accumulated entry and return what is left."""
        builder = self._builder()
        builder.remove_at(index)
        return builder.entries

    async def commit_set(self, name: str, description: str | None = None) -> FoodSet:
        """Save the authored set and return to entry mode."""
        food_set = await self._builder().commit(name, description)
        self.applier.track(food_set)
        self.mode = SingleEntry()
        return food_set

    def start_applying(self, set_id: int | None = None) -> None:
        """Switch to choosing a stored set to apply."""
        if set_id is not None and self.applier.get(set_id) is None:
            raise ValidationError(f"Unknown food set: {set_id}")
        self.mode = ApplyingSet(set_id=set_id)
        self.selection.clear()

    async def apply_selected(self, day: date | str) -> None:
        """Apply the chosen set to a date and return to entry mode."""
        if not isinstance(self.mode, ApplyingSet) or self.mode.set_id is None:
            raise ValidationError("Choose a food set to apply")
        await self.applier.apply(self.mode.set_id, day)
        self.mode = SingleEntry()

    def cancel(self) -> None:
        """Abandon the current mode and clear the form."""
        self.mode = SingleEntry()
        self.selection.clear()

    def _builder(self) -> FoodSetBuilder:
        if not isinstance(self.mode, AuthoringSet):
            raise ValidationError("No food set is being authored")
        return self.mode.builder
