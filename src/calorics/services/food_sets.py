"""Authoring and applying reusable food sets."""

import logging
from dataclasses import dataclass, field
from datetime import date

from calorics.adapters.calorics_client import CaloricsClient
from calorics.config import parse_day
from calorics.domain.food_sets import FoodSet, FoodSetEntry
from calorics.domain.nutrition import Food, Serving
from calorics.errors import ValidationError
from calorics.services.calculator import validate_selection
from calorics.services.entries import FoodEntryStore
from calorics.services.search import FoodSelection

_logger = logging.getLogger(__name__)


@dataclass
class FoodSetBuilder:
    """Local accumulator for a food set; nothing is sent until commit."""

    client: CaloricsClient
    selection: FoodSelection = field(default_factory=FoodSelection)
    _entries: list[FoodSetEntry] = field(default_factory=list)

    @property
    def entries(self) -> list[FoodSetEntry]:
        """Accumulated entries in insertion order."""
        return list(self._entries)

    @property
    def is_empty(self) -> bool:
        """Whether nothing has been accumulated yet."""
        return not self._entries

    def append(
        self, food: Food | None, serving: Serving | None, quantity: float | None
    ) -> FoodSetEntry:
        """Add a selection to the set and reset the selection for the next one."""
        food, serving, quantity = validate_selection(food, serving, quantity)
        entry = FoodSetEntry(
            food_id=food.id,
            serving_description=serving.description,
            quantity=quantity,
        )
        self._entries.append(entry)
        self.selection.clear()
        return entry

    def remove_at(self, index: int) -> None:
        """Drop one accumulated entry; out-of-range indexes are ignored."""
        if 0 <= index < len(self._entries):
            del self._entries[index]

    def clear(self) -> None:
        """Discard all accumulated entries."""
        self._entries.clear()

    async def commit(self, name: str, description: str | None = None) -> FoodSet:
        """Persist the accumulated entries as a named food set.

        The accumulator is cleared only once the backend accepts the set.
        """
        cleaned_name = (name or "").strip()
        if not cleaned_name:
            raise ValidationError("Food set name is required")
        if not self._entries:
            raise ValidationError("Add at least one food to the set")
        food_set = await self.client.create_food_set(
            cleaned_name, (description or "").strip() or None, list(self._entries)
        )
        self._entries.clear()
        _logger.info(
            "Created food set %s with %s entries", food_set.id, len(food_set.entries)
        )
        return food_set


@dataclass
class FoodSetApplier:
    """Stored food sets and their application to dates."""

    client: CaloricsClient
    store: FoodEntryStore | None = None
    sets: list[FoodSet] = field(default_factory=list)

    async def refresh(self) -> list[FoodSet]:
        """Reload the set listing from the backend."""
        self.sets = await self.client.list_food_sets()
        return list(self.sets)

    def get(self, set_id: int) -> FoodSet | None:
        """Return a listed set by id, if present."""
        return next((item for item in self.sets if item.id == set_id), None)

    def track(self, food_set: FoodSet) -> None:
        """Add a newly created set to the listing."""
        self.sets = [item for item in self.sets if item.id != food_set.id]
        self.sets.append(food_set)

    async def apply(self, set_id: int, day: date | str) -> None:
        """Materialize a set's entries on a date.

        The backend response carries no entries, so the store is reloaded
        when the date is the one being viewed.
        """
        target_day = parse_day(day)
        await self.client.apply_food_set(set_id, target_day)
        _logger.info("Applied food set %s to %s", set_id, target_day)
        if self.store is not None and target_day == self.store.active_date:
            await self.store.load_for_date(target_day)

    async def delete(self, set_id: int) -> None:
        """Delete a set and drop it from the listing."""
        await self.client.delete_food_set(set_id)
        self.sets = [item for item in self.sets if item.id != set_id]
