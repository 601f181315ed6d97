"""Food entries for the active date."""

import asyncio
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date

from calorics.adapters.calorics_client import CaloricsClient
from calorics.domain.entries import FoodEntry, UserStats
from calorics.domain.nutrition import DailyProgress, DailyTargets, Food, Serving
from calorics.domain.session import Session
from calorics.errors import CaloricsError
from calorics.services.calculator import (
    aggregate_daily,
    daily_targets,
    validate_selection,
)

_logger = logging.getLogger(__name__)


@dataclass
class FoodEntryStore:
    """Authoritative entry list for the session's active date.

    Deletes are applied locally before the backend confirms them. When the
    backend rejects a delete the entry is restored if
    ``rollback_failed_deletes`` is set; otherwise the failure is only logged
    and the entry stays removed locally. Ids removed locally are filtered out
    of later load results, since a snapshot taken before the delete may
    arrive after it.
    """

    client: CaloricsClient
    session: Session
    rollback_failed_deletes: bool = True
    _entries: list[FoodEntry] = field(default_factory=list)
    _stats: UserStats | None = None
    _inflight: "asyncio.Future[UserStats] | None" = None
    _inflight_date: date | None = None
    _loaded_date: date | None = None
    _deleted_ids: set[int] = field(default_factory=set)

    @property
    def active_date(self) -> date:
        """The date whose entries the store holds."""
        return self.session.active_date

    @property
    def entries(self) -> list[FoodEntry]:
        """Entries for the active date, in server order."""
        return list(self._entries)

    @property
    def stats(self) -> UserStats | None:
        """The last stats snapshot accepted for the active date."""
        return self._stats

    @property
    def daily_calories(self) -> float:
        """Sum of cached entry calories."""
        return math.fsum(entry.calories for entry in self._entries)

    @property
    def targets(self) -> DailyTargets:
        """Goals derived from the latest stats snapshot."""
        if self._stats is None:
            return daily_targets(0.0, 0.0)
        return daily_targets(self._stats.needed_calories, self._stats.current_weight)

    def progress(self, foods: Mapping[int, Food]) -> DailyProgress:
        """Compute progress for the active date from the current entries."""
        return aggregate_daily(self._entries, foods, self.targets)

    async def load_for_date(self, day: date) -> list[FoodEntry] | None:
        """Make ``day`` active and replace the entries with the server's.

        Returns ``None`` when another date became active before the response
        arrived; the response is discarded in that case. When the load fails
        the previously loaded date becomes active again.
        """
        self.session.active_date = day
        if (
            self._inflight is None
            or self._inflight.done()
            or self._inflight_date != day
        ):
            self._inflight = asyncio.ensure_future(self.client.get_user_stats(day))
            self._inflight_date = day
        request = self._inflight

        try:
            stats = await asyncio.shield(request)
        except CaloricsError:
            if not self._is_current(request, day):
                _logger.info("Ignoring failed load for inactive date %s", day)
                return None
            if self._loaded_date is not None:
                self.session.active_date = self._loaded_date
            raise

        if not self._is_current(request, day):
            _logger.info("Discarding stale entries for %s", day)
            return None
        self._stats = stats
        self.replace_for_date(day, list(stats.food_entries))
        return self.entries

    def _is_current(self, request: "asyncio.Future[UserStats]", day: date) -> bool:
        return request is self._inflight and day == self.session.active_date

    def replace_for_date(self, day: date, entries: list[FoodEntry]) -> None:
        """Replace the entry list if ``day`` is still the active date."""
        if day != self.session.active_date:
            return
        self._entries = [
            entry for entry in entries if entry.id not in self._deleted_ids
        ]
        self._loaded_date = day

    async def add(
        self, food: Food, serving: Serving | None, quantity: float, day: date
    ) -> FoodEntry:
        """Log a serving of a food and keep the server-confirmed entry."""
        food, serving, quantity = validate_selection(food, serving, quantity)
        entry = await self.client.create_food_entry(
            food.id, serving.description, quantity, day
        )
        if self._holds(day):
            self._entries.append(entry)
        _logger.info("Logged %s x %s of food %s", quantity, serving.description, food.id)
        return entry

    async def remove(self, entry_id: int) -> bool:
        """Remove an entry locally, then delete it on the server.

        Returns ``False`` when no such entry is held locally.
        """
        index = next(
            (i for i, entry in enumerate(self._entries) if entry.id == entry_id),
            None,
        )
        if index is None:
            return False
        entry = self._entries.pop(index)
        removed_from = self._loaded_date
        self._deleted_ids.add(entry_id)

        try:
            await self.client.delete_food_entry(entry_id)
        except CaloricsError:
            self._deleted_ids.discard(entry_id)
            _logger.exception("Failed to delete food entry %s", entry_id)
            if not self.rollback_failed_deletes:
                return True
            if self._holds(removed_from) and all(
                held.id != entry_id for held in self._entries
            ):
                self._entries.insert(min(index, len(self._entries)), entry)
            raise
        return True

    def _holds(self, day: date | None) -> bool:
        # Held entries belong to the last loaded date until a new load lands.
        return day == self.session.active_date and self._loaded_date in (None, day)
