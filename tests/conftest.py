"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date

import pytest

from calorics.adapters.calorics_client import CaloricsClient
from calorics.config import Settings
from calorics.containers import AppContainer
from calorics.domain.entries import FoodEntry, UserStats
from calorics.domain.food_sets import FoodSet, FoodSetEntry
from calorics.domain.nutrition import Food, Serving
from calorics.domain.session import Session
from calorics.errors import NotFound, RequestFailed
from calorics.services.catalog import NutritionCatalog
from calorics.services.entries import FoodEntryStore
from calorics.services.food_sets import FoodSetApplier
from calorics.services.register import FoodRegister

APPLE = Food(
    id=1,
    name="Apple",
    calories_per_100g=52,
    protein_per_100g=0.3,
    carbs_per_100g=14,
    fat_per_100g=0.2,
    servings=(
        Serving(id=11, description="1 medium", grams=182),
        Serving(id=12, description="100 grams", grams=100),
    ),
)
CHICKEN = Food(
    id=2,
    name="Chicken Breast",
    calories_per_100g=165,
    protein_per_100g=31,
    carbs_per_100g=0,
    fat_per_100g=3.6,
    servings=(Serving(id=21, description="100 grams", grams=100),),
)
RICE = Food(
    id=3,
    name="White Rice",
    calories_per_100g=130,
    protein_per_100g=2.7,
    carbs_per_100g=28,
    fat_per_100g=0.3,
    servings=(
        Serving(id=31, description="1 cup cooked", grams=200),
        Serving(id=32, description="100 grams", grams=100),
    ),
)
PINEAPPLE = Food(
    id=4,
    name="Pineapple",
    calories_per_100g=50,
    protein_per_100g=0.5,
    carbs_per_100g=13,
    fat_per_100g=0.1,
    servings=(Serving(id=41, description="1 slice", grams=84),),
)


@dataclass
class InMemoryCaloricsClient(CaloricsClient):
    """In-memory Calorics backend for tests."""

    foods: list[Food] = field(
        default_factory=lambda: [APPLE, CHICKEN, RICE, PINEAPPLE]
    )
    entries: dict[int, FoodEntry] = field(default_factory=dict)
    food_sets: dict[int, FoodSet] = field(default_factory=dict)
    needed_calories: float = 2000
    current_weight: float = 80
    goal: str = "maintain"
    fail_creates: bool = False
    fail_deletes: bool = False
    calls: list[str] = field(default_factory=list)
    next_id: int = 100

    async def list_foods(self) -> list[Food]:
        self.calls.append("list_foods")
        return list(self.foods)

    async def get_user_stats(self, day: date) -> UserStats:
        self.calls.append(f"get_user_stats:{day.isoformat()}")
        day_entries = tuple(
            entry
            for entry in sorted(self.entries.values(), key=lambda item: item.id)
            if entry.date == day
        )
        return UserStats(
            day=day,
            daily_calories=sum(entry.calories for entry in day_entries),
            needed_calories=self.needed_calories,
            current_weight=self.current_weight,
            age=30,
            goal=self.goal,
            neck=None,
            waist=None,
            fat_percentage=None,
            food_entries=day_entries,
        )

    async def create_food_entry(
        self, food_id: int, serving_description: str, quantity: float, day: date
    ) -> FoodEntry:
        self.calls.append("create_food_entry")
        if self.fail_creates:
            raise RequestFailed("Failed to create food entry", 500)
        return self._store_entry(food_id, serving_description, quantity, day)

    async def delete_food_entry(self, entry_id: int) -> None:
        self.calls.append(f"delete_food_entry:{entry_id}")
        if self.fail_deletes:
            raise RequestFailed("Failed to delete food entry", 500)
        self.entries.pop(entry_id, None)

    async def list_food_sets(self) -> list[FoodSet]:
        self.calls.append("list_food_sets")
        return list(self.food_sets.values())

    async def create_food_set(
        self, name: str, description: str | None, entries: list[FoodSetEntry]
    ) -> FoodSet:
        self.calls.append("create_food_set")
        if self.fail_creates:
            raise RequestFailed("Failed to create food set", 500)
        food_set = FoodSet(
            id=self._allocate_id(),
            name=name,
            description=description,
            entries=tuple(entries),
        )
        self.food_sets[food_set.id] = food_set
        return food_set

    async def delete_food_set(self, set_id: int) -> None:
        self.calls.append(f"delete_food_set:{set_id}")
        if self.fail_deletes:
            raise RequestFailed("Failed to delete food set", 500)
        if self.food_sets.pop(set_id, None) is None:
            raise NotFound("Food set not found", 404)

    async def apply_food_set(self, set_id: int, day: date) -> None:
        self.calls.append(f"apply_food_set:{set_id}")
        food_set = self.food_sets.get(set_id)
        if food_set is None:
            raise NotFound("Food set not found", 404)
        for item in food_set.entries:
            self._store_entry(
                item.food_id, item.serving_description, item.quantity, day
            )

    def add_entry(
        self, food: Food, serving_description: str, quantity: float, day: date
    ) -> FoodEntry:
        """Seed an entry as if it had been logged earlier."""
        return self._store_entry(food.id, serving_description, quantity, day)

    def _store_entry(
        self, food_id: int, serving_description: str, quantity: float, day: date
    ) -> FoodEntry:
        food = next(item for item in self.foods if item.id == food_id)
        serving = food.serving(serving_description)
        grams = serving.grams if serving else 0.0
        entry = FoodEntry(
            id=self._allocate_id(),
            food_id=food_id,
            serving_description=serving_description,
            quantity=quantity,
            date=day,
            calories=food.calories_per_100g * grams * quantity / 100,
        )
        self.entries[entry.id] = entry
        return entry

    def _allocate_id(self) -> int:
        self.next_id += 1
        return self.next_id


@pytest.fixture
def settings() -> Settings:
    return Settings(
        calorics_api_url="https://calorics.test/api",
        calorics_api_token="token-123",
        environment="test",
    )


@pytest.fixture
def backend() -> InMemoryCaloricsClient:
    return InMemoryCaloricsClient()


@pytest.fixture
def session() -> Session:
    return Session(token="token-123", active_date=date(2024, 3, 10))


@pytest.fixture
def store(backend: InMemoryCaloricsClient, session: Session) -> FoodEntryStore:
    return FoodEntryStore(client=backend, session=session)


@pytest.fixture
def container(
    settings: Settings,
    backend: InMemoryCaloricsClient,
    session: Session,
) -> AppContainer:
    catalog = NutritionCatalog(client=backend)
    entry_store = FoodEntryStore(client=backend, session=session)
    applier = FoodSetApplier(client=backend, store=entry_store)
    register = FoodRegister(
        client=backend,
        catalog=catalog,
        store=entry_store,
        applier=applier,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session=session,
        client=backend,
        catalog=catalog,
        entry_store=entry_store,
        food_set_applier=applier,
        food_register=register,
        close_resources=close_resources,
    )
