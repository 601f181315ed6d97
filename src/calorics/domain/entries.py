"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class FoodEntry:
    """One logged consumption of a food on a date."""

    id: int
    food_id: int
    serving_description: str
    quantity: float
    date: date
    calories: float


@dataclass(frozen=True)
class UserStats:
    """Stats snapshot returned by the backend for a date."""

    day: date
    daily_calories: float
    needed_calories: float
    current_weight: float
    age: int | None
    goal: str
    neck: float | None
    waist: float | None
    fat_percentage: float | None
    food_entries: tuple[FoodEntry, ...]
