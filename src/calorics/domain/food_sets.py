"""Domain models for reusable food sets."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodSetEntry:
    """A food, serving and quantity stored inside a food set."""

    food_id: int
    serving_description: str
    quantity: float


@dataclass(frozen=True)
class FoodSet:
    """Named template of food entries."""

    id: int
    name: str
    description: str | None
    entries: tuple[FoodSetEntry, ...]
