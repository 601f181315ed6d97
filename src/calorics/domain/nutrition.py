"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Serving:
    """Named fixed-gram portion of a food."""

    id: int | None
    description: str
    grams: float


@dataclass(frozen=True)
class Food:
    """Catalog food with nutrients expressed per 100 grams."""

    id: int
    name: str
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    servings: tuple[Serving, ...] = ()

    def serving(self, description: str) -> Serving | None:
        """Return the serving with the given description, if present."""
        for serving in self.servings:
            if serving.description == description:
                return serving
        return None

    def has_serving(self, serving: Serving) -> bool:
        """Return whether the serving belongs to this food."""
        return serving in self.servings


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient grams."""

    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class DailyTargets:
    """Calorie and macro goals for a day."""

    needed_calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class MacroProgress:
    """Consumed versus target grams for one macro."""

    consumed_grams: float
    target_grams: float
    progress_percent: float


@dataclass(frozen=True)
class DailyProgress:
    """Derived comparison of consumed and target nutrition for a day."""

    daily_calories: float
    needed_calories: float
    calorie_progress_percent: float
    protein: MacroProgress
    carbs: MacroProgress
    fat: MacroProgress
    unresolved_entries: int = 0


@dataclass(frozen=True)
class BarSegment:
    """One painted segment of the calorie bar."""

    kind: str
    width_percent: float
    kcal: float


@dataclass(frozen=True)
class CalorieBar:
    """Segment description for the calorie progress bar."""

    segments: tuple[BarSegment, ...]
    tone: str
