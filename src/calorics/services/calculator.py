"""Calorie and macro arithmetic for food entries.

Everything here is a pure function of its arguments. Daily progress is
recomputed from the entry list on every call rather than maintained
incrementally.
"""

import math
from collections.abc import Iterable, Mapping

from calorics.domain.entries import FoodEntry
from calorics.domain.nutrition import (
    BarSegment,
    CalorieBar,
    DailyProgress,
    DailyTargets,
    Food,
    MacroProfile,
    MacroProgress,
    Serving,
)
from calorics.errors import InvalidInput, ValidationError

PROTEIN_G_PER_KG = 1.75
CARBS_G_PER_KG = 6.5
FAT_G_PER_KG = 1.15

QUANTITY_STEP = 0.25
WARNING_PERCENT = 80.0
FULL_PERCENT = 100.0

_GOAL_LABELS = {
    "lose": "Lose Weight",
    "gain": "Gain Weight",
}


def estimate_calories(food: Food, serving: Serving, quantity: float) -> float:
    """Return kcal for ``quantity`` servings of ``food``."""
    if not food.has_serving(serving):
        raise InvalidInput(
            f"Serving {serving.description!r} does not belong to {food.name!r}"
        )
    if not math.isfinite(quantity) or quantity <= 0:
        raise InvalidInput("Quantity must be a positive number")
    return food.calories_per_100g * serving.grams * quantity / 100


def preview_calories(food: Food, serving: Serving, quantity: float) -> int:
    """Return the rounded kcal shown while an entry is being composed."""
    return round(estimate_calories(food, serving, quantity))


def entry_macros(entry: FoodEntry, food: Food) -> MacroProfile:
    """Scale a food's per-100g macros by the entry's share of its calories.

    Exact when the food's calorie figure shares the macro basis; an
    approximation when the calorie value was rounded.
    """
    if food.calories_per_100g <= 0:
        return MacroProfile(protein_g=0.0, carbs_g=0.0, fat_g=0.0)
    factor = entry.calories / food.calories_per_100g
    return MacroProfile(
        protein_g=food.protein_per_100g * factor,
        carbs_g=food.carbs_per_100g * factor,
        fat_g=food.fat_per_100g * factor,
    )


def daily_targets(needed_calories: float, current_weight: float) -> DailyTargets:
    """Derive calorie and macro goals from body weight in kg."""
    return DailyTargets(
        needed_calories=needed_calories,
        protein_g=current_weight * PROTEIN_G_PER_KG,
        carbs_g=current_weight * CARBS_G_PER_KG,
        fat_g=current_weight * FAT_G_PER_KG,
    )


def aggregate_daily(
    entries: Iterable[FoodEntry],
    foods: Mapping[int, Food],
    targets: DailyTargets,
) -> DailyProgress:
    """Sum a day's entries into calorie and macro progress."""
    entry_list = list(entries)
    macros: list[MacroProfile] = []
    unresolved = 0
    for entry in entry_list:
        food = foods.get(entry.food_id)
        if food is None:
            unresolved += 1
            continue
        macros.append(entry_macros(entry, food))

    # fsum keeps the totals independent of entry order.
    calories = math.fsum(entry.calories for entry in entry_list)
    protein = math.fsum(item.protein_g for item in macros)
    carbs = math.fsum(item.carbs_g for item in macros)
    fat = math.fsum(item.fat_g for item in macros)
    has_entries = bool(entry_list)
    return DailyProgress(
        daily_calories=calories,
        needed_calories=targets.needed_calories,
        calorie_progress_percent=_calorie_percent(calories, targets.needed_calories),
        protein=_macro_progress(protein, targets.protein_g, has_entries),
        carbs=_macro_progress(carbs, targets.carbs_g, has_entries),
        fat=_macro_progress(fat, targets.fat_g, has_entries),
        unresolved_entries=unresolved,
    )


def render_calorie_bar(
    progress_percent: float,
    daily_calories: float = 0.0,
    needed_calories: float = 0.0,
) -> CalorieBar:
    """Map a calorie percentage onto bar segments."""
    tone = progress_tone(progress_percent)
    if progress_percent <= FULL_PERCENT:
        segment = BarSegment(
            kind="needed",
            width_percent=max(progress_percent, 0.0),
            kcal=daily_calories,
        )
        return CalorieBar(segments=(segment,), tone=tone)
    return CalorieBar(
        segments=(
            BarSegment(kind="needed", width_percent=FULL_PERCENT, kcal=needed_calories),
            BarSegment(
                kind="exceeded",
                width_percent=progress_percent - FULL_PERCENT,
                kcal=daily_calories - needed_calories,
            ),
        ),
        tone=tone,
    )


def progress_tone(progress_percent: float) -> str:
    """Return the display tone for a calorie percentage."""
    if progress_percent >= FULL_PERCENT:
        return "exceeded"
    if progress_percent >= WARNING_PERCENT:
        return "warning"
    return "ok"


def goal_label(goal: str | None) -> str:
    """Return the human label for a weight goal."""
    return _GOAL_LABELS.get((goal or "").lower(), "Maintain Weight")


def validate_selection(
    food: Food | None, serving: Serving | None, quantity: float | None
) -> tuple[Food, Serving, float]:
    """Check a form selection before it is logged or added to a set."""
    if food is None:
        raise ValidationError("Select a food")
    if serving is None:
        raise ValidationError("Select a serving")
    if quantity is None:
        raise ValidationError("Enter a quantity")
    if not food.has_serving(serving):
        raise ValidationError(
            f"Serving {serving.description!r} does not belong to {food.name!r}"
        )
    if not math.isfinite(quantity) or quantity <= 0:
        raise ValidationError("Quantity must be a positive number")
    steps = quantity / QUANTITY_STEP
    if abs(steps - round(steps)) > 1e-9:
        raise ValidationError(f"Quantity must be a multiple of {QUANTITY_STEP}")
    return food, serving, float(quantity)


def _calorie_percent(calories: float, needed: float) -> float:
    if needed <= 0:
        return 0.0
    return calories * 100 / needed


def _macro_progress(consumed: float, target: float, has_entries: bool) -> MacroProgress:
    if not has_entries or target <= 0:
        percent = 0.0
    else:
        percent = min(max(consumed * 100 / target, 0.0), FULL_PERCENT)
    return MacroProgress(
        consumed_grams=consumed,
        target_grams=target,
        progress_percent=percent,
    )
