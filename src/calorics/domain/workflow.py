"""Modes of the food register form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calorics.services.food_sets import FoodSetBuilder


@dataclass(frozen=True)
class SingleEntry:
    """Each submission logs one food entry."""


@dataclass(frozen=True)
class AuthoringSet:
    """Submissions accumulate into a food set being composed."""

    builder: FoodSetBuilder


@dataclass(frozen=True)
class ApplyingSet:
    """A stored food set is chosen for application to a date."""

    set_id: int | None = None


RegisterMode = SingleEntry | AuthoringSet | ApplyingSet
