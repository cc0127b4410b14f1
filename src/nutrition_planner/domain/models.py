"""Domain models for ingested nutrition data."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Food:
    """A known food, identified by its name."""

    name: str


@dataclass(frozen=True)
class MacroInfo:
    """Calories and macronutrient grams for one day."""

    calories: int
    protein: int
    fat: int
    carbs: int


@dataclass(frozen=True)
class MacroDay:
    """One tracked day with measured intake and its targets."""

    date: date
    expenditure: int
    trend_weight: float
    weight: float
    actual: MacroInfo
    target: MacroInfo


@dataclass(frozen=True)
class StateSnapshot:
    """Foods and macro targets as currently held in memory."""

    foods: tuple[Food, ...] = ()
    targets: tuple[MacroDay, ...] = ()
