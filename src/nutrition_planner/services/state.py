"""Thread-safe in-memory store for the latest parsed nutrition data."""

import threading
from collections.abc import Iterable
from typing import Protocol

from nutrition_planner.domain.models import Food, MacroDay, StateSnapshot


class StateReader(Protocol):
    """Read access to the current foods and macro targets."""

    def current_state(self) -> StateSnapshot:
        """Return the foods and targets currently installed."""


class StateWriter(Protocol):
    """Write access used by the file ingestion pipeline."""

    def replace_foods(self, foods: Iterable[Food]) -> None:
        """Install a new food list, replacing the previous one."""

    def replace_targets(self, targets: Iterable[MacroDay]) -> None:
        """Install a new macro-day series, replacing the previous one."""


class InMemoryStateStore(StateReader, StateWriter):
    """State store guarded by a single lock.

    Each field is swapped for a new tuple as a whole, so a reader sees either
    the old or the new sequence. Foods and targets are updated independently.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._foods: tuple[Food, ...] = ()
        self._targets: tuple[MacroDay, ...] = ()

    def replace_foods(self, foods: Iterable[Food]) -> None:
        """Install a new food list."""
        new_foods = tuple(foods)
        with self._lock:
            self._foods = new_foods

    def replace_targets(self, targets: Iterable[MacroDay]) -> None:
        """Install a new macro-day series."""
        new_targets = tuple(targets)
        with self._lock:
            self._targets = new_targets

    def current_state(self) -> StateSnapshot:
        """Return both fields as they are right now."""
        with self._lock:
            return StateSnapshot(foods=self._foods, targets=self._targets)
