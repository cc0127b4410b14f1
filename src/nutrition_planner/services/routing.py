"""Route changed data files to the parser and store update for their category."""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, TypeVar

from nutrition_planner.services.parsers import (
    ParseError,
    parse_foods,
    parse_macro_days,
)
from nutrition_planner.services.state import StateWriter

logger = logging.getLogger(__name__)

FOODS_CATEGORY = "foods"
TARGETS_CATEGORY = "targets"

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class Route(Generic[RecordT]):
    """Parser and store update for one data category."""

    category: str
    parse: Callable[[Path], Sequence[RecordT]]
    apply: Callable[[Iterable[RecordT]], None]


def build_routes(
    store: StateWriter,
    foods_dir_name: str = FOODS_CATEGORY,
    targets_dir_name: str = TARGETS_CATEGORY,
) -> dict[str, Route[Any]]:
    """Map data directory names to the routes handling their files."""
    return {
        foods_dir_name: Route(
            category=FOODS_CATEGORY,
            parse=parse_foods,
            apply=store.replace_foods,
        ),
        targets_dir_name: Route(
            category=TARGETS_CATEGORY,
            parse=parse_macro_days,
            apply=store.replace_targets,
        ),
    }


@dataclass
class ChangeRouter:
    """Dispatch a changed file by the name of the directory containing it."""

    routes: Mapping[str, Route[Any]]

    def route_for(self, path: Path | str) -> Route[Any] | None:
        """Return the route for a file path, if its directory is known."""
        return self.routes.get(Path(path).parent.name)

    def handle_file_change(self, path: Path | str) -> bool:
        """Parse the file and install its records.

        Returns True when the store was updated. Parse failures are logged and
        leave the previously loaded data in place.
        """
        file_path = Path(path)
        route = self.route_for(file_path)
        if route is None:
            logger.debug("Ignoring file outside data directories: %s", file_path)
            return False
        try:
            records = route.parse(file_path)
        except ParseError:
            logger.warning(
                "Failed to parse %s file %s", route.category, file_path, exc_info=True
            )
            return False
        route.apply(records)
        logger.info(
            "Loaded %d %s record(s) from %s", len(records), route.category, file_path
        )
        return True
