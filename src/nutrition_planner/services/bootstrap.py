"""Initial load of every existing data file before watching starts."""

import logging
import os
from pathlib import Path

from nutrition_planner.services.routing import ChangeRouter

logger = logging.getLogger(__name__)


class BootstrapError(RuntimeError):
    """Raised when the data directory cannot be walked at startup."""


def load_existing_files(root: Path | str, router: ChangeRouter) -> int:
    """Feed every file under root through the router and return the count."""

    def _raise(error: OSError) -> None:
        raise error

    visited = 0
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            dirnames.sort()
            for filename in sorted(filenames):
                router.handle_file_change(Path(dirpath) / filename)
                visited += 1
    except OSError as exc:
        raise BootstrapError(f"Failed to walk data directory {root}: {exc}") from exc
    logger.info("Bootstrap loaded %d file(s) from %s", visited, root)
    return visited
