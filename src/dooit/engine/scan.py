# src/dooit/engine/scan.py

"""
Filesystem scanning utilities.

This module is responsible for discovering task files inside the data
directory and loading them into a flat list of tasks.

Expected on-disk structure:

    <data_dir>/
      errands.yml
      project.yml
      project/
        subtask.yml
        subtask/
          detail.yml
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from .model import Task
from .parse import TASK_SUFFIXES, parse_task

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------

def iter_task_files(root: str | Path) -> Iterator[Path]:
    """
    Yield every task file in the subtree rooted at `root`.

    - A missing root yields nothing.
    - Entries are visited in sorted order so results are reproducible.
    - Unreadable directories raise (OSError is not swallowed here).
    """
    root_path = Path(root)
    if not root_path.is_dir():
        logger.debug("Task directory %s does not exist", root_path)
        return

    def walk_dir(d: Path) -> Iterator[Path]:
        for child in sorted(d.iterdir()):
            if child.is_dir():
                yield from walk_dir(child)
                continue
            if child.is_file() and child.suffix in TASK_SUFFIXES:
                yield child

    yield from walk_dir(root_path)


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------

def load_tasks(root: str | Path) -> list[Task]:
    """
    Parse every task file under `root`.

    The first unreadable or malformed file aborts the whole load
    (ParseError / OSError propagate); no partial list is returned.
    """
    tasks: list[Task] = []
    for path in iter_task_files(root):
        logger.debug("Loading %s", path)
        tasks.append(parse_task(path))

    logger.debug("Loaded %d task(s) from %s", len(tasks), root)
    return tasks
