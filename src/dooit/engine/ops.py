# src/dooit/engine/ops.py

"""
Filesystem-level operations and storage rendering.

This module contains:
- task file path derivation from hierarchical names,
- serialisation of Task objects to disk,
- config file initialisation,
- launching the external editor.

No parsing is performed here.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Final, Optional

import yaml

from .parse import TASK_SUFFIX
from .validate import ValidationError, validate_task_name

if TYPE_CHECKING:
    from .model import Task

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------

CONFIG_FILE_NAME: Final[str] = "config.yml"
CONFIG_PLACEHOLDER: Final[str] = "# This is the sample config\n"


# ---------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------

def ensure_dir(path: Path) -> bool:
    """
    Create `path` (and parents) if missing.

    Returns True if the directory was created, False if it already existed.
    """
    if path.is_dir():
        return False

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Created directory %s", path)
    return True


# ---------------------------------------------------------------------
# Task files
# ---------------------------------------------------------------------

def task_path(root: Path, name: str) -> Path:
    """
    Map a hierarchical task name onto its file inside `root`.

    `project/subtask` -> <root>/project/subtask.yml
    """
    parts = validate_task_name(name).split("/")
    return root.joinpath(*parts[:-1], parts[-1] + TASK_SUFFIX)


def write_task(root: Path, task: "Task") -> Path:
    """
    Serialise `task` into its file under `root`, creating any missing
    intermediate directories. An existing file for the same name is
    overwritten.

    Returns the path written.
    """
    path = task_path(root, task.name)
    ensure_dir(path.parent)

    path.write_text(render_task_yml(task), encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path


def render_task_yml(task: "Task") -> str:
    data = {
        "name": task.name,
        "description": task.description,
        "due": task.due.isoformat() if task.due is not None else None,
        "urgency": task.urgency.value,
        "completed": bool(task.completed),
    }
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


# ---------------------------------------------------------------------
# Config file / editor
# ---------------------------------------------------------------------

def ensure_config_file(config_dir: Path) -> Path:
    """
    Ensure `<config_dir>/config.yml` exists, writing a placeholder if not.
    """
    ensure_dir(config_dir)

    path = config_dir / CONFIG_FILE_NAME
    if not path.exists():
        path.write_text(CONFIG_PLACEHOLDER, encoding="utf-8")
        logger.debug("Created sample config %s", path)

    return path


def launch_editor(editor: Optional[str], path: Path) -> None:
    """
    Open `path` in `editor` and wait for it to exit.

    `editor` is a command line (e.g. "code --wait"); the file path is
    appended as the last argument.
    """
    if not editor or not editor.strip():
        raise ValidationError(
            "No editor configured, set the EDITOR environment variable "
            "or pass it as an argument with --editor"
        )

    cmd = shlex.split(editor) + [str(path)]
    logger.debug("Running %s", cmd)

    try:
        p = subprocess.run(cmd)
    except OSError as e:
        raise OSError(f"Cannot edit {path} with {editor!r}: {e}") from e

    if p.returncode != 0:
        raise ValidationError(f"Editor {editor!r} exited with status {p.returncode}")
