# src/dooit/settings.py

"""Settings resolved once at startup from the environment (+ optional config.yml).

One Settings value is built in main() and passed down explicitly; nothing
here is cached at import time.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .engine.ops import CONFIG_FILE_NAME
from .engine.parse import ParseError, load_yaml_mapping
from .engine.sort import SortMode

APP_NAME = "dooit"
ENV_PREFIX = "DOOIT"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _first_env(env: Mapping[str, str], *names: str, default: str | None = None) -> str | None:
    for n in names:
        v = env.get(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_path(env: Mapping[str, str], name: str) -> Optional[Path]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


def _home(env: Mapping[str, str]) -> Path:
    raw = env.get("HOME")
    return Path(raw) if raw else Path.home()


def _platform_dirs(env: Mapping[str, str], platform: str) -> tuple[Path, Path]:
    """Return (data_dir, config_dir) following the platform convention."""
    if platform.startswith("win"):
        base = _env_path(env, "APPDATA") or _home(env) / "AppData" / "Roaming"
        return base / APP_NAME / "data", base / APP_NAME / "config"

    if platform == "darwin":
        base = _home(env) / "Library" / "Application Support" / APP_NAME
        return base, base

    data_home = _env_path(env, "XDG_DATA_HOME") or _home(env) / ".local" / "share"
    config_home = _env_path(env, "XDG_CONFIG_HOME") or _home(env) / ".config"
    return data_home / APP_NAME, config_home / APP_NAME


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    config_dir: Path
    editor: Optional[str] = None
    default_sort: SortMode = SortMode.URGENCY_DESCENDING
    log_level: str = "WARNING"

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    @staticmethod
    def from_env(
        environ: Optional[Mapping[str, str]] = None,
        *,
        platform: Optional[str] = None,
        read_config: bool = True,
    ) -> "Settings":
        """
        Resolve settings.

        Precedence (highest first): DOOIT_* variables, VISUAL/EDITOR,
        config.yml in the config dir, built-in defaults.

        With `read_config=False` config.yml is not opened at all.
        """
        env = os.environ if environ is None else environ
        data_default, config_default = _platform_dirs(env, platform or sys.platform)

        data_dir = _env_path(env, _k("DATA_DIR")) or data_default
        config_dir = _env_path(env, _k("CONFIG_DIR")) or config_default

        file_values = _read_config_file(config_dir / CONFIG_FILE_NAME) if read_config else {}

        editor = _first_env(env, _k("EDITOR"), "VISUAL", "EDITOR", default=None)
        if editor is None:
            editor = file_values.get("editor")

        default_sort = file_values.get("sort", SortMode.default())

        log_level = (_first_env(env, _k("LOG_LEVEL"), default="WARNING") or "WARNING").strip().upper()

        return Settings(
            data_dir=data_dir,
            config_dir=config_dir,
            editor=editor,
            default_sort=default_sort,
            log_level=log_level,
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    """
    Read the optional user config.

    Recognised keys: `editor` (string), `sort` (list sort mode).
    A missing file yields no values.
    """
    if not path.is_file():
        return {}

    data = load_yaml_mapping(path)
    out: dict[str, Any] = {}

    editor = data.get("editor")
    if editor is not None:
        if not isinstance(editor, str):
            raise ParseError(str(path), "YAML key 'editor' must be a string")
        if editor.strip():
            out["editor"] = editor.strip()

    sort = data.get("sort")
    if sort is not None:
        try:
            out["sort"] = SortMode(str(sort).strip().lower())
        except ValueError as e:
            allowed = ", ".join([m.value for m in SortMode])
            raise ParseError(str(path), f"Invalid sort '{sort}' (allowed: {allowed})") from e

    return out
