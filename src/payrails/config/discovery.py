"""Config file discovery.

Walks up from the working directory the way git looks for ``.git/``.  In
each directory a ``payrails.toml`` wins; otherwise a ``pyproject.toml``
carrying a ``[tool.payrails]`` table is used.  ``PAYRAILS_CONFIG`` names a
file explicitly and skips the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "payrails.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "PAYRAILS_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Nearest config file at or above *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def read_config_table(path: Path) -> dict[str, Any]:
    """The payrails settings stored in *path*.

    ``pyproject.toml`` files contribute only their ``[tool.payrails]``
    table.

    Raises:
        tomllib.TOMLDecodeError: *path* is not valid TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        table = data.get("tool", {}).get("payrails", {})
        return table if isinstance(table, dict) else {}
    return data


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError:
        return False
    return "payrails" in data.get("tool", {})
