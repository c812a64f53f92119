"""Locate ``relgraph.toml``.

``RELGRAPH_CONFIG`` wins when set. Otherwise the file is looked up in the
start directory and then in each parent, so a graph directory can hold one
config that every subdirectory shares.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "relgraph.toml"
CONFIG_ENV_VAR = "RELGRAPH_CONFIG"


def _env_config() -> Path | None:
    value = os.environ.get(CONFIG_ENV_VAR)
    if not value:
        return None
    return Path(value)


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    A ``RELGRAPH_CONFIG`` path that does not exist disables discovery
    instead of falling back to the walk-up.
    """
    override = _env_config()
    if override is not None:
        return override if override.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
