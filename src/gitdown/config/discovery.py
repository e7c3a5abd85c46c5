"""Config file discovery.

Walk-up finder locates gitdown.toml, similar to how git finds .git/.
Supports the GITDOWN_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "gitdown.toml"
CONFIG_ENV_VAR = "GITDOWN_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for gitdown.toml.

    Returns the path to the config file, or None if not found.
    Checks GITDOWN_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
