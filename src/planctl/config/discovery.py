"""Config file discovery and loading.

Walk-up finder locates planctl.toml, similar to how git finds .git/.
Supports the PLANCTL_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from planctl.config.models import PlanConfig

CONFIG_FILENAME = "planctl.toml"
CONFIG_ENV_VAR = "PLANCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for planctl.toml.

    PLANCTL_CONFIG, when set, wins; a path there that is not a file
    means no config at all.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        return path if path.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> PlanConfig:
    """Validate the TOML file at *path* (discovered from *cwd* when None).

    Returns defaults when no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return PlanConfig()
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return PlanConfig.model_validate(data)
