from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from .errors import PathCreationError

LOG = logging.getLogger(__name__)

DEFAULT_ROOT_PATH = "~/Backup"

# option key -> default entry name under the base path
DEFAULT_NAMES: Dict[str, str] = {
    "config_file": "config.yml",
    "data_path": "data",
    "log_path": "log",
    "cache_path": ".cache",
    "tmp_path": ".tmp",
}

CREATED_KEYS = ("log_path", "cache_path", "tmp_path")

_TRAILING_SEPARATOR = re.compile(r"/\s*$")


@dataclass(frozen=True)
class PathOptions:
    root_path: str = ""
    config_file: str = ""
    data_path: str = ""
    log_path: str = ""
    cache_path: str = ""
    tmp_path: str = ""


class PathDefaults(BaseModel):
    """Compiled-in locations used when no override is given."""

    model_config = ConfigDict(frozen=True)

    root_path: Path
    config_file: Path
    data_path: Path
    log_path: Path
    cache_path: Path
    tmp_path: Path

    @classmethod
    def for_root(cls, root: Path) -> "PathDefaults":
        return cls(root_path=root, **{key: root / name for key, name in DEFAULT_NAMES.items()})

    @classmethod
    def from_env(cls) -> "PathDefaults":
        root = Path(os.getenv("BACKUP_ROOT", DEFAULT_ROOT_PATH)).expanduser()
        return cls.for_root(root)


class RunConfiguration(BaseModel):
    """Resolved filesystem locations for one invocation."""

    model_config = ConfigDict(frozen=True)

    root_path: Optional[Path] = None
    config_file: Path
    data_path: Path
    log_path: Path
    cache_path: Path
    tmp_path: Path


def resolve_paths(options: PathOptions, defaults: Optional[PathDefaults] = None) -> RunConfiguration:
    """Compute the effective paths for a run.

    ``--root-path`` re-bases every default and every relative override, but
    only when it names an existing directory; otherwise it is ignored.
    Absolute overrides are always used as given.
    """
    defaults = defaults or PathDefaults.from_env()
    root_path = _resolve_root(options.root_path)

    resolved: Dict[str, Path] = {}
    for key, name in DEFAULT_NAMES.items():
        given = _TRAILING_SEPARATOR.sub("", getattr(options, key), count=1).lstrip()
        if not given:
            path = Path(root_path, name) if root_path else getattr(defaults, key)
        else:
            expanded = os.path.abspath(os.path.expanduser(given))
            if expanded != given and root_path:
                path = Path(root_path, given)
            else:
                path = Path(expanded)
        resolved[key] = path

    for key in CREATED_KEYS:
        _ensure_directory(resolved[key])

    return RunConfiguration(root_path=Path(root_path) if root_path else None, **resolved)


def _resolve_root(root_given: str) -> Optional[str]:
    root_given = root_given.strip()
    if not root_given:
        return None
    if not os.path.isdir(root_given):
        LOG.debug("Ignoring root path %s: not an existing directory", root_given)
        return None
    return os.path.abspath(root_given)


def _ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathCreationError(f"Unable to create directory {path}: {exc}") from exc
