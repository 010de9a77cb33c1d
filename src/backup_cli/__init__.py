"""Backup command line interface: trigger resolution and sequential runs."""

from __future__ import annotations

__version__ = "0.1.0"

from .paths import PathOptions, RunConfiguration, resolve_paths  # noqa: E402,F401
from .runner import RunContext, run_triggers  # noqa: E402,F401
from .triggers import expand_triggers  # noqa: E402,F401
