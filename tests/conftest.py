"""Shared test fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import pytest
import yaml

from backup_cli.paths import PathDefaults


def write_config(config_dir: Path, compress: bool = False, keep: int = 0) -> Path:
    config_dir.mkdir(parents=True, exist_ok=True)
    config = config_dir / "config.yml"
    config.write_text(yaml.safe_dump({"defaults": {"compress": compress, "keep": keep}}), encoding="utf-8")
    return config


def write_model(
    config_dir: Path,
    trigger: str,
    archives: Iterable[Path],
    label: Optional[str] = None,
    **extra,
) -> Path:
    models_dir = config_dir / "models"
    models_dir.mkdir(parents=True, exist_ok=True)
    document = {"trigger": trigger, "archives": [str(path) for path in archives], **extra}
    if label:
        document["label"] = label
    path = models_dir / f"{trigger}.yml"
    path.write_text(yaml.safe_dump(document), encoding="utf-8")
    return path


@pytest.fixture()
def defaults(tmp_path: Path) -> PathDefaults:
    return PathDefaults.for_root(tmp_path / "default-home")


@pytest.fixture()
def source_dir(tmp_path: Path) -> Path:
    source = tmp_path / "source"
    source.mkdir()
    (source / "notes.txt").write_text("notes", encoding="utf-8")
    (source / "debug.log").write_text("noise", encoding="utf-8")
    return source


@pytest.fixture(autouse=True)
def _reset_logging_handlers():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if getattr(handler, "_backup_cli", False):
            root.removeHandler(handler)
            handler.close()
