from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

import yaml

from .finder import MODELS_DIR
from .paths import DEFAULT_NAMES

CONFIG_HEADER = """\
# Backup configuration.
#
# Values under 'defaults' apply to every model in models/ that does not set
# them itself. Run a model with:
#
#   backup perform --trigger <trigger>
"""

MODEL_HEADER = """\
# Backup model '{trigger}'.
#
# 'archives' lists the files and directories packaged on every run,
# 'exclude' holds file name patterns to leave out.
"""

Confirm = Callable[[Path], bool]


@dataclass
class GeneratedFiles:
    model: Optional[Path] = None
    config: Optional[Path] = None


def sanitize_trigger(trigger: str) -> str:
    return re.sub(r"[\W\s]", "_", trigger)


def ask_overwrite(path: Path) -> bool:
    try:
        answer = input(f"A file already exists at '{path}'. Do you want to overwrite? [y/n] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def config_document() -> Dict[str, Any]:
    return {"defaults": {"compress": False, "keep": 0}}


def model_document(
    trigger: str,
    archives: Sequence[str] = (),
    compress: Optional[bool] = None,
    keep: Optional[int] = None,
) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "trigger": trigger,
        "label": trigger.replace("_", " ").title(),
        "archives": list(archives) or ["~/Documents"],
        "exclude": ["*.tmp"],
    }
    if compress is not None:
        document["compress"] = compress
    if keep is not None:
        document["keep"] = keep
    return document


def _write_yaml(path: Path, header: str, document: Dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as fh:
        fh.write(header)
        fh.write("\n")
        yaml.safe_dump(document, fh, sort_keys=False, default_flow_style=False)


def generate_config(config_dir: Path, confirm: Confirm = ask_overwrite) -> Optional[Path]:
    """Write ``config.yml`` into ``config_dir``; returns None if the user declined."""
    config_dir.mkdir(parents=True, exist_ok=True)
    config = config_dir / DEFAULT_NAMES["config_file"]
    if config.exists() and not confirm(config):
        return None
    _write_yaml(config, CONFIG_HEADER, config_document())
    return config


def generate_model(
    trigger: str,
    config_dir: Path,
    archives: Sequence[str] = (),
    compress: Optional[bool] = None,
    keep: Optional[int] = None,
    confirm: Confirm = ask_overwrite,
) -> GeneratedFiles:
    """Write ``models/<trigger>.yml`` and, when missing, ``config.yml``.

    Files that were not written are left as None in the result.
    """
    trigger = sanitize_trigger(trigger)
    models_dir = config_dir / MODELS_DIR
    models_dir.mkdir(parents=True, exist_ok=True)
    model = models_dir / f"{trigger}.yml"
    config = config_dir / DEFAULT_NAMES["config_file"]

    written = GeneratedFiles()
    if not model.exists() or confirm(model):
        _write_yaml(
            model,
            MODEL_HEADER.format(trigger=trigger),
            model_document(trigger, archives=archives, compress=compress, keep=keep),
        )
        written.model = model

    if not config.exists():
        _write_yaml(config, CONFIG_HEADER, config_document())
        written.config = config
    return written
