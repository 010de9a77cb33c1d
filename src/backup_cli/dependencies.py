from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from typing import Dict, List

from .errors import BackupError


@dataclass(frozen=True)
class Dependency:
    version: str
    require: str
    used_for: str


DEPENDENCIES: Dict[str, Dependency] = {
    "PyYAML": Dependency(version=">=6.0", require="yaml", used_for="Reading and writing configuration and model files"),
    "pydantic": Dependency(version=">=2.0", require="pydantic", used_for="Validating configuration and model files"),
}


def describe(name: str, dependency: Dependency) -> str:
    return "\n".join(
        [
            name,
            "-" * 50,
            f"version:       {dependency.version}",
            f"lib required:  {dependency.require}",
            f"used for:      {dependency.used_for}",
        ]
    )


def install_command(name: str) -> List[str]:
    dependency = DEPENDENCIES.get(name)
    if dependency is None:
        known = ", ".join(sorted(DEPENDENCIES))
        raise BackupError(f"Unknown dependency '{name}'. Choose one of: {known}")
    return [sys.executable, "-m", "pip", "install", f"{name}{dependency.version}"]


def install(name: str) -> int:
    cmd = install_command(name)
    return subprocess.run(cmd, check=False).returncode
