from __future__ import annotations

import fnmatch
import logging
import shutil
import tarfile
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Protocol

from .config import ModelDefaults, ModelDefinition
from .errors import ModelExecutionError

if TYPE_CHECKING:
    from .runner import RunContext

LOG = logging.getLogger(__name__)

DEFAULT_EXTENSION = "tar"


class ModelHandle(Protocol):
    @property
    def label(self) -> str:
        ...

    def perform(self) -> None:
        ...


class BackupModel:
    """Packages the configured paths into a tar archive under the trigger's data directory."""

    def __init__(
        self,
        definition: ModelDefinition,
        context: "RunContext",
        defaults: Optional[ModelDefaults] = None,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        defaults = defaults or ModelDefaults()
        self.trigger = definition.trigger
        self.archives = list(definition.archives)
        self.exclude = list(definition.exclude)
        self.compress = definition.effective_compress(defaults)
        self.keep = definition.effective_keep(defaults)
        self.extension = f"{extension}.gz" if self.compress else extension
        self._label = definition.display_label()
        self._context = context

    @property
    def label(self) -> str:
        return f"{self._label} ({self.trigger})"

    @property
    def package_name(self) -> str:
        return f"{self._context.time}.{self.extension}"

    def perform(self) -> Path:
        missing = [str(path) for path in self.archives if not path.exists()]
        if missing:
            raise ModelExecutionError(f"Archive path(s) not found for '{self.trigger}': {', '.join(missing)}")

        staging = self._context.config.tmp_path / self.trigger
        staging.mkdir(parents=True, exist_ok=True)
        try:
            package = staging / self.package_name
            self._package(package)
            self._context.data_dir.mkdir(parents=True, exist_ok=True)
            destination = self._context.data_dir / self.package_name
            shutil.move(str(package), destination)
            LOG.info("Stored package %s", destination)
        except (OSError, tarfile.TarError) as exc:
            raise ModelExecutionError(f"Packaging failed for '{self.trigger}': {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        self._cycle()
        return destination

    def _package(self, package: Path) -> None:
        mode = "w:gz" if self.compress else "w"
        LOG.info("Creating archive %s", package)
        with tarfile.open(package, mode) as tar:
            for path in self.archives:
                tar.add(path, arcname=str(path.resolve()).lstrip("/"), filter=self._exclude_filter)

    def _exclude_filter(self, member: tarfile.TarInfo) -> Optional[tarfile.TarInfo]:
        name = Path(member.name).name
        if any(fnmatch.fnmatch(name, pattern) for pattern in self.exclude):
            LOG.debug("Excluding %s", member.name)
            return None
        return member

    def _cycle(self) -> None:
        if self.keep <= 0:
            return
        packages = stored_packages(self._context.data_dir)
        for expired in packages[: max(len(packages) - self.keep, 0)]:
            LOG.info("Removing expired package %s", expired)
            expired.unlink(missing_ok=True)


def stored_packages(data_dir: Path) -> List[Path]:
    """Packages stored for a trigger, oldest first."""
    if not data_dir.exists():
        return []
    return sorted(child for child in data_dir.iterdir() if child.is_file() and ".tar" in child.name)
