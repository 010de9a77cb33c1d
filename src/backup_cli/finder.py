from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol

from .config import ConfigFile, ModelDefinition, load_config_file, load_model_definition
from .errors import ModelNotFound, ModelParseError
from .model import BackupModel, ModelHandle

if TYPE_CHECKING:
    from .runner import RunContext

LOG = logging.getLogger(__name__)

WILDCARD = "*"
MODELS_DIR = "models"
MODEL_SUFFIXES = (".yml", ".yaml")


class TriggerCatalog(Protocol):
    def match(self, pattern: str) -> List[str]:
        ...


class ModelLoader(Protocol):
    def load(self, trigger: str, context: "RunContext") -> ModelHandle:
        ...


class ModelFinder:
    """Locates model definitions next to the configuration file.

    Acts both as the trigger catalog used for wildcard expansion and as the
    model loader used by the run loop. Definitions are read lazily, once.
    """

    def __init__(self, config_file: Path) -> None:
        self._config_file = config_file
        self._config: Optional[ConfigFile] = None
        self._definitions: Optional[Dict[str, ModelDefinition]] = None

    @property
    def models_dir(self) -> Path:
        return self._config_file.parent / MODELS_DIR

    def triggers(self) -> List[str]:
        return sorted(self._load_definitions())

    def match(self, pattern: str) -> List[str]:
        regex = re.compile("^" + ".*".join(re.escape(part) for part in pattern.split(WILDCARD)) + "$")
        return [trigger for trigger in self.triggers() if regex.match(trigger)]

    def load(self, trigger: str, context: "RunContext") -> BackupModel:
        definitions = self._load_definitions()
        definition = definitions.get(trigger)
        if definition is None:
            raise ModelNotFound(f"Could not find trigger '{trigger}' in '{self._config_file}'.")
        return BackupModel(definition, context, defaults=self._load_config().defaults)

    def _load_config(self) -> ConfigFile:
        if self._config is None:
            if not self._config_file.is_file():
                raise ModelNotFound(f"Could not find configuration file: '{self._config_file}'.")
            self._config = load_config_file(self._config_file)
        return self._config

    def _load_definitions(self) -> Dict[str, ModelDefinition]:
        if self._definitions is not None:
            return self._definitions

        self._load_config()
        definitions: Dict[str, ModelDefinition] = {}
        sources: Dict[str, Path] = {}
        for path in self._model_files():
            definition = load_model_definition(path)
            if definition.trigger in definitions:
                raise ModelParseError(
                    f"Trigger '{definition.trigger}' defined in both {sources[definition.trigger]} and {path}."
                )
            definitions[definition.trigger] = definition
            sources[definition.trigger] = path
        LOG.debug("Loaded %d model definition(s) from %s", len(definitions), self.models_dir)
        self._definitions = definitions
        return definitions

    def _model_files(self) -> List[Path]:
        if not self.models_dir.is_dir():
            return []
        return sorted(
            path for path in self.models_dir.iterdir() if path.is_file() and path.suffix in MODEL_SUFFIXES
        )
