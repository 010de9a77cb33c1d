from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ModelParseError


class ModelDefaults(BaseModel):
    """Values applied to every model that does not set them itself."""

    compress: bool = False
    keep: int = Field(default=0, ge=0, description="Packages to keep per trigger; 0 keeps all.")


class ConfigFile(BaseModel):
    defaults: ModelDefaults = ModelDefaults()


class ModelDefinition(BaseModel):
    trigger: str
    label: Optional[str] = None
    archives: List[Path]
    exclude: List[str] = Field(default_factory=list, description="Glob patterns matched on file names.")
    compress: Optional[bool] = None
    keep: Optional[int] = Field(default=None, ge=0)

    @field_validator("trigger")
    @classmethod
    def _require_trigger(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Model trigger must not be empty.")
        if "*" in value or "," in value:
            raise ValueError(f"Model trigger '{value}' must not contain '*' or ','.")
        return value

    @field_validator("archives")
    @classmethod
    def _require_archives(cls, value: List[Path]) -> List[Path]:
        if not value:
            raise ValueError("Model must define at least one archive path.")
        return [path.expanduser() for path in value]

    def display_label(self) -> str:
        return self.label or self.trigger

    def effective_compress(self, defaults: ModelDefaults) -> bool:
        if self.compress is not None:
            return self.compress
        return defaults.compress

    def effective_keep(self, defaults: ModelDefaults) -> int:
        if self.keep is not None:
            return self.keep
        return defaults.keep


def read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ModelParseError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ModelParseError(f"Expected a mapping at the top of {path}")
    return raw


def load_config_file(path: Path) -> ConfigFile:
    raw = read_yaml(path)
    try:
        return ConfigFile.model_validate(raw)
    except ValidationError as exc:
        raise ModelParseError(f"Invalid configuration in {path}: {exc}") from exc


def load_model_definition(path: Path) -> ModelDefinition:
    raw = read_yaml(path)
    try:
        return ModelDefinition.model_validate(raw)
    except ValidationError as exc:
        raise ModelParseError(f"Invalid model definition in {path}: {exc}") from exc
