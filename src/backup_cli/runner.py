from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import PathCreationError
from .finder import ModelLoader
from .logger import Logger
from .paths import RunConfiguration

LOG = logging.getLogger(__name__)

TIME_FORMAT = "%Y.%m.%d.%H.%M.%S"

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class RunContext:
    """Identity of a single trigger run, handed to the model it runs."""

    trigger: str
    time: str
    config: RunConfiguration

    @property
    def data_dir(self) -> Path:
        return self.config.data_path / self.trigger


def run_triggers(
    config: RunConfiguration,
    triggers: Sequence[str],
    loader: ModelLoader,
    logger: Optional[Logger] = None,
    clock: Clock = datetime.now,
) -> List[str]:
    """Run each trigger in order, stopping at the first failure.

    Errors from loading or performing a model propagate unchanged; triggers
    after the failing one are never started. Returns the completed triggers.
    """
    logger = logger or Logger()
    completed: List[str] = []
    for trigger in triggers:
        context = RunContext(trigger=trigger, time=clock().strftime(TIME_FORMAT), config=config)
        _ensure_data_dir(context)

        model = loader.load(trigger, context)
        logger.message(f"Performing backup for {model.label}!")
        model.perform()

        completed.append(trigger)
        logger.clear()
        LOG.debug("Trigger %s finished", trigger)
    return completed


def _ensure_data_dir(context: RunContext) -> None:
    try:
        context.data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathCreationError(f"Unable to create directory {context.data_dir}: {exc}") from exc
