from __future__ import annotations

import logging
from typing import List

from .errors import EmptyTriggerList
from .finder import WILDCARD, TriggerCatalog

LOG = logging.getLogger(__name__)


def split_triggers(raw: str) -> List[str]:
    return [piece.strip() for piece in raw.split(",") if piece.strip()]


def expand_triggers(raw: str, catalog: TriggerCatalog) -> List[str]:
    """Turn a comma-separated trigger argument into the ordered list of triggers to run.

    Pieces containing the wildcard are replaced in place by every matching
    trigger. Repeated names are kept and run once per occurrence. A wildcard
    matching nothing is skipped, but an argument that leaves no trigger at all
    is an error rather than an empty run.
    """
    pieces = split_triggers(raw or "")
    if not pieces:
        raise EmptyTriggerList(f"No trigger given in '{raw}'.")

    triggers: List[str] = []
    for piece in pieces:
        if WILDCARD in piece:
            matches = catalog.match(piece)
            if not matches:
                LOG.warning("No triggers match '%s'", piece)
            triggers.extend(matches)
        else:
            triggers.append(piece)

    if not triggers:
        raise EmptyTriggerList(f"No triggers matched '{raw}'.")
    return triggers
