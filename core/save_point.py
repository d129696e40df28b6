"""Save-point tracking.

A document is clean when the command in effect (the one just before the log
cursor, or ``NO_COMMANDS``) is the one that was in effect at the last save.
"""

from __future__ import annotations

from dataclasses import replace

from core.document import DocumentState


def is_clean(state: DocumentState) -> bool:
    """Return True when the command in effect is the one recorded at the last save."""
    return state.log.current_id() == state.save_point


def mark_saved(state: DocumentState) -> DocumentState:
    """Record the command currently in effect as the save point."""
    return replace(state, save_point=state.log.current_id())
