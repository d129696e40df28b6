"""Document reducer.

``reduce(state, input)`` is the single transition function of the editor.
Commands are never applied directly: ``commit`` appends them to the action
log and the redo path applies them, so forward and reverse application each
exist exactly once (``apply_forward`` / ``apply_backward``).

The reducer trusts its inputs. Cell text is parsed at the input boundary
(``tools.cell_input``) and persisted documents are validated by
``storage.document_file`` before they reach it. A command that refers to a
row that does not exist breaks the append-only row invariant and raises
``MissingRowError``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from core.document import DocumentState, default_row, load_document, spacer_row
from core.save_point import mark_saved
from schemas.commands import (
    COMMAND_TYPES,
    AddRow,
    AddSpace,
    CancelFocus,
    Command,
    Edit,
    EditBalance,
    Input,
    MarkSaved,
    Redo,
    ReplaceDocument,
    SetFocus,
    Undo,
)
from schemas.sheet import FOCUS_CYCLE, Focus
from tools.derive import derive


class MissingRowError(LookupError):
    """A command referenced a row that is not in the document."""


def next_field(field: str) -> str:
    """Field after ``field`` in the commit-and-tab cycle."""
    i = FOCUS_CYCLE.index(field)
    return FOCUS_CYCLE[(i + 1) % len(FOCUS_CYCLE)]


def _set_cell(state: DocumentState, target: Focus, value) -> DocumentState:
    idx = state.row_index(target.row_id)
    if idx < 0:
        raise MissingRowError(target.row_id)
    row = derive(state.rows[idx].model_copy(update={target.field: value}))
    rows = state.rows[:idx] + (row,) + state.rows[idx + 1 :]
    return replace(state, rows=rows)


def _set_balance(state: DocumentState, field: str, value: float) -> DocumentState:
    return replace(state, balances=state.balances.model_copy(update={field: value}))


def _pop_row(state: DocumentState, row_id: str) -> DocumentState:
    # Row-creating commands always append at the tail, so undo removes the tail.
    if not state.rows or state.rows[-1].id != row_id:
        raise MissingRowError(row_id)
    return replace(state, rows=state.rows[:-1])


def apply_forward(state: DocumentState, command: Command) -> DocumentState:
    """Apply the effect of ``command`` to rows, balances and focus."""
    if isinstance(command, AddRow):
        rows = state.rows + (default_row(command.row_id),)
        return replace(state, rows=rows, focus=Focus(row_id=command.row_id, field="name"))
    if isinstance(command, AddSpace):
        return replace(state, rows=state.rows + (spacer_row(command.row_id),))
    if isinstance(command, Edit):
        state = _set_cell(state, command.target, command.new_value)
        if command.advance_focus:
            focus = Focus(row_id=command.target.row_id, field=next_field(command.target.field))
            return replace(state, focus=focus)
        return replace(state, focus=None)
    if isinstance(command, EditBalance):
        return _set_balance(state, command.field, command.new_value)
    raise TypeError(f"Unsupported command: {type(command).__name__}")


def apply_backward(state: DocumentState, command: Command) -> DocumentState:
    """Reverse the effect of ``command``; the command itself is untouched."""
    if isinstance(command, (AddRow, AddSpace)):
        state = _pop_row(state, command.row_id)
        if state.focus is not None and state.focus.row_id == command.row_id:
            state = replace(state, focus=None)
        return state
    if isinstance(command, Edit):
        state = _set_cell(state, command.target, command.old_value)
        return replace(state, focus=None)
    if isinstance(command, EditBalance):
        return _set_balance(state, command.field, command.old_value)
    raise TypeError(f"Unsupported command: {type(command).__name__}")


def commit(state: DocumentState, command: Command) -> DocumentState:
    """Append ``command`` to the log without applying it."""
    return replace(state, log=state.log.append(command))


def undo(state: DocumentState) -> DocumentState:
    """Step the log back one command and reverse its effect.

    Returns:
        The new state, or ``state`` itself when nothing is left to undo.
    """
    log, command = state.log.step_back()
    if command is None:
        return state
    return apply_backward(replace(state, log=log), command)


def redo(state: DocumentState) -> DocumentState:
    """Step the log forward one command and apply it.

    Returns:
        The new state, or ``state`` itself when nothing is left to redo.
    """
    log, command = state.log.step_forward()
    if command is None:
        return state
    return apply_forward(replace(state, log=log), command)


def set_focus(state: DocumentState, row_id: str, field: str) -> DocumentState:
    """Put one cell in edit mode. Focus changes are not logged.

    Raises:
        MissingRowError: No row has ``row_id``.
        ValueError: ``field`` is not an editable row field.
    """
    if state.row_index(row_id) < 0:
        raise MissingRowError(row_id)
    if field not in FOCUS_CYCLE:
        raise ValueError(f"Field is not editable: {field!r}")
    return replace(state, focus=Focus(row_id=row_id, field=field))


def reduce(state: DocumentState, event: Input) -> DocumentState:
    """Return the state after ``event``; ``state`` is never modified."""
    if isinstance(event, COMMAND_TYPES):
        return redo(commit(state, event))
    if isinstance(event, Undo):
        return undo(state)
    if isinstance(event, Redo):
        return redo(state)
    if isinstance(event, SetFocus):
        return set_focus(state, event.row_id, event.field)
    if isinstance(event, CancelFocus):
        return replace(state, focus=None)
    if isinstance(event, ReplaceDocument):
        return load_document(event.expenses, event.balances)
    if isinstance(event, MarkSaved):
        return mark_saved(state)
    raise TypeError(f"Unsupported input: {type(event).__name__}")


def replay(state: DocumentState, events: Iterable[Input]) -> DocumentState:
    """Fold ``events`` through ``reduce``."""
    for event in events:
        state = reduce(state, event)
    return state
