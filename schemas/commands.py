"""Reducer inputs: logged commands and unlogged meta-inputs.

Commands are reversible edits recorded in the action log. Each carries an
``id`` assigned at construction time that stays attached to it regardless of
its position in the log; row-creating commands also record the id of the row
they create so that redo is deterministic.

Meta-inputs drive history navigation, focus and whole-document replacement.
They are never logged.
"""

from __future__ import annotations

from typing import List, Literal, Union
from uuid import uuid4

from pydantic import Field

from schemas.sheet import BalanceField, Balances, Expense, Focus, RowField, _JsonMixin


def new_id() -> str:
    """Return a fresh opaque identifier for a command or row."""
    return uuid4().hex


CellValue = Union[float, str]


class AddRow(_JsonMixin):
    type: Literal["AddRow"] = "AddRow"
    id: str = Field(default_factory=new_id)
    row_id: str = Field(default_factory=new_id)


class AddSpace(_JsonMixin):
    type: Literal["AddSpace"] = "AddSpace"
    id: str = Field(default_factory=new_id)
    row_id: str = Field(default_factory=new_id)


class Edit(_JsonMixin):
    """Set one row cell; ``advance_focus`` commits and tabs to the next cell."""

    type: Literal["Edit"] = "Edit"
    id: str = Field(default_factory=new_id)
    target: Focus
    old_value: CellValue
    new_value: CellValue
    advance_focus: bool = False


class EditBalance(_JsonMixin):
    type: Literal["EditBalance"] = "EditBalance"
    id: str = Field(default_factory=new_id)
    field: BalanceField
    old_value: float
    new_value: float


Command = Union[AddRow, AddSpace, Edit, EditBalance]
COMMAND_TYPES = (AddRow, AddSpace, Edit, EditBalance)


class Undo(_JsonMixin):
    type: Literal["Undo"] = "Undo"


class Redo(_JsonMixin):
    type: Literal["Redo"] = "Redo"


class SetFocus(_JsonMixin):
    type: Literal["SetFocus"] = "SetFocus"
    row_id: str
    field: RowField


class CancelFocus(_JsonMixin):
    type: Literal["CancelFocus"] = "CancelFocus"


class ReplaceDocument(_JsonMixin):
    type: Literal["ReplaceDocument"] = "ReplaceDocument"
    expenses: List[Expense] = Field(default_factory=list)
    balances: Balances = Field(default_factory=Balances)


class MarkSaved(_JsonMixin):
    type: Literal["MarkSaved"] = "MarkSaved"


MetaInput = Union[Undo, Redo, SetFocus, CancelFocus, ReplaceDocument, MarkSaved]
Input = Union[Command, MetaInput]
