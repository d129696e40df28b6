"""Document state record.

The whole state machine state: rows, balances, focus, action log and save
point. States are immutable; the reducer returns new instances via
``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from schemas.commands import new_id
from schemas.sheet import Balances, Expense, Focus
from storage.action_log import NO_COMMANDS, ActionLog
from tools.derive import derive


@dataclass(frozen=True)
class DocumentState:
    rows: Tuple[Expense, ...] = ()
    balances: Balances = field(default_factory=Balances)
    focus: Optional[Focus] = None
    log: ActionLog = field(default_factory=ActionLog)
    save_point: str = NO_COMMANDS

    def row_index(self, row_id: str) -> int:
        """Position of the row with ``row_id``, or -1."""
        for i, row in enumerate(self.rows):
            if row.id == row_id:
                return i
        return -1


def default_row(row_id: str) -> Expense:
    """Row created by AddRow: placeholder name, zero amount, paid in full by us."""
    return derive(Expense(id=row_id))


def spacer_row(row_id: str) -> Expense:
    """Visual separator row with no financial meaning."""
    return derive(Expense(id=row_id, name="", pay_percent=0.0, space=True))


def load_document(rows: Iterable[Expense], balances: Optional[Balances] = None) -> DocumentState:
    """Fresh state from already-validated rows; derived fields are recomputed."""
    return DocumentState(
        rows=tuple(derive(r) for r in rows),
        balances=balances or Balances(),
    )


def new_document() -> DocumentState:
    """Empty sheet: one default row, no history."""
    return load_document([default_row(new_id())])
