"""Sheet view projection.

Turns a document state into display-ready lines for the CLI table plus a
reconciliation summary of the sheet totals against the balances.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from core.document import DocumentState
from tools.derive import sheet_totals


class SheetLine(BaseModel):
    number: int
    row_id: str
    name: str
    amount: str
    pay_percent: str
    to_pay: str
    paid_percent: str
    due: str
    actually_due: str
    space: bool = False
    focused_field: Optional[str] = None


class Reconciliation(BaseModel):
    field: str
    sheet: str
    balance: str
    difference: str


class SheetView(BaseModel):
    lines: List[SheetLine] = []
    reconciliation: List[Reconciliation] = []
    clean: bool = True


def format_money(value: float, symbol: str = "$") -> str:
    """Format ``value`` as ``$1,234.50`` with the sign before the symbol."""
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(value: float) -> str:
    """Format a fraction as a whole-number percentage such as ``50%``."""
    return f"{value * 100:g}%"


def build_view(state: DocumentState, *, clean: bool = True, symbol: str = "$") -> SheetView:
    """Materialize display lines and the reconciliation summary.

    Args:
        state: Document to display.
        clean: Whether the document matches its last save.
        symbol: Currency prefix for money cells.

    Returns:
        SheetView with one line per row in document order.
    """
    lines: List[SheetLine] = []
    focus = state.focus
    for i, row in enumerate(state.rows, start=1):
        focused = focus.field if focus is not None and focus.row_id == row.id else None
        if row.space:
            lines.append(
                SheetLine(
                    number=i,
                    row_id=row.id,
                    name="",
                    amount="",
                    pay_percent="",
                    to_pay="",
                    paid_percent="",
                    due="",
                    actually_due="",
                    space=True,
                    focused_field=focused,
                )
            )
            continue
        lines.append(
            SheetLine(
                number=i,
                row_id=row.id,
                name=row.name,
                amount=format_money(row.amount, symbol),
                pay_percent=format_percent(row.pay_percent),
                to_pay=format_money(row.to_pay, symbol),
                paid_percent=format_percent(row.paid_percent),
                due=format_money(row.due, symbol),
                actually_due=row.actually_due,
                focused_field=focused,
            )
        )

    totals = sheet_totals(state.rows)
    balances = state.balances.model_dump()
    reconciliation = [
        Reconciliation(
            field=name,
            sheet=format_money(totals[name], symbol),
            balance=format_money(balances[name], symbol),
            difference=format_money(balances[name] - totals[name], symbol),
        )
        for name in ("amount", "to_pay", "due")
    ]
    return SheetView(lines=lines, reconciliation=reconciliation, clean=clean)
