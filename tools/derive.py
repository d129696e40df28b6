"""Derivation of computed row fields.

Pure functions only: the reducer calls ``derive`` after every change to a
row's raw fields so derived values are never stale.
"""

from __future__ import annotations

from collections.abc import Iterable

from schemas.sheet import PAID_SENTINEL, Expense


def derive(row: Expense) -> Expense:
    """Return ``row`` with ``to_pay``, ``due`` and ``actually_due`` recomputed.

    Spacer rows carry no financial meaning; their derived fields are zeroed.
    """
    if row.space:
        return row.model_copy(update={"to_pay": 0.0, "due": 0.0, "actually_due": ""})
    to_pay = row.amount * row.pay_percent
    due = to_pay * (1 - row.paid_percent)
    actually_due = PAID_SENTINEL if row.paid_percent == 1 else row.usually_due
    return row.model_copy(update={"to_pay": to_pay, "due": due, "actually_due": actually_due})


def sheet_totals(rows: Iterable[Expense]) -> dict[str, float]:
    """Sum ``amount``, ``to_pay`` and ``due`` over non-spacer rows."""
    totals = {"amount": 0.0, "to_pay": 0.0, "due": 0.0}
    for row in rows:
        if row.space:
            continue
        totals["amount"] += row.amount
        totals["to_pay"] += row.to_pay
        totals["due"] += row.due
    return totals
