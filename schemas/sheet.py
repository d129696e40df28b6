"""Budget sheet schemas and JSON helpers.

Rows (expenses), the three reconciliation balances, the focus pointer and the
persisted document shape. All models are frozen so document states can be
shared between reducer steps without copying.
"""

from __future__ import annotations

from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T", bound="_JsonMixin")

RowField = Literal["name", "amount", "pay_percent", "paid_percent", "usually_due"]
BalanceField = Literal["amount", "to_pay", "due"]

# Commit-and-tab order for row cells; wraps from the last field to the first.
FOCUS_CYCLE: tuple[str, ...] = ("name", "amount", "pay_percent", "paid_percent", "usually_due")
BALANCE_FIELDS: tuple[str, ...] = ("amount", "to_pay", "due")

DEFAULT_ROW_NAME = "New expense"
PAID_SENTINEL = "-"


class _JsonMixin(BaseModel):
    """Common JSON helpers for schemas.

    Models are frozen and accept both field names and their persisted aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> str:
        """Serialize the model to a JSON string using persisted field names."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls: type[T], data: str) -> T:
        """Deserialize a JSON string into the model type."""
        return cls.model_validate_json(data)


class Expense(_JsonMixin):
    """One line of the budget sheet.

    ``to_pay``, ``due`` and ``actually_due`` are derived from the raw fields by
    ``tools.derive.derive`` and are never edited directly.
    """

    id: str
    name: str = DEFAULT_ROW_NAME
    amount: float = 0.0
    pay_percent: float = Field(default=1.0, alias="payPercent", ge=0.0, le=1.0)
    paid_percent: float = Field(default=0.0, alias="paidPercent", ge=0.0, le=1.0)
    usually_due: str = Field(default="", alias="usuallyDue")
    space: bool = False
    # Derived
    to_pay: float = Field(default=0.0, alias="toPay")
    due: float = 0.0
    actually_due: str = Field(default="", alias="actuallyDue")


class Balances(_JsonMixin):
    """External ledger totals the sheet is reconciled against."""

    amount: float = 0.0
    to_pay: float = Field(default=0.0, alias="toPay")
    due: float = 0.0


class Focus(_JsonMixin):
    """The single cell currently in edit mode."""

    row_id: str
    field: RowField


class BudgetFile(_JsonMixin):
    """Persisted document: ordered expenses plus balances."""

    expenses: list[Expense] = Field(default_factory=list)
    balances: Balances = Field(default_factory=Balances)

    @model_validator(mode="after")
    def check_unique_row_ids(self) -> "BudgetFile":
        seen: set[str] = set()
        for expense in self.expenses:
            if expense.id in seen:
                raise ValueError(f"Duplicate expense id: {expense.id!r}")
            seen.add(expense.id)
        return self
