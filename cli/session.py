"""Scriptable editing session.

Maps textual user intents onto reducer inputs, the way the sheet's widgets
would: typed cell text is parsed first and only a successfully parsed value
becomes an ``Edit`` command. Undo, redo and save go through the host, like
the shell's Edit and File menus.

Accepted commands (row numbers are 1-based):
- "add" / "space"
- "edit <row> <field> <text...>"
- "tab <row> <field> <text...>"   (commit and move to the next cell)
- "balance <field> <text>"
- "focus <row> <field>" / "cancel"
- "undo" / "redo" / "save"
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from cli.host import FileHost
from core.bridge import HostBridge
from schemas import commands as cmd
from schemas.sheet import BALANCE_FIELDS, FOCUS_CYCLE, Focus
from tools.cell_input import CellInputError, parse_cell, parse_currency

logger = structlog.get_logger(__name__)

_FIELD_ALIASES = {
    "payPercent": "pay_percent",
    "paidPercent": "paid_percent",
    "usuallyDue": "usually_due",
    "toPay": "to_pay",
}


class SessionError(ValueError):
    """A session command could not be carried out."""


@dataclass
class SessionResult:
    applied: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _field_name(raw: str, allowed: tuple[str, ...]) -> str:
    name = _FIELD_ALIASES.get(raw, raw)
    if name not in allowed:
        raise SessionError(f"unknown field {raw!r}")
    return name


def _row_id(bridge: HostBridge, raw: str) -> str:
    try:
        number = int(raw)
    except ValueError:
        raise SessionError(f"bad row number {raw!r}") from None
    rows = bridge.state.rows
    if not 1 <= number <= len(rows):
        raise SessionError(f"no row {number}")
    row = rows[number - 1]
    if row.space:
        raise SessionError(f"row {number} is a spacer")
    return row.id


def _cell_edit(bridge: HostBridge, raw: str, *, advance: bool) -> cmd.Edit:
    # Keep the cell text exactly as typed after "<op> <row> <field> ".
    args = raw.strip().split(maxsplit=3)[1:]
    if len(args) < 2:
        raise SessionError("expected <row> <field> [text]")
    row_id = _row_id(bridge, args[0])
    name = _field_name(args[1], FOCUS_CYCLE)
    text = args[2] if len(args) > 2 else ""
    value = parse_cell(name, text)
    row = bridge.state.rows[bridge.state.row_index(row_id)]
    return cmd.Edit(
        target=Focus(row_id=row_id, field=name),
        old_value=getattr(row, name),
        new_value=value,
        advance_focus=advance,
    )


def _run_one(bridge: HostBridge, host: FileHost, raw: str) -> None:
    parts = raw.strip().split()
    op, args = parts[0].lower(), parts[1:]
    if op == "add":
        bridge.dispatch(cmd.AddRow())
    elif op == "space":
        bridge.dispatch(cmd.AddSpace())
    elif op in ("edit", "tab"):
        bridge.dispatch(_cell_edit(bridge, raw, advance=op == "tab"))
    elif op == "balance":
        if len(args) < 1:
            raise SessionError("expected <field> [amount]")
        name = _field_name(args[0], BALANCE_FIELDS)
        value = parse_currency(" ".join(args[1:]))
        old = getattr(bridge.state.balances, name)
        bridge.dispatch(cmd.EditBalance(field=name, old_value=old, new_value=value))
    elif op == "focus":
        if len(args) != 2:
            raise SessionError("expected <row> <field>")
        row_id = _row_id(bridge, args[0])
        bridge.dispatch(cmd.SetFocus(row_id=row_id, field=_field_name(args[1], FOCUS_CYCLE)))
    elif op == "cancel":
        bridge.dispatch(cmd.CancelFocus())
    elif op == "undo":
        host.undo()
    elif op == "redo":
        host.redo()
    elif op == "save":
        host.save()
    else:
        raise SessionError(f"unknown command {op!r}")


def run_session(bridge: HostBridge, host: FileHost, commands: Iterable[str]) -> SessionResult:
    """Run scripted commands against ``bridge``.

    Rejected commands are recorded in ``SessionResult.errors`` and leave the
    document unchanged; the session carries on with the next command.
    """
    result = SessionResult()
    for raw in commands:
        if not raw.strip():
            continue
        try:
            _run_one(bridge, host, raw)
        except (SessionError, CellInputError) as exc:
            logger.warning("session_command_rejected", command=raw, error=str(exc))
            result.errors.append(f"{raw}: {exc}")
            continue
        result.applied.append(raw)
    return result
