"""billsheet CLI entrypoint.

Commands:
- new: write a fresh sheet with one default row
- show: render a sheet and its reconciliation against the balances
- edit: open a sheet, run scripted edit commands, save and render

The CLI is a thin host shell: documents are edited only through the host
bridge and saved from the snapshots it reports.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cli.host import FileHost
from cli.session import run_session
from core.bridge import HostBridge
from core.log import configure_logging
from core.settings import get_settings
from projections.sheet_view import SheetView, build_view
from storage.document_file import DocumentFormatError

app = typer.Typer(add_completion=False, help="billsheet: personal budget sheet editor")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_json)


def render_view(view: SheetView, *, title: str) -> None:
    state = "saved" if view.clean else "unsaved changes"
    table = Table(title=f"{title} ({state})")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Amount", justify="right")
    table.add_column("Pay %", justify="right")
    table.add_column("To pay", justify="right")
    table.add_column("Paid %", justify="right")
    table.add_column("Due", justify="right")
    table.add_column("Due date")
    for line in view.lines:
        if line.space:
            table.add_row("", "", "", "", "", "", "", "")
            continue
        cells = {
            "name": escape(line.name),
            "amount": line.amount,
            "pay_percent": line.pay_percent,
            "paid_percent": line.paid_percent,
            "usually_due": escape(line.actually_due),
        }
        if line.focused_field:
            cells[line.focused_field] = f"[reverse]{cells[line.focused_field]}[/reverse]"
        table.add_row(
            str(line.number),
            cells["name"],
            cells["amount"],
            cells["pay_percent"],
            line.to_pay,
            cells["paid_percent"],
            line.due,
            cells["usually_due"],
        )
    console.print(table)

    recon = Table(title="Reconciliation")
    recon.add_column("Total")
    recon.add_column("Sheet", justify="right")
    recon.add_column("Balance", justify="right")
    recon.add_column("Difference", justify="right")
    for item in view.reconciliation:
        recon.add_row(item.field, item.sheet, item.balance, item.difference)
    console.print(recon)


def _open(path: Path) -> tuple[FileHost, HostBridge]:
    host = FileHost()
    bridge = HostBridge(host)
    try:
        host.open(path)
    except DocumentFormatError as exc:
        console.print(f"[red]Not a budget sheet:[/red] {path}\n{escape(str(exc))}")
        raise typer.Exit(code=1)
    return host, bridge


@app.command()
def new(
    path: Path = typer.Argument(..., help="File to create"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Create a new sheet with a single default row."""
    if path.exists() and not force:
        console.print(f"[yellow]Refusing to overwrite {path} without --force.[/yellow]")
        raise typer.Exit(code=2)
    host = FileHost()
    HostBridge(host)
    written = host.save(path)
    console.print(f"Wrote new sheet to {written}")


@app.command()
def show(
    path: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True),
) -> None:
    """Render a sheet."""
    _host, bridge = _open(path)
    symbol = get_settings().currency_symbol
    render_view(build_view(bridge.state, clean=bridge.clean, symbol=symbol), title=path.name)


@app.command()
def edit(
    path: Path = typer.Argument(..., exists=True, readable=True, resolve_path=True),
    commands: Optional[List[str]] = typer.Option(
        None, "--command", "-c", help="Session command, e.g. 'edit 1 amount 120'"
    ),
    save: bool = typer.Option(True, "--save/--no-save", help="Save when the sheet changed"),
) -> None:
    """Apply scripted edits to a sheet."""
    host, bridge = _open(path)
    result = run_session(bridge, host, commands or [])
    for err in result.errors:
        console.print(f"[red]Rejected:[/red] {escape(err)}")
    if save and not bridge.clean:
        host.save()
    symbol = get_settings().currency_symbol
    render_view(build_view(bridge.state, clean=bridge.clean, symbol=symbol), title=path.name)
    if result.errors:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
