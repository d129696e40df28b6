"""Host bridge.

Connects the reducer to the shell that hosts it. The host is an injected
collaborator with two methods, ``emit(event)`` and ``on_event(handler)``, so
the editor runs without any shell present (tests use an in-memory host).

Inbound host events become a single reducer input each. After every
transition the bridge reports a ``DocumentSnapshot`` when rows or balances
changed and a ``CleanStateChanged`` when cleanliness flipped.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

import structlog

from core.document import DocumentState, default_row, new_document
from core.reducer import reduce
from core.save_point import is_clean
from schemas import commands as cmd
from schemas import events as ev

logger = structlog.get_logger(__name__)

EventHandler = Callable[[ev.HostEvent], None]


class Host(Protocol):
    def emit(self, event: ev.CoreEvent) -> None:  # pragma: no cover - Protocol definition only
        ...

    def on_event(self, handler: EventHandler) -> None:  # pragma: no cover - Protocol definition only
        ...


def to_input(event: ev.HostEvent) -> cmd.Input:
    """Translate a host event into the reducer input it stands for."""
    if isinstance(event, ev.DocumentOpened):
        return cmd.ReplaceDocument(expenses=event.expenses, balances=event.balances)
    if isinstance(event, ev.NewDocumentRequested):
        return cmd.ReplaceDocument(expenses=[default_row(cmd.new_id())])
    if isinstance(event, ev.SaveAcknowledged):
        return cmd.MarkSaved()
    if isinstance(event, ev.UndoRequested):
        return cmd.Undo()
    if isinstance(event, ev.RedoRequested):
        return cmd.Redo()
    raise TypeError(f"Unsupported host event: {type(event).__name__}")


class HostBridge:
    """Owns the current document state and keeps the host informed.

    Args:
        host: Collaborator receiving snapshots and delivering host events.
        state: Initial document; defaults to a new one-row sheet.
    """

    def __init__(self, host: Host, state: Optional[DocumentState] = None) -> None:
        self.host = host
        self.state = state or new_document()
        self._clean = is_clean(self.state)
        host.on_event(self.handle_host_event)
        self._emit_snapshot()
        self.host.emit(ev.CleanStateChanged(clean=self._clean))

    @property
    def clean(self) -> bool:
        return self._clean

    def handle_host_event(self, event: ev.HostEvent) -> None:
        logger.debug("host_event", type=event.type)
        self.dispatch(to_input(event))

    def dispatch(self, event: cmd.Input) -> DocumentState:
        """Run one input through the reducer and report what changed."""
        before = self.state
        self.state = reduce(before, event)
        logger.debug(
            "dispatched",
            type=event.type,
            cursor=self.state.log.cursor,
            log_len=len(self.state.log),
        )
        if (
            isinstance(event, cmd.ReplaceDocument)
            or self.state.rows != before.rows
            or self.state.balances != before.balances
        ):
            self._emit_snapshot()
        clean = is_clean(self.state)
        if clean != self._clean:
            self._clean = clean
            logger.info("clean_state_changed", clean=clean)
            self.host.emit(ev.CleanStateChanged(clean=clean))
        return self.state

    def _emit_snapshot(self) -> None:
        self.host.emit(
            ev.DocumentSnapshot(expenses=list(self.state.rows), balances=self.state.balances)
        )
