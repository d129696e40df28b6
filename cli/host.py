"""File-backed host shell.

Plays the part of the desktop window for one document: it owns the file path,
keeps the latest snapshot the bridge reported, writes it on save and tells the
bridge when a save, open or new happened. Destructive actions on a dirty
document require ``force``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import structlog

from core.bridge import EventHandler
from schemas import events as ev
from schemas.sheet import BudgetFile
from storage.document_file import read_document, write_document

logger = structlog.get_logger(__name__)


class UnsavedChangesError(RuntimeError):
    """A dirty document would be discarded."""


class FileHost:
    """In-process host implementing ``emit`` / ``on_event``."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self.snapshot: Optional[ev.DocumentSnapshot] = None
        self.clean = True
        self._handlers: List[EventHandler] = []

    # Host protocol

    def emit(self, event: ev.CoreEvent) -> None:
        if isinstance(event, ev.DocumentSnapshot):
            self.snapshot = event
        elif isinstance(event, ev.CleanStateChanged):
            self.clean = event.clean

    def on_event(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def send(self, event: ev.HostEvent) -> None:
        for handler in list(self._handlers):
            handler(event)

    # File menu

    def _guard(self, force: bool) -> None:
        if not self.clean and not force:
            raise UnsavedChangesError("Document has unsaved changes")

    def new(self, *, force: bool = False) -> None:
        self._guard(force)
        self.path = None
        self.send(ev.NewDocumentRequested())

    def open(self, path: Path, *, force: bool = False) -> None:
        self._guard(force)
        doc = read_document(path)
        self.path = Path(path)
        logger.info("document_opened", path=str(self.path), rows=len(doc.expenses))
        self.send(ev.DocumentOpened(expenses=doc.expenses, balances=doc.balances))

    def save(self, path: Optional[Path] = None) -> Path:
        """Write the latest snapshot; acknowledges the save on success only."""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No file to save to; pass a path")
        if self.snapshot is None:
            raise RuntimeError("No document snapshot received")
        write_document(
            target,
            BudgetFile(expenses=self.snapshot.expenses, balances=self.snapshot.balances),
        )
        self.path = target
        logger.info("document_saved", path=str(target))
        self.send(ev.SaveAcknowledged())
        return target

    def undo(self) -> None:
        self.send(ev.UndoRequested())

    def redo(self) -> None:
        self.send(ev.RedoRequested())
