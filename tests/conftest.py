"""Pytest configuration and shared fixtures.

Ensures the repository root is importable (so tests can import packages like
`cli`, `core`, `tools` without an editable install), and provides an
in-memory host plus a helper for writing sheet files.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import structlog

# Make repo root importable for tests (avoid requiring `pip install -e .`).
_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


class RecordingHost:
    """Host double: records emitted events and lets tests send host events."""

    def __init__(self) -> None:
        self.emitted: list = []
        self.handlers: list = []

    def emit(self, event) -> None:
        self.emitted.append(event)

    def on_event(self, handler) -> None:
        self.handlers.append(handler)

    def send(self, event) -> None:
        for handler in self.handlers:
            handler(event)

    def of_type(self, type_name: str) -> list:
        return [e for e in self.emitted if e.type == type_name]


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def recording_host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def make_sheet(tmp_path: Path):
    """Factory writing a sheet JSON file under ``tmp_path``.

    Example:
        make_sheet([{"id": "r1", "name": "Rent", "amount": 1000}])
    """

    def _make(expenses: list[dict], balances: dict | None = None, *, name: str = "sheet.json") -> Path:
        p = tmp_path / name
        p.write_text(json.dumps({"expenses": expenses, "balances": balances or {}}), encoding="utf-8")
        return p

    return _make
