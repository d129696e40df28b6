"""JSON document persistence.

Reads and writes the budget file: ``{"expenses": [...], "balances": {...}}``.
Writes are atomic (sibling temp file + ``os.replace``). Derived row fields are
written for human readers but ignored on load, where they are recomputed.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import ValidationError

from schemas.sheet import BudgetFile
from tools.derive import derive


class DocumentFormatError(ValueError):
    """The file is not a budget document."""


def _atomic_write_text(path: Path, data: str) -> None:
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.parent.mkdir(parents=True, exist_ok=True)
    tmp.write_text(data, encoding="utf-8")
    os.replace(tmp, path)


def parse_document(text: str) -> BudgetFile:
    """Validate document JSON and recompute derived row fields."""
    try:
        doc = BudgetFile.model_validate_json(text)
    except ValidationError as exc:
        raise DocumentFormatError(str(exc)) from exc
    return BudgetFile(expenses=[derive(e) for e in doc.expenses], balances=doc.balances)


def read_document(path: Path) -> BudgetFile:
    """Load and validate a budget file.

    Raises:
        DocumentFormatError: The file is not UTF-8 JSON of the expected shape.
        OSError: The file could not be read.
    """
    data = Path(path).read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentFormatError(f"Not UTF-8 text: {exc}") from exc
    return parse_document(text)


def write_document(path: Path, doc: BudgetFile) -> Path:
    """Persist ``doc`` atomically; returns the path written."""
    payload = doc.model_dump(mode="json", by_alias=True)
    _atomic_write_text(Path(path), json.dumps(payload, indent=2))
    return Path(path)


__all__ = [
    "DocumentFormatError",
    "parse_document",
    "read_document",
    "write_document",
]
