"""Bulk-load document shape and load report.

A bulk document is a two-level mapping: item name -> {attribute key:
attribute value}. Non-string values are rejected rather than coerced;
callers normalize before loading.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, StrictStr, TypeAdapter, ValidationError

from attrstore.domain.errors import InvalidDocument

BulkDocument = dict[str, dict[str, str]]

_DOCUMENT_ADAPTER: TypeAdapter[dict[str, dict[str, str]]] = TypeAdapter(
    dict[StrictStr, dict[StrictStr, StrictStr]]
)


def validate_document(data: Any) -> BulkDocument:
    """Check that *data* is a mapping of item -> {key: value} strings.

    Raises:
        InvalidDocument: On any shape violation. No writes have happened yet.
    """
    try:
        return _DOCUMENT_ADAPTER.validate_python(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = "/".join(str(part) for part in first["loc"])
        msg = f"Invalid bulk document at '{location}': {first['msg']}"
        raise InvalidDocument(msg, detail={"errors": exc.error_count()}) from exc


def parse_document(text: str) -> BulkDocument:
    """Parse and validate a JSON bulk document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidDocument(f"Bulk document is not valid JSON: {exc}") from exc
    return validate_document(data)


def load_document(path: Path) -> BulkDocument:
    """Read a JSON bulk document from *path*."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidDocument(f"Cannot read bulk document {path}: {exc}") from exc
    return parse_document(raw)


class LoadReport(BaseModel):
    """Outcome of a fully successful bulk load."""

    model_config = {"frozen": True}

    domain: str
    applied: list[tuple[str, str]] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.applied)

    @property
    def items(self) -> list[str]:
        """Distinct item names touched, in load order."""
        return list(dict.fromkeys(item for item, _ in self.applied))
