from __future__ import annotations

"""Record-file loader errors."""

import os
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from treestore.core.errors import TreeStoreError
from treestore.core.models import ItemId


class LoaderError(RuntimeError):
    """A record file could not be read, validated or indexed.

    Carries the file path and, when the failure can be pinned on a single
    record, that record's id.
    """

    def __init__(
        self,
        file_path: str,
        message: str,
        *,
        cause: Exception | None = None,
        record_id: Optional[ItemId] = None,
    ):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        self.record_id = record_id
        super().__init__(self._build_message())

    @classmethod
    def from_validation(cls, file_path: str, exc: ValidationError, data: Any) -> "LoaderError":
        """Wrap a schema failure, naming the first offending record when it has an id."""
        return cls(file_path, "Invalid record definition", cause=exc, record_id=_failing_record_id(exc, data))

    @classmethod
    def from_store_error(cls, file_path: str, exc: TreeStoreError) -> "LoaderError":
        """Wrap a store rejection (e.g. a duplicate id) raised while indexing loaded records."""
        return cls(file_path, "Duplicate record id", cause=exc, record_id=exc.item_id)

    def _build_message(self) -> str:
        where = self._relative_path(self.file_path)
        if self.record_id is not None:
            where = f"{where}, record {self.record_id!r}"
        base = f"{self.message} ({where})"
        if isinstance(self.cause, ValidationError):
            return f"{base}: {_summarize(self.cause.errors())}"
        if self.cause:
            return f"{base}: {self.cause}"
        return base

    @staticmethod
    def _relative_path(path: str) -> str:
        try:
            return os.path.relpath(path)
        except ValueError:  # pragma: no cover - different drive on Windows
            return path

    def __str__(self) -> str:
        return self._build_message()


def _failing_record_id(exc: ValidationError, data: Any) -> Optional[ItemId]:
    # Errors are located as ("items", <index>, <field>, ...) once a bare list is wrapped.
    records = data.get("items") if isinstance(data, dict) else data
    if not isinstance(records, list):
        return None
    for err in exc.errors():
        loc = err.get("loc", ())
        if len(loc) >= 2 and loc[0] == "items" and isinstance(loc[1], int) and loc[1] < len(records):
            record = records[loc[1]]
            if isinstance(record, dict) and isinstance(record.get("id"), (str, int)):
                return record["id"]
    return None


def _summarize(errors: Iterable[dict], limit: int = 3) -> str:
    error_list = list(errors)
    snippets = []
    for err in error_list[:limit]:
        loc = ".".join(str(entry) for entry in err.get("loc", [])) or "<root>"
        snippets.append(f"{loc}: {err.get('msg') or err.get('type') or 'validation error'}")
    remaining = len(error_list) - len(snippets)
    if remaining > 0:
        snippets.append(f"... ({remaining} more)")
    return "; ".join(snippets)
