"""Tree store exceptions."""

from __future__ import annotations

from typing import Any


class TreeStoreError(Exception):
    """Base exception for tree store errors."""

    def __init__(self, message: str, *, item_id: Any = None):
        self.message = message
        self.item_id = item_id
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class DuplicateIdError(TreeStoreError, ValueError):
    """Raised when a record is added with an id already present in the store."""

    def __init__(self, item_id: Any):
        super().__init__(f"Item with id {item_id!r} already exists", item_id=item_id)


class NotFoundError(TreeStoreError, KeyError):
    """Raised when updating a record whose id is not in the store."""

    def __init__(self, item_id: Any):
        super().__init__(f"Item with id {item_id!r} does not exist", item_id=item_id)


class CycleError(TreeStoreError):
    """Raised when a traversal runs into a cyclic parent chain."""

    def __init__(self, item_id: Any):
        super().__init__(f"Cyclic parent chain detected at id {item_id!r}", item_id=item_id)


__all__ = ["TreeStoreError", "DuplicateIdError", "NotFoundError", "CycleError"]
