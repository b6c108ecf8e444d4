"""treestore: an in-memory forest of records with O(1) structural lookups."""

__version__ = "0.1.0"

from treestore.core import (
    CycleError,
    DuplicateIdError,
    ItemId,
    NotFoundError,
    TreeItem,
    TreeStore,
    TreeStoreError,
)

__all__ = [
    "ItemId",
    "TreeItem",
    "TreeStore",
    "TreeStoreError",
    "DuplicateIdError",
    "NotFoundError",
    "CycleError",
]
