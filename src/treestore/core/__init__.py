"""
Core tree store.

Components:
- TreeItem: A flat record with ``id``, ``parent`` and free-form extras
- TreeStore: Forest of records indexed by id and by parent id
- Errors: DuplicateIdError, NotFoundError, CycleError

Example:
    from treestore.core import TreeStore

    store = TreeStore(items)
    store.get_all_children(1)
"""

from treestore.core.errors import CycleError, DuplicateIdError, NotFoundError, TreeStoreError
from treestore.core.models import ItemId, TreeItem, coerce_item
from treestore.core.store import TreeStore

__all__ = [
    "ItemId",
    "TreeItem",
    "coerce_item",
    "TreeStore",
    "TreeStoreError",
    "DuplicateIdError",
    "NotFoundError",
    "CycleError",
]
