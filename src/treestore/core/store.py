"""
Indexed tree store.

The store keeps a forest of flat records (each with an ``id`` and an optional
``parent`` id) and answers structural queries without materializing a node
graph. Three views of the same records are kept in sync:

- ``_items``: every record, in insertion order
- ``_id_map``: id -> record, for O(1) point lookup
- ``_children_map``: parent id -> ordered list of direct children

Ancestor and descendant queries walk the two maps. Any structural change
(removal, re-parenting) re-derives the children map from ``_items``.

Example:
    store = TreeStore([
        {"id": 1, "parent": None, "label": "root"},
        {"id": 2, "parent": 1, "label": "child"},
    ])
    store.get_children(1)        # [TreeItem(id=2, ...)]
    store.get_all_parents(2)     # [TreeItem(id=2, ...), TreeItem(id=1, ...)]
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from treestore.core.errors import CycleError, DuplicateIdError, NotFoundError, TreeStoreError
from treestore.core.models import ItemId, TreeItem, coerce_item
from treestore.utils.logging import log_calls

logger = logging.getLogger(__name__)

ItemLike = Union[TreeItem, Mapping[str, Any]]


class TreeStore:
    """In-memory forest of records indexed by id and by parent id."""

    def __init__(self, items: Optional[Iterable[ItemLike]] = None):
        """
        Build the store and its indexes in a single pass.

        Args:
            items: Records (TreeItem instances or mappings). The sequence is
                copied; TreeItem instances are shared by reference.

        Raises:
            DuplicateIdError: If two records share an id.
        """
        self._items: List[TreeItem] = [coerce_item(item) for item in items or []]
        self._id_map: Dict[ItemId, TreeItem] = {}
        self._children_map: Dict[ItemId, List[TreeItem]] = {}

        for item in self._items:
            if item.id in self._id_map:
                raise DuplicateIdError(item.id)
            self._id_map[item.id] = item
            self._index_child(item)

    def __repr__(self) -> str:
        return f"TreeStore({len(self._items)} items)"

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TreeItem]:
        return iter(self._items)

    def __contains__(self, item_id: object) -> bool:
        try:
            return item_id in self._id_map
        except TypeError:
            return False

    # =========================================================================
    # Index maintenance
    # =========================================================================

    def _index_child(self, item: TreeItem) -> None:
        if item.parent is not None:
            self._children_map.setdefault(item.parent, []).append(item)

    def _rebuild_children_index(self) -> None:
        """Re-derive the parent -> children map from the ordered record list."""
        self._children_map.clear()
        for item in self._items:
            self._index_child(item)
        logger.debug("Rebuilt children index: %d parent(s)", len(self._children_map))

    # =========================================================================
    # Queries
    # =========================================================================

    def get_all(self) -> List[TreeItem]:
        """Get every record in insertion order (the store's own list)."""
        return self._items

    def get_item(self, item_id: ItemId) -> Optional[TreeItem]:
        """Get a record by id, or None if it is not indexed."""
        return self._id_map.get(item_id)

    def get_children(self, item_id: ItemId) -> List[TreeItem]:
        """Get the direct children of a record; empty for leaves and unknown ids."""
        return list(self._children_map.get(item_id, ()))

    def get_all_children(self, item_id: ItemId) -> List[TreeItem]:
        """
        Get all strict descendants of a record, depth-first.

        The frontier is a stack, so every record is listed after its parent
        but siblings of an earlier subtree may follow deeper descendants of a
        later one.

        Raises:
            CycleError: If the subtree loops back onto itself.
        """
        result: List[TreeItem] = []
        seen = {item_id}
        stack: List[ItemId] = [item_id]

        while stack:
            current_id = stack.pop()
            for child in self._children_map.get(current_id, ()):
                if child.id in seen:
                    raise CycleError(child.id)
                seen.add(child.id)
                result.append(child)
                stack.append(child.id)

        return result

    def get_all_parents(self, item_id: ItemId) -> List[TreeItem]:
        """
        Get the ancestor path of a record, starting with the record itself.

        Traversal stops at a root or at a parent id that is not in the store.
        An unknown starting id yields an empty list.

        Raises:
            CycleError: If the parent chain revisits a record.
        """
        path: List[TreeItem] = []
        seen: set = set()
        current_id: Optional[ItemId] = item_id

        while current_id is not None and current_id in self._id_map:
            if current_id in seen:
                raise CycleError(current_id)
            seen.add(current_id)
            item = self._id_map[current_id]
            path.append(item)
            current_id = item.parent

        return path

    def get_roots(self) -> List[TreeItem]:
        """Get records without a parent."""
        return [item for item in self._items if item.parent is None]

    def get_orphans(self) -> List[TreeItem]:
        """Get records whose parent id is not present in the store."""
        return [item for item in self._items if item.parent is not None and item.parent not in self._id_map]

    def get_leaf_items(self) -> List[TreeItem]:
        """Get records with no children."""
        return [item for item in self._items if not self._children_map.get(item.id)]

    def get_depth(self, item_id: ItemId) -> int:
        """Length of the ancestor path (1 for a root, 0 for an unknown id)."""
        return len(self.get_all_parents(item_id))

    def find_cycles(self) -> List[List[ItemId]]:
        """Find every cyclic parent chain, each reported once as a list of ids."""
        cycles: List[List[ItemId]] = []
        # 1 = on the current walk, 2 = fully explored
        state: Dict[ItemId, int] = {}

        for item in self._items:
            if item.id in state:
                continue
            walk: List[ItemId] = []
            current_id: Optional[ItemId] = item.id
            while current_id is not None and current_id in self._id_map and current_id not in state:
                state[current_id] = 1
                walk.append(current_id)
                current_id = self._id_map[current_id].parent
            if current_id is not None and state.get(current_id) == 1:
                cycles.append(walk[walk.index(current_id) :])
            for visited in walk:
                state[visited] = 2

        return cycles

    def get_statistics(self) -> Dict[str, Any]:
        """Get summary statistics about the forest."""
        depths = []
        for item in self._items:
            try:
                depths.append(self.get_depth(item.id))
            except CycleError:
                continue

        return {
            "total_items": len(self._items),
            "roots": len(self.get_roots()),
            "orphans": len(self.get_orphans()),
            "leaves": len(self.get_leaf_items()),
            "max_depth": max(depths) if depths else 0,
            "cycles": len(self.find_cycles()),
        }

    # =========================================================================
    # Mutations
    # =========================================================================

    @log_calls(expected=(TreeStoreError,))
    def add_item(self, item: ItemLike) -> TreeItem:
        """
        Insert a new record.

        Raises:
            DuplicateIdError: If the id is already present. Nothing is changed.
        """
        item = coerce_item(item)
        if item.id in self._id_map:
            raise DuplicateIdError(item.id)

        self._items.append(item)
        self._id_map[item.id] = item
        self._index_child(item)
        return item

    @log_calls(expected=(TreeStoreError,))
    def remove_item(self, item_id: ItemId) -> List[TreeItem]:
        """
        Remove a record together with its whole subtree.

        Unknown ids are ignored.

        Returns:
            The removed records, starting with the one named by ``item_id``.
        """
        item = self._id_map.get(item_id)
        if item is None:
            return []

        removed = [item, *self.get_all_children(item_id)]
        removed_ids = {entry.id for entry in removed}

        self._items = [entry for entry in self._items if entry.id not in removed_ids]
        for rid in removed_ids:
            del self._id_map[rid]
        self._rebuild_children_index()

        logger.debug("Removed %d item(s) under %r", len(removed), item_id)
        return removed

    @log_calls(expected=(TreeStoreError,))
    def update_item(self, item: ItemLike) -> TreeItem:
        """
        Merge the supplied fields into the stored record with the same id.

        The stored instance is kept, so outside references to it stay valid.
        Only fields the caller actually provided are overwritten. The children
        index is re-derived only when ``parent`` changes.

        Raises:
            NotFoundError: If no record has this id. Nothing is changed.
        """
        item = coerce_item(item)
        existing = self._id_map.get(item.id)
        if existing is None:
            raise NotFoundError(item.id)

        if existing is item:
            # Mutated in place by the caller; the previous parent is unknown.
            self._rebuild_children_index()
            return existing

        updates = item.supplied_fields()
        parent_changed = "parent" in updates and updates["parent"] != existing.parent

        for name, value in updates.items():
            setattr(existing, name, value)
        self._id_map[existing.id] = existing

        if parent_changed:
            self._rebuild_children_index()
        return existing


__all__ = ["TreeStore", "ItemLike"]
