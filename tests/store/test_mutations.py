"""
Tests for TreeStore mutations.

Tests cover:
- add_item (uniqueness, index maintenance)
- remove_item (subtree cascade, idempotence)
- update_item (field merge, identity, re-parenting)
"""

import pytest

from treestore.core.errors import DuplicateIdError, NotFoundError, TreeStoreError
from treestore.core.models import TreeItem

from .conftest import make_item


def _ids(items):
    return [item.id for item in items]


class TestAddItem:
    """Tests for add_item."""

    def test_adds_item_and_updates_indexes(self, store):
        new_item = make_item(8, 1)
        store.add_item(new_item)

        assert store.get_item(8) is new_item
        assert _ids(store.get_children(1)) == [2, 3, 8]
        assert len(store.get_all()) == 8
        assert store.get_all()[-1] is new_item

    def test_adds_root(self, store):
        store.add_item(make_item(9, None))

        assert _ids(store.get_roots()) == [1, 7, 9]

    def test_creates_children_bucket_on_first_use(self, store):
        store.add_item(make_item(8, 7))

        assert _ids(store.get_children(7)) == [8]

    def test_accepts_mapping(self, store):
        added = store.add_item({"id": "x", "parent": 4, "label": "X", "kind": "note"})

        assert store.get_item("x") is added
        assert added.kind == "note"
        assert _ids(store.get_all_parents("x")) == ["x", 4, 2, 1]

    def test_duplicate_id_raises(self, store):
        with pytest.raises(DuplicateIdError, match="already exists"):
            store.add_item(make_item(1, None))

    def test_duplicate_id_does_not_mutate(self, store):
        original = store.get_item(2)

        with pytest.raises(DuplicateIdError):
            store.add_item(make_item(2, 7))

        assert len(store.get_all()) == 7
        assert store.get_item(2) is original
        assert _ids(store.get_children(7)) == []
        assert _ids(store.get_children(1)) == [2, 3]

    def test_duplicate_id_error_is_value_error(self, store):
        with pytest.raises(ValueError) as exc_info:
            store.add_item(make_item(3, None))

        assert isinstance(exc_info.value, TreeStoreError)
        assert exc_info.value.item_id == 3


class TestRemoveItem:
    """Tests for remove_item."""

    def test_removes_item_and_descendants(self, store):
        store.remove_item(2)

        assert store.get_item(2) is None
        assert store.get_item(4) is None
        assert store.get_item(5) is None
        assert _ids(store.get_all()) == [1, 3, 6, 7]
        assert len(store.get_children(1)) == 1

    def test_returns_removed_items(self, store):
        removed = store.remove_item(2)

        assert _ids(removed)[0] == 2
        assert set(_ids(removed)) == {2, 4, 5}

    def test_removes_exactly_precomputed_subtree(self, store):
        expected = {1, *_ids(store.get_all_children(1))}
        before = set(_ids(store.get_all()))

        store.remove_item(1)

        assert set(_ids(store.get_all())) == before - expected
        assert _ids(store.get_all()) == [7]

    def test_removes_root_leaf(self, store):
        store.remove_item(7)

        assert store.get_item(7) is None
        assert len(store.get_all()) == 6

    def test_clears_children_bucket_of_removed_parent(self, store):
        store.remove_item(2)

        assert store.get_children(2) == []

    def test_unknown_id_is_noop(self, store, items):
        assert store.remove_item(999) == []
        assert store.get_all() == items

    def test_repeated_removal_is_noop(self, store):
        store.remove_item(3)
        snapshot = list(store.get_all())

        assert store.remove_item(3) == []
        assert store.get_all() == snapshot

    def test_keeps_orphans_of_unrelated_ids(self, items):
        from treestore.core.store import TreeStore

        store = TreeStore([*items, make_item(50, 40)])
        store.remove_item(40)

        assert store.get_item(50) is not None


class TestUpdateItem:
    """Tests for update_item."""

    def test_updates_fields(self, store):
        store.update_item(TreeItem(id=2, parent=1, label="Updated Item"))

        assert store.get_item(2).label == "Updated Item"

    def test_preserves_identity(self, store):
        original = store.get_item(2)

        result = store.update_item({"id": 2, "parent": 1, "label": "Renamed"})

        assert result is original
        assert store.get_item(2) is original
        assert original.label == "Renamed"

    def test_merges_extra_fields(self, store):
        store.update_item(TreeItem(id=2, owner="bob"))
        item = store.get_item(2)

        assert item.owner == "bob"
        assert item.label == "Item 2"
        assert item.parent == 1

    def test_omitted_parent_is_kept(self, store):
        store.update_item(TreeItem(id=4, label="Only label"))

        assert store.get_item(4).parent == 2
        assert _ids(store.get_children(2)) == [4, 5]

    def test_unchanged_parent_keeps_bucket(self, store):
        bucket_before = _ids(store.get_children(1))

        store.update_item(TreeItem(id=2, parent=1, label="Same parent"))

        assert _ids(store.get_children(1)) == bucket_before
        assert store.get_children(1)[0].label == "Same parent"

    def test_parent_change_moves_item(self, store):
        # Move 2 from under 1 to under 3
        store.update_item(TreeItem(id=2, parent=3, label="Item 2"))

        assert _ids(store.get_children(1)) == [3]
        assert _ids(store.get_children(3)) == [2, 6]
        assert _ids(store.get_children(2)) == [4, 5]
        assert _ids(store.get_all_parents(4)) == [4, 2, 3, 1]

    def test_parent_change_to_root(self, store):
        store.update_item({"id": 3, "parent": None})

        assert _ids(store.get_children(1)) == [2]
        assert _ids(store.get_roots()) == [1, 3, 7]

    def test_in_place_mutation_then_update(self, store):
        """Re-submitting the stored instance after editing it re-indexes it."""
        item = store.get_item(6)
        item.parent = 7

        store.update_item(item)

        assert _ids(store.get_children(3)) == []
        assert _ids(store.get_children(7)) == [6]

    def test_unknown_id_raises(self, store):
        with pytest.raises(NotFoundError, match="does not exist"):
            store.update_item(make_item(999, None))

    def test_unknown_id_does_not_mutate(self, store, items):
        with pytest.raises(NotFoundError):
            store.update_item(make_item(999, 1))

        assert store.get_all() == items
        assert _ids(store.get_children(1)) == [2, 3]

    def test_not_found_error_is_key_error(self, store):
        with pytest.raises(KeyError) as exc_info:
            store.update_item({"id": "missing"})

        assert str(exc_info.value) == "Item with id 'missing' does not exist"


class TestScenario:
    """End-to-end walk through the reference forest."""

    def test_reference_forest(self, store):
        assert _ids(store.get_children(1)) == [2, 3]

        descendants = store.get_all_children(1)
        assert len(descendants) == 5
        assert set(_ids(descendants)) == {2, 3, 4, 5, 6}

        assert _ids(store.get_all_parents(4)) == [4, 2, 1]

        store.remove_item(2)
        assert _ids(store.get_all()) == [1, 3, 6, 7]
        assert len(store.get_children(1)) == 1
