"""
Shared fixtures for tree store tests.
"""

from typing import List

import pytest

from treestore.core.models import TreeItem
from treestore.core.store import TreeStore


def make_item(item_id, parent, label=None, **extra) -> TreeItem:
    """Build a record with a default label derived from the id."""
    return TreeItem(id=item_id, parent=parent, label=label or f"Item {item_id}", **extra)


@pytest.fixture
def items() -> List[TreeItem]:
    """Two roots: 1 with a two-level subtree, 7 on its own."""
    return [
        make_item(1, None),
        make_item(2, 1),
        make_item(3, 1),
        make_item(4, 2),
        make_item(5, 2),
        make_item(6, 3),
        make_item(7, None),
    ]


@pytest.fixture
def store(items) -> TreeStore:
    return TreeStore(items)
