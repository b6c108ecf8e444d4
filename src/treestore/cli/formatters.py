"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from treestore.core.models import ItemId, TreeItem
from treestore.core.store import TreeStore


def format_item(item: TreeItem) -> str:
    """Format a record as ``label [id]``."""
    return item.describe()


def format_extra(item: TreeItem) -> str:
    extra = item.extra_fields
    if not extra:
        return ""
    return ", ".join(f"{key}={value}" for key, value in extra.items())


def data_path(store: TreeStore, item_id: ItemId) -> List[str]:
    """Labels from the topmost reachable ancestor down to the record itself.

    This is the path a hierarchical grid uses to place a flat record.
    """
    return [item.label or str(item.id) for item in reversed(store.get_all_parents(item_id))]


def build_items_table(title: str, items: Iterable[TreeItem]) -> Table:
    table = Table(title=title)
    table.add_column("Id")
    table.add_column("Parent")
    table.add_column("Label")
    table.add_column("Extra", style="dim")

    for item in items:
        parent = "-" if item.parent is None else str(item.parent)
        table.add_row(escape(str(item.id)), escape(parent), escape(item.label), escape(format_extra(item)))

    return table


def build_forest_tree(store: TreeStore, root_id: Optional[ItemId] = None) -> Tree:
    """Render the forest (or the subtree under ``root_id``) as a rich Tree.

    Orphans are shown as extra top-level branches so no record is hidden.
    """
    if root_id is not None:
        root_item = store.get_item(root_id)
        if root_item is None:
            return Tree("[dim]<missing>[/dim]")
        tree = Tree(f"[bold]{escape(format_item(root_item))}[/bold]")
        _add_children(tree, store, root_item.id)
        return tree

    tree = Tree(f"[bold]Forest[/bold] ({len(store)} items)")
    for top in store.get_roots():
        branch = tree.add(escape(format_item(top)))
        _add_children(branch, store, top.id)
    for orphan in store.get_orphans():
        branch = tree.add(f"{escape(format_item(orphan))} [yellow](orphan of {escape(repr(orphan.parent))})[/yellow]")
        _add_children(branch, store, orphan.id)
    return tree


def _add_children(branch: Tree, store: TreeStore, parent_id: ItemId) -> None:
    # Explicit stack keeps deep forests clear of the recursion limit.
    stack = [(branch, parent_id)]
    seen = {parent_id}
    while stack:
        node, current_id = stack.pop()
        for child in store.get_children(current_id):
            if child.id in seen:
                node.add(f"[red]{escape(format_item(child))} (cycle)[/red]")
                continue
            seen.add(child.id)
            stack.append((node.add(escape(format_item(child))), child.id))


def build_statistics_table(stats: Dict[str, Any]) -> Table:
    table = Table(title="Forest Statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    for key, value in stats.items():
        table.add_row(key.replace("_", " "), str(value))

    return table


__all__ = [
    "format_item",
    "format_extra",
    "data_path",
    "build_items_table",
    "build_forest_tree",
    "build_statistics_table",
]
