"""
Record model for the indexed tree store.

A record is a flat entity carrying its own ``id`` and the ``id`` of its
parent. Any extra fields are kept untouched on the instance so callers can
attach whatever payload their presentation layer needs.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

ItemId = Union[str, int]


class TreeItem(BaseModel):
    """
    A single record in the forest.

    The store never interprets fields other than ``id`` and ``parent``;
    ``label`` is carried for display and extras are preserved as given.
    """

    model_config = ConfigDict(extra="allow")

    id: ItemId
    parent: Optional[ItemId] = None
    label: str = ""

    @property
    def is_root(self) -> bool:
        """Check if this record has no parent."""
        return self.parent is None

    @property
    def extra_fields(self) -> Dict[str, Any]:
        """Fields that are not part of the declared record shape."""
        return dict(self.model_extra or {})

    def supplied_fields(self) -> Dict[str, Any]:
        """Fields the caller explicitly provided, extras included."""
        fields = {name: getattr(self, name) for name in self.model_fields_set if name in type(self).model_fields}
        fields.update(self.extra_fields)
        return fields

    def describe(self) -> str:
        """Human-readable description of this record."""
        label = self.label or str(self.id)
        return f"{label} [{self.id}]"


def coerce_item(item: Union[TreeItem, Dict[str, Any]]) -> TreeItem:
    """Return ``item`` unchanged if it is a TreeItem, else validate it into one."""
    if isinstance(item, TreeItem):
        return item
    return TreeItem.model_validate(item)


__all__ = ["ItemId", "TreeItem", "coerce_item"]
