from __future__ import annotations

import glob
import json
import logging
import os
from typing import Any, List

import yaml
from pydantic import ValidationError

from treestore.core.errors import DuplicateIdError
from treestore.core.models import TreeItem
from treestore.core.store import TreeStore
from treestore.io.loaders.errors import LoaderError
from treestore.io.loaders.file_spec import ItemFileSpec

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


def _read_file(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        if path.endswith(JSON_SUFFIXES):
            return json.load(f)
        return yaml.safe_load(f)


def _record_files(path: str) -> List[str]:
    if os.path.isfile(path):
        return [path]
    files: List[str] = []
    for suffix in YAML_SUFFIXES + JSON_SUFFIXES:
        files.extend(glob.glob(os.path.join(path, "**", f"*{suffix}"), recursive=True))
    return sorted(files)


def load_items(path: str) -> List[TreeItem]:
    """Load records from a YAML/JSON file, or from every such file under a directory.

    Expected format:
    items:
      - id: 1
        parent: null
        label: Root
      - id: 2
        parent: 1
        label: Child

    A bare top-level list of records is accepted as well.
    """
    if not os.path.exists(path):
        raise LoaderError(path, "Record path not found")

    items: List[TreeItem] = []
    for fp in _record_files(path):
        try:
            data = _read_file(fp)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
            raise LoaderError(fp, "Unreadable record file", cause=exc) from exc
        try:
            spec = ItemFileSpec.model_validate(data)
        except ValidationError as exc:
            raise LoaderError.from_validation(fp, exc, data) from exc
        logger.info("Loaded %d record(s) from %s", len(spec.items), fp)
        items.extend(spec.items)
    return items


def load_store(path: str) -> TreeStore:
    """Load records from ``path`` and index them in a new TreeStore."""
    items = load_items(path)
    try:
        return TreeStore(items)
    except DuplicateIdError as exc:
        raise LoaderError.from_store_error(path, exc) from exc
