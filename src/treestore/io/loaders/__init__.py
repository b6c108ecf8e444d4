from .errors import LoaderError
from .file_spec import ItemFileSpec
from .item_loader import load_items, load_store

__all__ = ["load_items", "load_store", "ItemFileSpec", "LoaderError"]
