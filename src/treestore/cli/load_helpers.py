from __future__ import annotations

"""Shared helpers for loading record files with CLI-friendly errors."""

import typer
from rich.console import Console

from treestore.core.store import TreeStore
from treestore.io.loaders import LoaderError, load_store


def load_or_exit(path: str, *, console: Console, verbose_errors: bool = False) -> TreeStore:
    try:
        return load_store(path)
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load data:[/red] {err.message}\n{err.cause}")
        else:
            console.print(f"[red]Failed to load data:[/red] {err}")
        raise typer.Exit(code=1)


__all__ = ["load_or_exit"]
