"""
treestore CLI: inspect a forest of records loaded from YAML/JSON files.

Every command loads the records into an in-memory TreeStore and runs one
structural query against it. Nothing is ever written back.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from treestore import __version__
from treestore.cli.formatters import (
    build_forest_tree,
    build_items_table,
    build_statistics_table,
    data_path,
    format_item,
)
from treestore.cli.load_helpers import load_or_exit
from treestore.core.errors import CycleError
from treestore.core.models import ItemId
from treestore.core.store import TreeStore
from treestore.utils.logging import configure_logging

app = typer.Typer(
    name="treestore",
    help="treestore CLI: inspect hierarchical records and their structure.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"treestore version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """treestore CLI: inspect hierarchical records and their structure."""
    configure_logging(verbose)


def resolve_id(store: TreeStore, raw: str) -> ItemId:
    """Map a command-line id onto a stored id, trying the integer form for digit strings."""
    if raw in store:
        return raw
    stripped = raw.strip()
    digits = stripped[1:] if stripped.startswith("-") else stripped
    if digits.isascii() and digits.isdigit() and int(stripped) in store:
        return int(stripped)
    return raw


def _require_item(store: TreeStore, raw: str) -> ItemId:
    item_id = resolve_id(store, raw)
    if item_id not in store:
        console.print(f"[red]Item not found[/red]: {escape(raw)}")
        raise typer.Exit(code=2)
    return item_id


def _exit_on_cycle(exc: CycleError) -> None:
    console.print(f"[red]{escape(str(exc))}[/red]")
    raise typer.Exit(code=1)


@app.command()
def show(
    path: str = typer.Argument(..., help="Record file or directory"),
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Only show the subtree under this id"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Render the forest as a tree."""
    store = load_or_exit(path, console=console, verbose_errors=verbose_load)
    root_id = _require_item(store, root) if root is not None else None
    console.print(build_forest_tree(store, root_id))


@app.command()
def children(
    path: str = typer.Argument(..., help="Record file or directory"),
    item: str = typer.Argument(..., help="Parent id"),
    all_descendants: bool = typer.Option(False, "--all", "-a", help="List every descendant, not only direct children"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """List the children (or all descendants) of a record."""
    store = load_or_exit(path, console=console, verbose_errors=verbose_load)
    item_id = resolve_id(store, item)

    if all_descendants:
        try:
            found = store.get_all_children(item_id)
        except CycleError as exc:
            _exit_on_cycle(exc)
        title = f"Descendants of {escape(str(item_id))}"
    else:
        found = store.get_children(item_id)
        title = f"Children of {escape(str(item_id))}"

    if not found:
        console.print(f"[dim]No children for {escape(item)}[/dim]")
        return
    console.print(build_items_table(title, found))


@app.command()
def ancestors(
    path: str = typer.Argument(..., help="Record file or directory"),
    item: str = typer.Argument(..., help="Record id"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show the ancestor path of a record, from the record up to its root."""
    store = load_or_exit(path, console=console, verbose_errors=verbose_load)
    item_id = _require_item(store, item)

    try:
        chain = store.get_all_parents(item_id)
    except CycleError as exc:
        _exit_on_cycle(exc)

    console.print(build_items_table(f"Ancestors of {escape(format_item(chain[0]))}", chain))
    console.print(f"[bold]Path:[/bold] {escape(' / '.join(data_path(store, item_id)))}")


@app.command()
def stats(
    path: str = typer.Argument(..., help="Record file or directory"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show summary statistics about the forest."""
    store = load_or_exit(path, console=console, verbose_errors=verbose_load)
    console.print(build_statistics_table(store.get_statistics()))


@app.command()
def validate(
    path: str = typer.Argument(..., help="Record file or directory"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Check the records for orphan references and parent cycles."""
    store = load_or_exit(path, console=console, verbose_errors=verbose_load)
    console.print(f"[green]OK[/green] Loaded {len(store)} record(s)")

    orphans = store.get_orphans()
    if orphans:
        console.print(f"[yellow]Orphan references ({len(orphans)}):[/yellow]")
        for orphan in orphans:
            console.print(f" - {escape(format_item(orphan))} -> missing parent {escape(repr(orphan.parent))}")

    cycles = store.find_cycles()
    if cycles:
        console.print("[red]Validation errors detected:[/red]")
        for cycle in cycles:
            loop = " -> ".join(str(item_id) for item_id in [*cycle, cycle[0]])
            console.print(f" - parent cycle: {escape(loop)}")
        raise typer.Exit(code=1)

    console.print("[green]All validations passed[/green]")


if __name__ == "__main__":
    app()
