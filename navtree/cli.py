"""navtree CLI commands.

This module provides typer commands for working with a stored tree:
- Showing, importing and exporting snapshots
- Applying a drag-end to the stored tree
- Running the one-time order key migration and compaction
- Validating a snapshot's structure
"""

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from navtree.data_models.dnd import DragEndDescriptor, DragKind, InsertionSide
from navtree.data_models.integrity import TreeIntegrityError, validate_tree
from navtree.data_models.tree import Tree, count_items
from navtree.migration.compaction import (
    compact_tree,
    migrate as migrate_tree,
    needs_migration,
    perform_migration,
)
from navtree.ordering.order_model import sort_by_order
from navtree.reorder.executor import apply_drag_end
from navtree.storage.manager import TreeStore
from navtree.utils.config import ReorderSettings, load_settings
from navtree.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

# --- Typer App Initialization ---
app = typer.Typer(
    name="navtree",
    help="Commands for inspecting and reordering a navigation tree",
    no_args_is_help=True,
)


def _open_store(db: Path | None, config: Path | None) -> tuple[TreeStore, ReorderSettings]:
    try:
        settings = load_settings(config)
    except (ValueError, ValidationError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)
    return TreeStore(db or settings.database_path, settings.order_gap), settings


def render_tree(tree: Tree) -> str:
    lines = []
    for category in tree.categories:
        lines.append(f"{category.name} [{category.id}]")
        for item in sort_by_order(category.items):
            lines.append(f"  - {item.name} ({item.order}) [{item.id}]")
        for group in sort_by_order(category.groups):
            marker = "v" if group.expanded else ">"
            lines.append(f"  {marker} {group.name} ({group.order}) [{group.id}]")
            for item in sort_by_order(group.items):
                lines.append(f"      - {item.name} ({item.order}) [{item.id}]")
    return "\n".join(lines)


DbOption = typer.Option(None, "--db", help="Directory holding tree.db")
ConfigOption = typer.Option(None, "--config", "-c", help="Path to a YAML settings file")


# --- Typer Commands ---


@app.command()
def show(db: Path | None = DbOption, config: Path | None = ConfigOption):
    """Print the stored tree in display order."""
    store, _ = _open_store(db, config)
    tree = store.get_tree()
    if not tree.categories:
        typer.echo("Tree is empty")
        return
    typer.echo(render_tree(tree))


@app.command("import")
def import_tree(
    source: Path = typer.Argument(..., help="JSON file holding a tree snapshot"),
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
):
    """Load a snapshot from JSON, migrating order keys if needed, and store it."""
    store, settings = _open_store(db, config)
    try:
        tree = Tree.model_validate_json(source.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        typer.echo(f"Could not read {source}: {e}", err=True)
        raise typer.Exit(1)

    if needs_migration(tree):
        tree = compact_tree(
            migrate_tree(tree, settings.order_gap), settings.min_gap, settings.order_gap
        )

    violations = validate_tree(tree)
    if violations:
        for violation in violations:
            typer.echo(violation, err=True)
        raise typer.Exit(1)

    store.set_tree(tree)
    typer.echo(f"Imported {len(tree.categories)} categories, {count_items(tree)} items")


@app.command()
def export(
    destination: Path = typer.Argument(..., help="File to write the snapshot to"),
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
):
    """Write the stored tree to a JSON file."""
    store, _ = _open_store(db, config)
    tree = store.get_tree()
    destination.write_text(
        json.dumps(tree.model_dump(mode="json"), indent=2), encoding="utf-8"
    )
    typer.echo(f"Exported tree to {destination}")


@app.command()
def move(
    active_id: str = typer.Argument(..., help="Id of the dragged group or item"),
    over_id: str = typer.Argument(..., help="Id of the drop target"),
    kind: DragKind = typer.Option(DragKind.item, "--kind", "-k"),
    side: InsertionSide = typer.Option(InsertionSide.below, "--side"),
    category_id: str | None = typer.Option(None, "--category"),
    db: Path | None = DbOption,
    config: Path | None = ConfigOption,
):
    """Apply one drag-end to the stored tree."""
    store, settings = _open_store(db, config)
    descriptor = DragEndDescriptor(
        activeId=active_id, overId=over_id, dragKind=kind, insertionSide=side
    )
    result = apply_drag_end(store.get_tree(), descriptor, category_id, settings.order_gap)
    if not result.changed:
        typer.echo("Nothing to move")
        return

    store.set_tree(result.tree)
    typer.echo(f"Applied {result.topology.value} move")
    for notification in result.notifications:
        typer.echo(notification.model_dump_json())


@app.command()
def migrate(db: Path | None = DbOption, config: Path | None = ConfigOption):
    """Run the one-time order key migration."""
    store, settings = _open_store(db, config)
    tree = store.get_tree()
    try:
        migrated = perform_migration(
            tree, store, store.set_tree, settings.order_gap, settings.min_gap
        )
    except TreeIntegrityError as e:
        for violation in e.violations:
            typer.echo(violation, err=True)
        raise typer.Exit(1)
    if migrated is tree:
        typer.echo("No migration needed")
    else:
        typer.echo("Migrated order keys")


@app.command()
def compact(db: Path | None = DbOption, config: Path | None = ConfigOption):
    """Restamp containers whose order keys collide or crowd together."""
    store, settings = _open_store(db, config)
    tree = store.get_tree()
    compacted = compact_tree(tree, settings.min_gap, settings.order_gap)
    if compacted is tree:
        typer.echo("Order keys are healthy")
        return
    store.set_tree(compacted)
    typer.echo("Compacted order keys")


@app.command()
def validate(db: Path | None = DbOption, config: Path | None = ConfigOption):
    """Check the stored tree for structural problems."""
    store, _ = _open_store(db, config)
    violations = validate_tree(store.get_tree())
    if not violations:
        typer.echo("Tree is valid")
        return
    for violation in violations:
        typer.echo(violation, err=True)
    raise typer.Exit(1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")):
    try:
        settings = load_settings()
    except (ValueError, ValidationError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    setup_logging(settings.log_file_prefix)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


if __name__ == "__main__":
    app()
