"""
Command line interface

``wiremap list``, ``wiremap compile`` and ``wiremap clear`` operate on a
project directory (``--path``, default: current directory) laid out as::

    <path>/src/                      discovered sources
    <path>/wiremap_config.py         optional explicit bindings
    <path>/cache/wiremap-container.json
"""

import csv
import io
import json
import logging
import os
from enum import Enum
from typing import Annotated, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .cache_manager import CacheManager
from .config import load_config_file
from .settings import WiremapSettings
from .type_descriptor import TypeDescriptor
from .type_registry import add_source_root, load_type, type_id

app = typer.Typer(
    name="wiremap",
    help="Inspect and compile the wiremap class map cache.",
    no_args_is_help=True,
    add_completion=False,
)

COLUMNS = ("class", "type", "autowirable", "source")

PathOption = Annotated[
    Optional[str],
    typer.Option("--path", help="Path to the project directory (default: current directory)"),
]


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    csv = "csv"


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log cache decisions")] = False,
) -> None:
    """Inspect and compile the wiremap class map cache."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("list")
def list_services(
    path: PathOption = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", help="Output format")
    ] = OutputFormat.table,
) -> None:
    """List all injectable services without compiling."""
    project = _project_dir(path)
    manager = _cache_manager(project)

    rows = [
        _describe(identifier, "src")
        for identifier in manager.discovery.discover(manager.src_path)
    ]
    rows.extend(
        _describe(type_id(abstract) if not isinstance(abstract, str) else abstract, "config")
        for abstract in load_config_file(manager.config_file)
    )

    if not rows:
        typer.echo(f"No services found in {project}")
        return

    _render(rows, output_format)


@app.command("compile")
def compile_cache(
    path: PathOption = None,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing cache")] = False,
) -> None:
    """Compile the class map cache for production."""
    project = _project_dir(path)
    manager = _cache_manager(project)

    if manager.store.exists() and not force:
        typer.echo("Warning: Cache file already exists. Use --force to overwrite.")
        return

    typer.echo(f"Discovering classes in {manager.src_path}...")
    class_map = manager.discovery.discover(manager.src_path)
    if not class_map:
        typer.echo("Warning: No classes found to compile.")
        return

    manager.discover_new_dependencies(class_map)
    typer.echo(f"Found {len(class_map)} classes:")
    for identifier in class_map:
        typer.echo(f"  - {identifier}")

    configured = list(load_config_file(manager.config_file))

    typer.echo("Compiling container cache...")
    if not manager.store.save(class_map):
        typer.echo("Error: Failed to compile container cache", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Success: Container compiled to {manager.store.cache_file}")
    typer.echo(f"Total discovered classes: {len(class_map)}")
    if configured:
        typer.echo(f"Manual configurations: {len(configured)}")
        for abstract in configured:
            typer.echo(f"  - {abstract if isinstance(abstract, str) else type_id(abstract)}")


@app.command("clear")
def clear_cache(path: PathOption = None) -> None:
    """Delete the compiled class map cache."""
    project = os.path.abspath(path or os.getcwd())
    store = _cache_manager(project).store

    if store.exists():
        store.delete()
        if store.exists():
            typer.echo(f"Error: Failed to delete cache file: {store.cache_file}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Success: Cache cleared: {store.cache_file}")
    else:
        typer.echo(f"No cache file found at: {store.cache_file}")

    if os.path.isdir(store.cache_dir) and not os.listdir(store.cache_dir):
        try:
            os.rmdir(store.cache_dir)
        except OSError:
            return
        typer.echo("Success: Removed empty cache directory")


def _project_dir(path: Optional[str]) -> str:
    project = os.path.abspath(path or os.getcwd())
    if not os.path.isdir(project):
        typer.echo(f"Error: Directory does not exist: {project}", err=True)
        raise typer.Exit(code=1)
    return project


def _cache_manager(project: str) -> CacheManager:
    manager = CacheManager(project, settings=WiremapSettings())
    # The configuration file imports project classes by module name
    add_source_root(manager.src_path)
    return manager


def _describe(identifier: str, source: str) -> Dict[str, str]:
    cls = load_type(identifier)
    if cls is None:
        kind, autowirable = "unknown", False
    else:
        descriptor = TypeDescriptor(cls)
        if descriptor.is_interface():
            kind = "interface"
        elif descriptor.is_abstract():
            kind = "abstract"
        else:
            kind = "concrete"
        autowirable = descriptor.is_instantiable()

    return {
        "class": identifier,
        "type": kind,
        "autowirable": "yes" if autowirable else "no",
        "source": source,
    }


def _render(rows: List[Dict[str, str]], output_format: OutputFormat) -> None:
    if output_format == OutputFormat.json:
        typer.echo(json.dumps(rows, indent=2))
    elif output_format == OutputFormat.csv:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=COLUMNS, lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
        typer.echo(buffer.getvalue(), nl=False)
    else:
        table = Table(*COLUMNS)
        for row in rows:
            table.add_row(*(row[column] for column in COLUMNS))
        Console().print(table)
