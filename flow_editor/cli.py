"""Flow Editor CLI - inspect flow definition files."""

import json
import sys
from typing import Any, Dict, List

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .canvas.definition import create_graph, get_current_definition, load_definition
from .config import configure_logging, get_settings
from .localization import get_localization, get_translatable_keys, missing_localized_keys
from .models import FlowEditorError, RenderNodeMap

console = Console()


def _load_graph(path: str):
    with open(path, "r", encoding="utf-8") as fh:
        definition = load_definition(fh.read())
    return definition, create_graph(definition)


def _missing_translations(nodes: RenderNodeMap, localization: Dict[str, Any], language: str) -> List[Dict[str, Any]]:
    rows = []
    for uuid, render_node in nodes.items():
        objects: List[Any] = list(render_node.node.actions) + list(render_node.node.exits)
        if render_node.node.router is not None:
            objects.extend(getattr(render_node.node.router, "cases", []))

        for obj in objects:
            keys = get_translatable_keys(obj)
            missing = missing_localized_keys(keys, get_localization(obj, localization, language)) if keys else []
            if missing:
                rows.append({
                    "node": uuid,
                    "object": obj.uuid,
                    "kind": type(obj).__name__.lower(),
                    "missing": ", ".join(missing),
                })
    return rows


def _print_rows(rows: List[Dict[str, Any]], title: str) -> None:
    if not rows:
        console.print("[dim]No data to display[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    columns = list(rows[0].keys())
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for row in rows:
        table.add_row(*[str(row.get(col, "")) for col in columns])
    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="flow-editor")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Flow Editor CLI - check and export flow definitions.

    \b
    Examples:
      flow-editor check flow.json
      flow-editor translations flow.json --language spa
      flow-editor export flow.json -o yaml
    """
    ctx.ensure_object(dict)
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"debug": True})
    configure_logging(settings)
    ctx.obj["debug"] = debug


@cli.command("check")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def check(path: str):
    """Check a definition's graph for consistency problems."""
    try:
        definition, graph = _load_graph(path)
    except FlowEditorError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    problems = graph.check_consistency()
    if problems:
        _print_rows([{"problem": p} for p in problems], title=definition.name)
        sys.exit(1)

    console.print(f"[green]✓[/green] {definition.name or definition.uuid}: {len(graph)} nodes, no problems")


@cli.command("translations")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--language", "-l", required=True, help="ISO code of the language to check")
def translations(path: str, language: str):
    """List objects missing translations for a language."""
    try:
        definition, graph = _load_graph(path)
    except FlowEditorError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    rows = _missing_translations(graph.nodes, definition.localization, language)
    _print_rows(rows, title=f"Missing translations ({language})")
    if rows:
        console.print(f"\nTotal: {len(rows)}")


@cli.command("export")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Choice(["json", "yaml"]), default="json", help="Output format")
def export(path: str, output: str):
    """Re-export a definition from its node map."""
    try:
        definition, graph = _load_graph(path)
    except FlowEditorError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    data = get_current_definition(definition, graph.nodes).to_dict()
    if output == "yaml":
        text = yaml.dump(data, default_flow_style=False, sort_keys=False)
    else:
        text = json.dumps(data, indent=2, default=str)
    console.print(Syntax(text, output, theme="monokai", line_numbers=False))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
