"""Route every connection in a diagram."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from azurecraft_cli.project import resolve_diagram_path, resolve_settings
from azurecraft_cli.utils import handle_error, is_json, print_json

console = Console()


def route(
    ctx: typer.Context,
    diagram_file: Annotated[Path | None, typer.Argument(help="Diagram YAML/JSON file")] = None,
    view_mode: Annotated[str | None, typer.Option("--view-mode", help="2d or isometric")] = None,
) -> None:
    """Print the path chosen for each connection."""
    try:
        from azurecraft import DiagramGraph
        from azurecraft.routing import route_edges

        graph = DiagramGraph.from_file(resolve_diagram_path(diagram_file))
        mode = resolve_settings(view_mode=view_mode)["view_mode"] or graph.view_mode
        routes = route_edges(graph, mode)

        if is_json(ctx):
            print_json(
                {
                    edge_id: {
                        "path": r.path,
                        "points": [list(p) for p in r.points],
                        "channel_y": r.channel_y,
                        "collisions": r.collisions,
                        "direct": r.direct,
                    }
                    for edge_id, r in routes.items()
                }
            )
            return

        if not routes:
            console.print("[yellow]No routable connections.[/yellow]")
            return

        table = Table(title=f"Routes: {graph.name} ({mode})")
        table.add_column("Edge", style="cyan")
        table.add_column("Direct")
        table.add_column("Collisions", justify="right")
        table.add_column("Path", style="dim")
        for edge_id, r in routes.items():
            table.add_row(edge_id, "yes" if r.direct else "no", f"{r.collisions:g}", r.path)
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
