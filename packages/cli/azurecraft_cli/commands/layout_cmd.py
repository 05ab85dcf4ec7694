"""Lay a diagram out on the tier grid and snap it to the view's lattice."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from azurecraft_cli.project import resolve_diagram_path, resolve_settings
from azurecraft_cli.utils import handle_error, is_json, print_json, save_diagram

console = Console()


def layout(
    ctx: typer.Context,
    diagram_file: Annotated[Path | None, typer.Argument(help="Diagram YAML/JSON file")] = None,
    direction: Annotated[str | None, typer.Option(help="Tier direction: LR or TB")] = None,
    view_mode: Annotated[str | None, typer.Option("--view-mode", help="2d or isometric")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the laid-out diagram here")] = None,
) -> None:
    """Compute tiered positions and group boxes for every node."""
    try:
        from azurecraft import DiagramGraph
        from azurecraft.layout import layout as run_layout
        from azurecraft.tiers import tier_label

        path = resolve_diagram_path(diagram_file)
        graph = DiagramGraph.from_file(path)
        settings = resolve_settings(direction=direction, view_mode=view_mode)
        mode = settings["view_mode"] or graph.view_mode

        result = run_layout(graph.nodes, graph.edges, settings["direction"], mode)
        laid_out = graph.apply_layout(result)

        if output:
            save_diagram(laid_out, output)

        if is_json(ctx):
            print_json(
                {
                    "positions": {k: {"x": x, "y": y} for k, (x, y) in result.positions.items()},
                    "group_dimensions": {k: {"width": w, "height": h} for k, (w, h) in result.group_dimensions.items()},
                    "group_nesting": result.group_nesting,
                }
            )
            return

        table = Table(title=f"Layout: {graph.name} ({mode}, {settings['direction']})")
        table.add_column("Node", style="cyan")
        table.add_column("Tier")
        table.add_column("Parent", style="dim")
        table.add_column("X", justify="right")
        table.add_column("Y", justify="right")
        table.add_column("Size", justify="right")

        nodes = laid_out.node_map()
        for node_id, (x, y) in result.positions.items():
            node = nodes[node_id]
            tier = result.tiers.get(node_id)
            size = result.group_dimensions.get(node_id)
            table.add_row(
                node_id,
                tier_label(tier) if tier is not None else "group",
                node.parent_id or "-",
                f"{x:g}",
                f"{y:g}",
                f"{size[0]:g} x {size[1]:g}" if size else "",
            )
        console.print(table)
        if output:
            console.print(f"[green]Saved[/green] {output}")

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
