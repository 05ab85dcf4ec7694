from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from azurecraft_cli.project import resolve_diagram_path, resolve_settings
from azurecraft_cli.utils import handle_error, is_json, print_json

console = Console()


def cost(
    ctx: typer.Context,
    diagram_file: Annotated[Path | None, typer.Argument(help="Diagram YAML/JSON file")] = None,
    region: Annotated[str | None, typer.Option(help="Azure region (e.g. eastus, westeurope)")] = None,
    by_group: Annotated[bool, typer.Option("--by-group", help="Show totals per resource group")] = False,
) -> None:
    """Show the monthly cost breakdown for a diagram."""
    try:
        from azurecraft import DiagramGraph
        from azurecraft.cost import CostEngine

        graph = DiagramGraph.from_file(resolve_diagram_path(diagram_file))
        region = resolve_settings(region=region)["region"]
        engine = CostEngine()
        costs = engine.estimate(graph.nodes, region)
        summary = engine.summarize(graph.nodes, region)

        if is_json(ctx):
            print_json(
                {
                    "region": region,
                    "summary": summary.model_dump(),
                    "services": [
                        {
                            "id": c.node_id,
                            "service_type": c.service_type,
                            "sku": c.sku,
                            "group": c.group,
                            "monthly": c.monthly,
                            "line_items": [i.model_dump() for i in c.breakdown.line_items],
                        }
                        for c in costs
                    ],
                }
            )
            return

        if by_group:
            table = Table(title=f"Cost by Group: {graph.name} ({region})", show_footer=True)
            table.add_column("Group", style="cyan", footer="Total")
            table.add_column("Monthly", justify="right", footer=f"${summary.monthly:,.2f}")
            for name, amount in sorted(summary.by_group.items(), key=lambda kv: -kv[1]):
                table.add_row(name, f"${amount:,.2f}")
            console.print(table)
            return

        table = Table(title=f"Cost Breakdown: {graph.name} ({region})", show_footer=True)
        table.add_column("Service", style="cyan")
        table.add_column("Type")
        table.add_column("SKU", style="dim")
        table.add_column("Monthly", justify="right", footer=f"${summary.monthly:,.2f}")
        for c in costs:
            table.add_row(c.display_name, c.service_type, c.sku or "-", f"${c.monthly:,.2f}")
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
