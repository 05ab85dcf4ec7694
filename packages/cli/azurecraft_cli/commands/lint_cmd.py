"""Review a diagram against the Well-Architected rule set."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from azurecraft_cli.project import resolve_diagram_path, resolve_settings
from azurecraft_cli.utils import handle_error, is_json, print_json

console = Console()

_SEVERITY_STYLES = {"critical": "bold red", "warning": "yellow", "info": "blue"}


def lint(
    ctx: typer.Context,
    diagram_file: Annotated[Path | None, typer.Argument(help="Diagram YAML/JSON file")] = None,
    region: Annotated[str | None, typer.Option(help="Azure region used for pricing")] = None,
    budget: Annotated[float | None, typer.Option(help="Monthly budget in USD")] = None,
    strict: Annotated[bool, typer.Option(help="Fail when the review does not pass")] = False,
) -> None:
    """Detect architecture gaps and anti-patterns in a diagram."""
    try:
        from azurecraft import DiagramGraph
        from azurecraft.cost import CostEngine
        from azurecraft.linter import review

        graph = DiagramGraph.from_file(resolve_diagram_path(diagram_file))
        settings = resolve_settings(region=region, budget_monthly=budget)
        summary = CostEngine().summarize(graph.nodes, settings["region"])
        report = review(graph.nodes, graph.edges, summary, budget_monthly=settings["budget_monthly"])

        if is_json(ctx):
            print_json(
                {
                    "score": report.score,
                    "passed": report.passed,
                    "findings": [f.model_dump() for f in report.findings],
                }
            )
        elif not report.findings:
            console.print(f"[green][PASS][/green] No findings for {graph.name}")
        else:
            table = Table(title=f"Review: {graph.name}", show_lines=True)
            table.add_column("Severity", width=9)
            table.add_column("Rule", style="cyan")
            table.add_column("Node")
            table.add_column("Finding")
            table.add_column("Recommendation")
            for f in report.findings:
                table.add_row(
                    Text(f.severity, style=_SEVERITY_STYLES[f.severity]),
                    f.rule,
                    f.node_id or "-",
                    f"{f.title}\n{f.description}",
                    f.recommendation,
                )
            console.print(table)

            verdict = "[green]PASS[/green]" if report.passed else "[red]FAIL[/red]"
            console.print(
                f"\n[bold]{len(report.findings)} finding(s)[/bold]: "
                f"[red]{report.critical} critical[/red], "
                f"[yellow]{report.warnings} warning(s)[/yellow]  "
                f"score {report.score}/100 {verdict}"
            )

        if report.critical or (strict and not report.passed):
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
