"""Price a single service, and show the pricing form behind it."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from azurecraft_cli.project import resolve_settings
from azurecraft_cli.utils import handle_error, is_json, parse_assignments, print_json

console = Console()


def price(
    ctx: typer.Context,
    service_type: Annotated[str, typer.Argument(help="Service type, e.g. app-service")],
    set_: Annotated[list[str] | None, typer.Option("--set", "-s", help="Config value as key=value")] = None,
    region: Annotated[str | None, typer.Option(help="Azure region")] = None,
) -> None:
    """Itemized monthly cost for one service configuration."""
    try:
        from azurecraft.pricing import derive_sku, get_descriptor, price_service, validate_config

        region = resolve_settings(region=region)["region"]
        config = validate_config(service_type, parse_assignments(set_))
        breakdown = price_service(service_type, config, region)
        sku = derive_sku(service_type, config)

        if is_json(ctx):
            print_json(
                {
                    "service_type": service_type,
                    "region": region,
                    "config": config,
                    "sku": sku,
                    **breakdown.model_dump(),
                }
            )
            return

        descriptor = get_descriptor(service_type)
        title = descriptor.label if descriptor else f"{service_type} (flat estimate)"
        if sku:
            title += f" ({sku})"
        table = Table(title=f"{title} ({region})", show_footer=True)
        table.add_column("Line item", style="cyan", footer="Total")
        table.add_column("Monthly", justify="right", footer=f"${breakdown.total:,.2f}")
        for item in breakdown.line_items:
            table.add_row(item.label, f"${item.monthly_cost:,.2f}")
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)


def fields(
    ctx: typer.Context,
    service_type: Annotated[str, typer.Argument(help="Service type, e.g. azure-sql")],
    set_: Annotated[list[str] | None, typer.Option("--set", "-s", help="Config value as key=value")] = None,
    show_all: Annotated[bool, typer.Option("--all", help="Include fields hidden by the current config")] = False,
) -> None:
    """List the pricing fields for a service type."""
    try:
        from azurecraft.pricing import get_descriptor, validate_config

        descriptor = get_descriptor(service_type)
        if descriptor is None:
            raise ValueError(f"No pricing form for {service_type!r}; it is priced by flat estimate")

        config = validate_config(service_type, parse_assignments(set_))
        shown = descriptor.fields if show_all else descriptor.visible_fields(config)

        if is_json(ctx):
            print_json([f.model_dump(exclude_none=True) | {"value": config.get(f.key)} for f in shown])
            return

        table = Table(title=f"{descriptor.label} pricing fields")
        table.add_column("Key", style="cyan")
        table.add_column("Label")
        table.add_column("Type")
        table.add_column("Value", justify="right")
        table.add_column("Range / options", style="dim")
        for f in shown:
            if f.type == "select":
                extent = ", ".join(o.value for o in f.all_options())
            elif f.type == "number":
                extent = f"{f.min:g}..{f.max:g}" if f.min is not None and f.max is not None else ""
                if f.unit:
                    extent = f"{extent} {f.unit}".strip()
            else:
                extent = ""
            table.add_row(f.key, f.label, f.type, str(config.get(f.key)), extent)
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
