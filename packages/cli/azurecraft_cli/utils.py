from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

_err_console = Console(stderr=True)


def handle_error(ctx: typer.Context, e: Exception) -> None:
    """Print a clean error message and exit 1."""
    import yaml

    verbose = ctx.obj.get("verbose", False) if ctx.obj else False
    json_mode = ctx.obj.get("json", False) if ctx.obj else False

    if isinstance(e, FileNotFoundError):
        msg = f"File not found: {e}"
    elif isinstance(e, yaml.YAMLError):
        msg = f"Invalid YAML: {e}"
    elif "validation" in type(e).__name__.lower():
        msg = f"Invalid diagram: {e}"
    elif isinstance(e, KeyError):
        msg = f"Unknown id: {e.args[0] if e.args else e}"
    elif isinstance(e, ValueError):
        msg = str(e)
    else:
        msg = f"Error: {e}"

    if json_mode:
        print(json.dumps({"error": msg}))
    else:
        _err_console.print(f"[red]Error:[/red] {msg}")

    if verbose:
        _err_console.print_exception()

    raise typer.Exit(1)


def is_json(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("json"))


def print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def parse_assignments(pairs: list[str] | None) -> dict[str, Any]:
    """Turn ``key=value`` options into a config dict; numbers and booleans are parsed."""
    config: dict[str, Any] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Expected key=value, got {pair!r}")
        key, raw = pair.split("=", 1)
        config[key.strip()] = _parse_value(raw.strip())
    return config


def _parse_value(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def save_diagram(graph, output: Path) -> Path:
    text = graph.to_json() if output.suffix == ".json" else graph.to_yaml()
    output.write_text(text)
    return output
