"""Project directory support: finds and loads .azurecraft/ configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

REGION_ENV = "AZURECRAFT_REGION"

DEFAULT_SETTINGS: dict[str, Any] = {
    "region": "eastus",
    "view_mode": None,
    "direction": "LR",
    "budget_monthly": None,
}


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for .azurecraft/ directory."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        if (parent / ".azurecraft").is_dir():
            return parent
    return None


def load_project_config(project_root: Path) -> dict[str, Any]:
    """Load .azurecraft/config.yaml if it exists."""
    config_path = project_root / ".azurecraft" / "config.yaml"
    if config_path.exists():
        return yaml.safe_load(config_path.read_text()) or {}
    return {}


def get_project_diagram_path(project_root: Path) -> Path | None:
    """Return the path to .azurecraft/diagram.yaml if it exists."""
    path = project_root / ".azurecraft" / "diagram.yaml"
    if path.exists():
        return path
    return None


def resolve_diagram_path(diagram_file: Path | str | None) -> Path:
    """Resolve a diagram file path, falling back to the project directory."""
    if diagram_file:
        return Path(diagram_file)

    root = find_project_root()
    if root:
        path = get_project_diagram_path(root)
        if path:
            return path

    raise FileNotFoundError(
        "No diagram file specified and no .azurecraft/diagram.yaml found. "
        "Pass a diagram file or create .azurecraft/diagram.yaml in the project."
    )


def resolve_settings(start: Path | None = None, **overrides: Any) -> dict[str, Any]:
    """Defaults, then project config, then $AZURECRAFT_REGION, then explicit CLI options."""
    settings = dict(DEFAULT_SETTINGS)
    root = find_project_root(start)
    if root:
        config = load_project_config(root)
        settings.update({k: v for k, v in config.items() if k in DEFAULT_SETTINGS})

    env_region = os.environ.get(REGION_ENV)
    if env_region:
        settings["region"] = env_region

    settings.update({k: v for k, v in overrides.items() if v is not None})
    return settings
