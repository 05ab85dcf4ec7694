"""AzureCraft: layout, routing, pricing and review for Azure architecture diagrams."""

from azurecraft.diagram import (
    CostSummary,
    DerivedStateCache,
    DiagramGraph,
    Edge,
    Finding,
    Node,
    NodeData,
    Position,
    ResourceGroup,
)

__version__ = "0.3.0"

__all__ = [
    "CostEngine",
    "CostSummary",
    "DerivedStateCache",
    "DiagramGraph",
    "Edge",
    "Finding",
    "LayoutResult",
    "LintReport",
    "Node",
    "NodeData",
    "Position",
    "ResourceGroup",
    "lint",
    "price_service",
    "review",
    "route_edge",
    "snap_point",
]


def __getattr__(name: str):
    # Lazy imports for modules that pull in networkx
    if name == "LayoutResult":
        from azurecraft.layout import LayoutResult

        return LayoutResult
    if name == "route_edge":
        from azurecraft.routing import route_edge

        return route_edge
    if name == "snap_point":
        from azurecraft.snap import snap_point

        return snap_point
    if name == "price_service":
        from azurecraft.pricing import price_service

        return price_service
    if name == "CostEngine":
        from azurecraft.cost import CostEngine

        return CostEngine
    if name in ("lint", "review", "LintReport"):
        from azurecraft import linter

        return getattr(linter, name)
    raise AttributeError(f"module 'azurecraft' has no attribute {name!r}")
