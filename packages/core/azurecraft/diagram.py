"""DiagramGraph: the core document for AzureCraft.

Everything flows through DiagramGraph: the layout engine positions its nodes,
the router draws its edges, the cost engine prices its services and the linter
reviews it. A graph is treated as an immutable snapshot: every mutation returns
a new graph with the version bumped, and derived state (cost summary, findings)
is only ever replaced wholesale by ``recompute``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import yaml
from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from azurecraft.tiers import category_for_service

if TYPE_CHECKING:
    from azurecraft.layout import LayoutResult

log = logging.getLogger(__name__)

CONNECTION_TYPES = ("public", "private-endpoint", "vnet-integration", "service-endpoint", "peering")
NODE_STATUSES = ("proposed", "healthy", "warning", "error")
GROUP_TYPES = ("resource-group", "virtual-network", "subnet")
VIEW_MODES = ("2d", "isometric", "cost-heatmap", "compliance")

# resource-group ⊃ virtual-network ⊃ subnet
GROUP_TYPE_RANK: dict[str, int] = {"resource-group": 0, "virtual-network": 1, "subnet": 2}

DEFAULT_GROUP_WIDTH = 400.0
DEFAULT_GROUP_HEIGHT = 200.0

ConnectionType = Literal["public", "private-endpoint", "vnet-integration", "service-endpoint", "peering"]
NodeStatus = Literal["proposed", "healthy", "warning", "error"]
GroupType = Literal["resource-group", "virtual-network", "subnet"]
ViewMode = Literal["2d", "isometric", "cost-heatmap", "compliance"]
Severity = Literal["critical", "warning", "info"]
Pillar = Literal["reliability", "security", "cost", "operational-excellence", "performance"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _coerce(value: Any, allowed: tuple[str, ...], default: str, what: str) -> str:
    if value in allowed:
        return value
    if value is not None:
        log.debug("Unrecognized %s %r, using %r", what, value, default)
    return default


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class NodeData(BaseModel):
    service_type: str
    display_name: str = ""
    description: str = ""
    category: str = "compute"
    status: NodeStatus = "proposed"
    properties: dict[str, Any] = Field(default_factory=dict)
    group_type: GroupType | None = None
    pricing_config: dict[str, Any] | None = None
    monthly_cost: float | None = None
    sku: str | None = None
    region: str | None = None
    subtitle: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _fill_category(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("category"):
            data = dict(data)
            data["category"] = category_for_service(data.get("service_type", ""))
        return data

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> str:
        return _coerce(v, NODE_STATUSES, "proposed", "node status")

    @field_validator("group_type", mode="before")
    @classmethod
    def _coerce_group_type(cls, v: Any) -> str | None:
        if v is None:
            return None
        return _coerce(v, GROUP_TYPES, "resource-group", "group type")

    @model_validator(mode="after")
    def _default_display_name(self) -> NodeData:
        if not self.display_name:
            self.display_name = self.service_type
        return self


class Node(BaseModel):
    id: str
    kind: Literal["service", "group"] = "service"
    position: Position = Field(default_factory=Position)
    # When set, position is relative to the parent's origin
    parent_id: str | None = None
    data: NodeData
    width: float | None = None
    height: float | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, v: Any) -> str:
        return "group" if v == "group" else "service"

    @property
    def is_group(self) -> bool:
        return self.kind == "group"

    @property
    def group_rank(self) -> int:
        return GROUP_TYPE_RANK.get(self.data.group_type or "resource-group", 0)


class Edge(BaseModel):
    id: str
    source: str
    target: str
    connection_type: ConnectionType = "public"
    encrypted: bool = True
    protocol: str | None = None
    port: int | None = None
    label: str = ""

    @field_validator("connection_type", mode="before")
    @classmethod
    def _coerce_connection_type(cls, v: Any) -> str:
        return _coerce(v, CONNECTION_TYPES, "public", "connection type")


class CostSummary(BaseModel):
    monthly: float = 0.0
    by_service_type: dict[str, float] = Field(default_factory=dict)
    by_service: dict[str, float] = Field(default_factory=dict)
    by_group: dict[str, float] = Field(default_factory=dict)
    currency: str = "USD"


class Finding(BaseModel):
    rule: str
    pillar: Pillar
    severity: Severity
    node_id: str | None = None
    title: str
    description: str
    recommendation: str


class ResourceGroup(BaseModel):
    id: str
    name: str
    location: str
    child_node_ids: list[str] = Field(default_factory=list)


class DiagramGraph(BaseModel):
    """The aggregate document. Everything flows through this."""

    name: str = "Untitled Architecture"
    version: int = 1
    view_mode: ViewMode = "2d"
    region: str = "eastus"
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    cost_summary: CostSummary = Field(default_factory=CostSummary)
    validation_results: list[Finding] = Field(default_factory=list)
    last_modified: str = Field(default_factory=_now)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("view_mode", mode="before")
    @classmethod
    def _coerce_view_mode(cls, v: Any) -> str:
        return _coerce(v, VIEW_MODES, "2d", "view mode")

    # -- queries ---------------------------------------------------------

    @computed_field  # type: ignore[prop-decorator]
    @property
    def groups(self) -> list[ResourceGroup]:
        return [
            ResourceGroup(
                id=n.id,
                name=n.data.display_name,
                location=n.data.region or self.region,
                child_node_ids=[c.id for c in self.nodes if c.parent_id == n.id],
            )
            for n in self.nodes
            if n.is_group and n.data.group_type in (None, "resource-group")
        ]

    def node(self, node_id: str) -> Node | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def node_map(self) -> dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def services(self) -> list[Node]:
        return [n for n in self.nodes if not n.is_group]

    def group_nodes(self) -> list[Node]:
        return [n for n in self.nodes if n.is_group]

    def children(self, node_id: str) -> list[Node]:
        return [n for n in self.nodes if n.parent_id == node_id]

    def descendants(self, node_id: str) -> list[str]:
        out: list[str] = []
        frontier = [node_id]
        seen = {node_id}
        while frontier:
            current = frontier.pop(0)
            for child in self.children(current):
                if child.id not in seen:
                    seen.add(child.id)
                    out.append(child.id)
                    frontier.append(child.id)
        return out

    def resolved_edges(self) -> list[Edge]:
        """Edges whose endpoints both exist; dangling edges stay stored but are skipped."""
        ids = {n.id for n in self.nodes}
        out = []
        for e in self.edges:
            if e.source in ids and e.target in ids:
                out.append(e)
            else:
                log.debug("Ignoring dangling edge %s (%s -> %s)", e.id, e.source, e.target)
        return out

    def absolute_position(self, node_id: str) -> Position:
        """Own position plus every ancestor position up the parent chain."""
        nodes = self.node_map()
        node = nodes.get(node_id)
        if node is None:
            raise KeyError(node_id)
        x, y = node.position.x, node.position.y
        seen = {node_id}
        parent = nodes.get(node.parent_id) if node.parent_id else None
        while parent is not None and parent.id not in seen:
            seen.add(parent.id)
            x += parent.position.x
            y += parent.position.y
            parent = nodes.get(parent.parent_id) if parent.parent_id else None
        return Position(x=x, y=y)

    def absolute_positions(self) -> dict[str, Position]:
        return {n.id: self.absolute_position(n.id) for n in self.nodes}

    # -- mutations (each returns a new snapshot) --------------------------

    def _evolve(self, bump: bool = True, **update: Any) -> DiagramGraph:
        if bump:
            update["version"] = self.version + 1
            update["last_modified"] = _now()
        return self.model_copy(update=update)

    def _require(self, node_id: str) -> Node:
        node = self.node(node_id)
        if node is None:
            raise KeyError(f"Unknown node id {node_id!r}")
        return node

    def add_node(self, node: Node) -> DiagramGraph:
        return self.add_nodes([node])

    def add_nodes(self, nodes: Iterable[Node], edges: Iterable[Edge] = ()) -> DiagramGraph:
        """Atomically add a batch of nodes and edges as a single version step."""
        new_nodes = list(nodes)
        new_edges = list(edges)
        existing = {n.id for n in self.nodes}
        for n in new_nodes:
            if n.id in existing:
                raise ValueError(f"Node id {n.id!r} already exists")
            existing.add(n.id)
        edge_ids = {e.id for e in self.edges}
        for e in new_edges:
            if e.id in edge_ids:
                raise ValueError(f"Edge id {e.id!r} already exists")
            edge_ids.add(e.id)
        return self._evolve(nodes=[*self.nodes, *new_nodes], edges=[*self.edges, *new_edges])

    def add_group(
        self,
        group_id: str,
        display_name: str,
        group_type: GroupType = "resource-group",
        position: Position | None = None,
        *,
        width: float | None = None,
        height: float | None = None,
        subtitle: str | None = None,
        parent_id: str | None = None,
    ) -> DiagramGraph:
        if self.node(group_id) is not None:
            raise ValueError(f"Node id {group_id!r} already exists")
        group = Node(
            id=group_id,
            kind="group",
            position=position or Position(),
            parent_id=parent_id,
            width=width if width is not None else DEFAULT_GROUP_WIDTH,
            height=height if height is not None else DEFAULT_GROUP_HEIGHT,
            data=NodeData(
                service_type="resource-group",
                display_name=display_name,
                category="networking",
                group_type=group_type,
                subtitle=subtitle,
            ),
        )
        # Groups go first so they render beneath services
        return self._evolve(nodes=[group, *self.nodes])

    def update_node(self, node_id: str, **changes: Any) -> DiagramGraph:
        """Replace top-level node fields; a ``data`` mapping is merged into the node data."""
        node = self._require(node_id)
        data_changes = changes.pop("data", None)
        if isinstance(changes.get("position"), Mapping):
            changes["position"] = Position(**changes["position"])
        if data_changes:
            merged = node.data.model_dump()
            merged.update(data_changes)
            changes["data"] = NodeData.model_validate(merged)
        updated = node.model_copy(update=changes)
        return self._evolve(nodes=[updated if n.id == node_id else n for n in self.nodes])

    def update_positions(self, updates: Mapping[str, Position | tuple[float, float]]) -> DiagramGraph:
        """Move nodes without bumping the version; positions feed no derived state."""
        nodes = []
        for n in self.nodes:
            pos = updates.get(n.id)
            if pos is None:
                nodes.append(n)
                continue
            if not isinstance(pos, Position):
                pos = Position(x=pos[0], y=pos[1])
            nodes.append(n.model_copy(update={"position": pos}))
        return self._evolve(bump=False, nodes=nodes)

    def remove_node(self, node_id: str, cascade: bool = False) -> DiagramGraph:
        """Remove a node and every edge touching it.

        Removing a group re-parents its direct children to the group's own
        parent, keeping their absolute positions; with ``cascade`` the whole
        subtree goes instead.
        """
        node = self._require(node_id)
        removed = {node_id}
        nodes = []
        if cascade:
            removed.update(self.descendants(node_id))
        for n in self.nodes:
            if n.id in removed:
                continue
            if n.parent_id == node_id:
                moved = Position(x=n.position.x + node.position.x, y=n.position.y + node.position.y)
                n = n.model_copy(update={"parent_id": node.parent_id, "position": moved})
            nodes.append(n)
        edges = [e for e in self.edges if e.source not in removed and e.target not in removed]
        return self._evolve(nodes=nodes, edges=edges)

    def add_edge(self, edge: Edge) -> DiagramGraph:
        if any(e.id == edge.id for e in self.edges):
            raise ValueError(f"Edge id {edge.id!r} already exists")
        ids = {n.id for n in self.nodes}
        if edge.source not in ids or edge.target not in ids:
            log.debug("Edge %s references a missing node; stored but ignored by the engines", edge.id)
        return self._evolve(edges=[*self.edges, edge])

    def remove_edge(self, edge_id: str) -> DiagramGraph:
        if not any(e.id == edge_id for e in self.edges):
            raise KeyError(f"Unknown edge id {edge_id!r}")
        return self._evolve(edges=[e for e in self.edges if e.id != edge_id])

    def assign_to_group(self, node_id: str, group_id: str) -> DiagramGraph:
        node = self._require(node_id)
        group = self._require(group_id)
        if not group.is_group:
            raise ValueError(f"{group_id!r} is not a group")
        if group_id == node_id or group_id in self.descendants(node_id):
            raise ValueError(f"Cannot nest {node_id!r} inside its own subtree")
        abs_node = self.absolute_position(node_id)
        abs_group = self.absolute_position(group_id)
        relative = Position(x=abs_node.x - abs_group.x, y=abs_node.y - abs_group.y)
        updated = node.model_copy(update={"parent_id": group_id, "position": relative})
        return self._evolve(nodes=[updated if n.id == node_id else n for n in self.nodes])

    def remove_from_group(self, node_id: str) -> DiagramGraph:
        node = self._require(node_id)
        if not node.parent_id:
            return self
        absolute = self.absolute_position(node_id)
        updated = node.model_copy(update={"parent_id": None, "position": absolute})
        return self._evolve(nodes=[updated if n.id == node_id else n for n in self.nodes])

    def apply_layout(self, result: LayoutResult) -> DiagramGraph:
        """Write every computed position, group size and group nesting in one step."""
        nodes = []
        for n in self.nodes:
            update: dict[str, Any] = {}
            if n.id in result.positions:
                x, y = result.positions[n.id]
                update["position"] = Position(x=x, y=y)
            if n.id in result.group_dimensions:
                update["width"], update["height"] = result.group_dimensions[n.id]
            if n.is_group:
                update["parent_id"] = result.group_nesting.get(n.id)
            nodes.append(n.model_copy(update=update) if update else n)
        return self._evolve(nodes=nodes)

    def recompute(self, region: str | None = None, *, budget_monthly: float | None = None) -> DiagramGraph:
        """Price every service and lint the graph; derived state is replaced wholesale."""
        from azurecraft.cost import CostEngine
        from azurecraft.linter import lint

        region = region or self.region
        engine = CostEngine()
        nodes = engine.price_nodes(self.nodes, region)
        summary = engine.summarize(nodes, region)
        findings = lint(nodes, self.edges, summary, budget_monthly=budget_monthly)
        return self._evolve(bump=False, nodes=nodes, cost_summary=summary, validation_results=findings)

    # -- serialization ---------------------------------------------------

    def to_yaml(self) -> str:
        data = self.model_dump(exclude_none=True)
        data = _clean_empty(data)
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> DiagramGraph:
        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> DiagramGraph:
        p = Path(path)
        text = p.read_text()
        if p.suffix in (".yaml", ".yml"):
            return cls.from_yaml(text)
        return cls.model_validate_json(text)


class DerivedStateCache:
    """Version-gated debounce around ``DiagramGraph.recompute``.

    Repeated calls for an unchanged version of the same document reuse the
    previous cost summary and findings; a new version always recomputes. A
    document is identified by its name and its node and edge ids, so a
    reloaded file whose content changed under the same ids needs ``clear()``.
    """

    def __init__(self) -> None:
        self._key: tuple | None = None
        self._derived: DiagramGraph | None = None
        self.hits = 0

    def recompute(
        self, graph: DiagramGraph, region: str | None = None, *, budget_monthly: float | None = None
    ) -> DiagramGraph:
        key = (
            graph.name,
            tuple(n.id for n in graph.nodes),
            tuple(e.id for e in graph.edges),
            graph.version,
            region or graph.region,
            budget_monthly,
        )
        if self._derived is not None and key == self._key:
            self.hits += 1
            return _attach_derived(graph, self._derived)
        self._derived = graph.recompute(region, budget_monthly=budget_monthly)
        self._key = key
        return self._derived

    def clear(self) -> None:
        self._key = None
        self._derived = None


def _attach_derived(graph: DiagramGraph, derived: DiagramGraph) -> DiagramGraph:
    priced = {n.id: n.data for n in derived.nodes}
    nodes = []
    for n in graph.nodes:
        data = priced.get(n.id)
        if data is not None:
            n = n.model_copy(
                update={"data": n.data.model_copy(update={"monthly_cost": data.monthly_cost, "sku": data.sku})}
            )
        nodes.append(n)
    return graph.model_copy(
        update={
            "nodes": nodes,
            "cost_summary": derived.cost_summary,
            "validation_results": derived.validation_results,
        }
    )


def _clean_empty(d: Any) -> Any:
    if isinstance(d, dict):
        return {k: _clean_empty(v) for k, v in d.items() if v not in ([], {}, None, "")}
    if isinstance(d, list):
        return [_clean_empty(i) for i in d]
    return d
