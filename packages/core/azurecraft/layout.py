"""Tier-constrained Sugiyama layout for AzureCraft diagrams.

Services are ranked and ordered by a generic layered pass (networkx for the
graph work, barycenter sweeps for crossing reduction), then pinned to fixed
per-tier slots so security sits left of networking, networking left of
compute, and so on regardless of edge topology. Group containers are sized
afterwards, innermost first, to wrap their already-positioned children.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import networkx as nx

from azurecraft.diagram import GROUP_TYPE_RANK, Node
from azurecraft.snap import get_grid
from azurecraft.tiers import tier_for_category

log = logging.getLogger(__name__)

# Footprint of a service shape: flat card on the 2D canvas, cube on the isometric one
NODE_SIZES: dict[str, tuple[float, float]] = {
    "cartesian": (180.0, 56.0),
    "isometric": (75.0, 90.0),
}
MARGIN = 50.0
TIER_SPACING = 240.0
ROW_SPACING = 110.0
GROUP_PADDING = 40.0
GROUP_HEADER = 36.0

EMPTY_GROUP_ORIGIN = (100.0, 100.0)
EMPTY_GROUP_WIDTH = 400.0
EMPTY_GROUP_HEIGHT = 250.0

SWEEPS = 12


@dataclass
class LayoutResult:
    positions: dict[str, tuple[float, float]] = field(default_factory=dict)
    group_dimensions: dict[str, tuple[float, float]] = field(default_factory=dict)
    group_nesting: dict[str, str] = field(default_factory=dict)
    tiers: dict[str, int] = field(default_factory=dict)


@dataclass
class _Box:
    x: float
    y: float
    width: float
    height: float


def layout(
    nodes: Sequence[Node],
    edges: Sequence,
    direction: str = "LR",
    view_mode: str = "2d",
    *,
    node_width: float | None = None,
    node_height: float | None = None,
    margin: float = MARGIN,
    tier_spacing: float = TIER_SPACING,
    row_spacing: float = ROW_SPACING,
    group_padding: float = GROUP_PADDING,
    group_header: float = GROUP_HEADER,
) -> LayoutResult:
    """Compute positions for every node and a box for every group.

    Service positions come back snapped to the lattice of ``view_mode``; any
    node with a layout parent gets a position relative to that parent.
    """
    if not nodes:
        return LayoutResult()

    if direction not in ("LR", "TB"):
        log.debug("Unknown layout direction %r, using LR", direction)
        direction = "LR"

    grid = get_grid(view_mode)
    default_w, default_h = node_size(view_mode)
    node_width = default_w if node_width is None else node_width
    node_height = default_h if node_height is None else node_height
    services = [n for n in nodes if not n.is_group]
    groups = [n for n in nodes if n.is_group]
    by_id = {n.id: n for n in nodes}

    absolute: dict[str, tuple[float, float]] = {}
    tiers: dict[str, int] = {}

    # Services: layered order, then tier slots
    if services:
        ranks, order, layer_index = _layered_order(services, edges)
        by_tier: dict[int, list[Node]] = {}
        for svc in services:
            tier = tier_for_category(svc.data.category)
            tiers[svc.id] = tier
            by_tier.setdefault(tier, []).append(svc)

        for slot, tier in enumerate(sorted(by_tier)):
            members = sorted(by_tier[tier], key=lambda n: (order[n.id], ranks[n.id], layer_index[n.id]))
            primary = margin + slot * tier_spacing
            for row, svc in enumerate(members):
                secondary = margin + row * row_spacing
                x, y = (primary, secondary) if direction == "LR" else (secondary, primary)
                absolute[svc.id] = grid.snap_point(x, y)

    # Groups: nesting first, then boxes innermost-out
    nesting = group_nesting(groups)
    boxes: dict[str, _Box] = {}
    for group in _bottom_up(groups, nesting):
        rects = [
            _Box(*absolute[svc.id], node_width, node_height)
            for svc in services
            if svc.parent_id == group.id and svc.id in absolute
        ]
        rects.extend(boxes[gid] for gid, parent in nesting.items() if parent == group.id and gid in boxes)

        if not rects:
            box = _empty_group_box(view_mode)
        else:
            min_x = min(r.x for r in rects) - group_padding
            min_y = min(r.y for r in rects) - group_padding - group_header
            max_x = max(r.x + r.width for r in rects) + group_padding
            max_y = max(r.y + r.height for r in rects) + group_padding
            x, y = grid.snap_group_position(min_x, min_y, max_x - min_x)
            width, height = grid.snap_group_dimensions(max_x - x, max_y - y)
            box = _Box(x, y, width, height)

        boxes[group.id] = box
        absolute[group.id] = (box.x, box.y)

    # Relative positions for everything with a layout parent
    positions: dict[str, tuple[float, float]] = {}
    for node in nodes:
        if node.id not in absolute:
            continue
        x, y = absolute[node.id]
        parent = nesting.get(node.id) if node.is_group else node.parent_id
        if parent and parent in absolute and parent in by_id and parent != node.id:
            px, py = absolute[parent]
            x, y = x - px, y - py
        positions[node.id] = (x, y)

    return LayoutResult(
        positions=positions,
        group_dimensions={gid: (b.width, b.height) for gid, b in boxes.items()},
        group_nesting=nesting,
        tiers=tiers,
    )


def node_size(view_mode: str = "2d") -> tuple[float, float]:
    return NODE_SIZES[get_grid(view_mode).name]


def tier_based_position(
    category: str,
    existing_nodes: Sequence[Node],
    view_mode: str = "2d",
    *,
    margin: float = MARGIN,
    tier_spacing: float = TIER_SPACING,
    row_spacing: float = ROW_SPACING,
) -> tuple[float, float]:
    """Slot for one newly added service: its tier column, below that tier's existing services."""
    tier = tier_for_category(category)
    in_tier = [n for n in existing_nodes if not n.is_group and tier_for_category(n.data.category) == tier]
    x = margin + tier * tier_spacing
    y = margin + len(in_tier) * row_spacing
    return get_grid(view_mode).snap_point(x, y)


def _layered_order(
    services: Sequence[Node], edges: Sequence
) -> tuple[dict[str, int], dict[str, int], dict[str, int]]:
    """Rank, in-rank order and flattened layer index for every service."""
    g: nx.DiGraph = nx.DiGraph()
    first_seen = {}
    for i, svc in enumerate(services):
        g.add_node(svc.id)
        first_seen[svc.id] = i
    for e in edges:
        # Group edges and dangling edges never reach the layered pass
        if e.source in first_seen and e.target in first_seen and e.source != e.target:
            g.add_edge(e.source, e.target)

    # Cycles collapse into one rank via the condensation DAG
    dag = nx.condensation(g)
    members = {c: sorted(dag.nodes[c]["members"], key=first_seen.__getitem__) for c in dag.nodes}
    comp_rank: dict[int, int] = {}
    for c in nx.lexicographical_topological_sort(dag, key=lambda c: first_seen[members[c][0]]):
        preds = [comp_rank[p] for p in dag.predecessors(c)]
        comp_rank[c] = max(preds) + 1 if preds else 0

    mapping = dag.graph["mapping"]
    ranks = {nid: comp_rank[mapping[nid]] for nid in first_seen}

    layers: dict[int, list[str]] = {}
    for svc in services:
        layers.setdefault(ranks[svc.id], []).append(svc.id)
    ordered_layers = [layers[r] for r in sorted(layers)]

    neighbors: dict[str, list[str]] = {nid: [] for nid in first_seen}
    for u, v in g.edges():
        neighbors[u].append(v)
        neighbors[v].append(u)

    def _sort_by_barycenter(layer: list[str], ref: dict[str, float]) -> list[str]:
        current = {nid: float(i) for i, nid in enumerate(layer)}

        def bc(node_id: str) -> float:
            nbrs = [ref[n] for n in neighbors[node_id] if n in ref]
            return sum(nbrs) / len(nbrs) if nbrs else current[node_id]

        return sorted(layer, key=bc)

    def _layer_positions(layer: list[str]) -> dict[str, float]:
        return {nid: float(i) for i, nid in enumerate(layer)}

    # 12 top-down + 12 bottom-up barycenter sweeps
    for _ in range(SWEEPS):
        ref: dict[str, float] = {}
        for i, layer in enumerate(ordered_layers):
            if i > 0:
                ordered_layers[i] = _sort_by_barycenter(layer, ref)
            ref.update(_layer_positions(ordered_layers[i]))

    for _ in range(SWEEPS):
        ref = {}
        for i in range(len(ordered_layers) - 1, -1, -1):
            layer = ordered_layers[i]
            if i < len(ordered_layers) - 1:
                ordered_layers[i] = _sort_by_barycenter(layer, ref)
            ref.update(_layer_positions(ordered_layers[i]))

    order: dict[str, int] = {}
    layer_index: dict[str, int] = {}
    flat = 0
    for layer in ordered_layers:
        for i, nid in enumerate(layer):
            order[nid] = i
            layer_index[nid] = flat
            flat += 1
    return ranks, order, layer_index


def group_nesting(groups: Sequence[Node]) -> dict[str, str]:
    """child group id -> parent group id.

    An explicit ``parent_id`` naming another group wins. Otherwise a group
    nests under the group with the greatest rank strictly below its own;
    resource groups never get an inferred parent. Links that would close a
    cycle are dropped.
    """
    ids = {g.id for g in groups}
    nesting: dict[str, str] = {}

    def _closes_cycle(child: str, parent: str) -> bool:
        seen = set()
        current: str | None = parent
        while current is not None and current not in seen:
            if current == child:
                return True
            seen.add(current)
            current = nesting.get(current)
        return False

    for g in groups:
        if g.parent_id and g.parent_id in ids and g.parent_id != g.id:
            if _closes_cycle(g.id, g.parent_id):
                log.debug("Ignoring parent %s of group %s: nesting cycle", g.parent_id, g.id)
                continue
            nesting[g.id] = g.parent_id

    for g in sorted(groups, key=lambda n: -n.group_rank):
        if g.id in nesting or g.group_rank == 0:
            continue
        best: Node | None = None
        for candidate in groups:
            if candidate.id == g.id or candidate.group_rank >= g.group_rank:
                continue
            if best is None or candidate.group_rank > best.group_rank:
                best = candidate
        if best is not None and not _closes_cycle(g.id, best.id):
            nesting[g.id] = best.id
    return nesting


def _bottom_up(groups: Sequence[Node], nesting: dict[str, str]) -> list[Node]:
    """Deepest groups first; among equals, more specific group types first."""

    def depth(gid: str) -> int:
        d = 0
        seen = {gid}
        current = nesting.get(gid)
        while current is not None and current not in seen:
            seen.add(current)
            d += 1
            current = nesting.get(current)
        return d

    index = {g.id: i for i, g in enumerate(groups)}
    return sorted(groups, key=lambda g: (-depth(g.id), -GROUP_TYPE_RANK.get(g.data.group_type or "", 0), index[g.id]))


def _empty_group_box(view_mode: str) -> _Box:
    grid = get_grid(view_mode)
    ox, oy = EMPTY_GROUP_ORIGIN
    if view_mode == "isometric":
        x, y = grid.snap_group_position(ox, oy, EMPTY_GROUP_WIDTH)
        width, height = grid.snap_group_dimensions(EMPTY_GROUP_WIDTH)
        return _Box(x, y, width, height)
    x, y = grid.snap_point(ox, oy)
    return _Box(x, y, EMPTY_GROUP_WIDTH, EMPTY_GROUP_HEIGHT)
