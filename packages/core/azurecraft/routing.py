"""Connector routing between laid-out shapes.

The 2D canvas gets orthogonal routes: leave the source on its right side,
travel along one horizontal channel, enter the target from the left. The
channel is chosen from a handful of candidates by a length-plus-collision
score. The isometric canvas gets two-segment routes along the lattice slopes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from azurecraft.layout import node_size

if TYPE_CHECKING:
    from azurecraft.diagram import DiagramGraph

log = logging.getLogger(__name__)

LEVEL_THRESHOLD = 50.0
MAX_EXIT = 40.0
EXIT_RATIO = 0.15
COLLISION_PENALTY = 500.0
CLEARANCE = 50.0
CLEARANCE_BONUS = 20.0
MIDDLE_BIAS = 0.05
DIRECT_TOLERANCE = 1.1
LEG_HALF_WIDTH = 10.0
DENSITY_WINDOW = 100.0
ISO_WINDOW = 100.0

# Connection dots relative to the cube origin
ISO_ANCHORS = {
    "top_left": (20.0, 10.0),
    "top_right": (60.0, 10.0),
    "bottom_left": (20.0, 30.0),
    "bottom_right": (60.0, 30.0),
}


@dataclass
class Rect:
    id: str
    x: float
    y: float
    width: float
    height: float
    kind: str = "service"

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass
class RoutedEdge:
    edge_id: str
    points: list[tuple[float, float]] = field(default_factory=list)
    path: str = ""
    channel_y: float | None = None
    collisions: float = 0.0
    direct: bool = False


def bundle_offset(edge_id: str) -> float:
    """Stable per-edge nudge in [-6, 6] so parallel connectors don't overlap."""
    return float(((sum(ord(c) for c in edge_id) % 7) - 3) * 2)


def route_edge(
    source: Rect,
    target: Rect,
    view_mode: str = "2d",
    all_nodes: Sequence[Rect] | None = None,
    edge_id: str = "",
) -> RoutedEdge:
    if view_mode == "isometric":
        return _route_isometric(source, target, edge_id)
    return _route_orthogonal(source, target, all_nodes or (), edge_id)


def route_edges(graph: DiagramGraph, view_mode: str | None = None) -> dict[str, RoutedEdge]:
    """Route every edge whose endpoints resolve, using absolute node positions."""
    view_mode = view_mode or graph.view_mode
    service_w, service_h = node_size(view_mode)
    rects: dict[str, Rect] = {}
    for n in graph.nodes:
        pos = graph.absolute_position(n.id)
        if n.is_group:
            rects[n.id] = Rect(n.id, pos.x, pos.y, n.width or 0.0, n.height or 0.0, kind="group")
        else:
            rects[n.id] = Rect(n.id, pos.x, pos.y, service_w, service_h)

    obstacles = list(rects.values())
    routed: dict[str, RoutedEdge] = {}
    for e in graph.resolved_edges():
        routed[e.id] = route_edge(rects[e.source], rects[e.target], view_mode, obstacles, e.id)
    return routed


# -- orthogonal (2D) ------------------------------------------------------


def _route_orthogonal(source: Rect, target: Rect, obstacles: Sequence[Rect], edge_id: str) -> RoutedEdge:
    sx, sy = source.x + source.width, source.y + source.height / 2
    tx, ty = target.x, target.y + target.height / 2
    horizontal = abs(tx - sx)
    exit_dist = min(MAX_EXIT, horizontal * EXIT_RATIO)
    min_y, max_y = min(sy, ty), max(sy, ty)
    middle = (sy + ty) / 2

    blockers = [r for r in obstacles if r.kind != "group" and r.id not in (source.id, target.id)]
    in_area = sum(1 for r in obstacles if r.kind != "group" and min_y - DENSITY_WINDOW < r.y < max_y + DENSITY_WINDOW)
    margin = min(30.0, max(15.0, 15.0 + in_area * 1.5))

    def collisions(ch: float) -> float:
        count = 0.0
        lo, hi = sorted((sx + exit_dist, tx - exit_dist))
        for r in blockers:
            if lo < r.x + r.width and hi > r.x and ch - margin < r.y + r.height and ch + margin > r.y:
                count += 1
            for leg_x, end_y in ((sx + exit_dist, sy), (tx - exit_dist, ty)):
                if (
                    leg_x - LEG_HALF_WIDTH < r.x + r.width
                    and leg_x + LEG_HALF_WIDTH > r.x
                    and min(end_y, ch) < r.y + r.height
                    and max(end_y, ch) > r.y
                ):
                    count += 0.5
        return count

    def length(ch: float) -> float:
        return 2 * exit_dist + abs(ch - sy) + horizontal + abs(ty - ch)

    if max_y - min_y < LEVEL_THRESHOLD:
        channel = middle
        hits = collisions(channel)
        direct = True
    else:
        offset = min(120.0, max(60.0, (max_y - min_y) * 0.3))
        candidates = [min_y - offset * 1.5, min_y - offset, middle, max_y + offset, max_y + offset * 1.5]
        scored = []
        for ch in candidates:
            hits = collisions(ch)
            bonus = -CLEARANCE_BONUS if abs(ch - min_y) > CLEARANCE and abs(ch - max_y) > CLEARANCE else 0.0
            score = length(ch) + hits * COLLISION_PENALTY + bonus + abs(ch - middle) * MIDDLE_BIAS
            scored.append((score, ch, hits))

        clear = [s for s in scored if s[2] == 0]
        _, channel, hits = min(clear or scored, key=lambda s: s[0])

        middle_hits = collisions(middle)
        if middle_hits == 0 and length(middle) <= length(channel) * DIRECT_TOLERANCE:
            channel, hits = middle, middle_hits
        log.debug("Edge %s: channel %.1f with %.1f collisions", edge_id or "?", channel, hits)
        channel += bundle_offset(edge_id)
        direct = False

    points = _simplify(
        [
            (sx, sy),
            (sx + exit_dist, sy),
            (sx + exit_dist, channel),
            (tx - exit_dist, channel),
            (tx - exit_dist, ty),
            (tx, ty),
        ]
    )
    radius = min(12.0, max(6.0, (abs(channel - sy) + abs(channel - ty)) * 0.08))
    return RoutedEdge(
        edge_id=edge_id,
        points=points,
        path=_rounded_path(points, radius),
        channel_y=channel,
        collisions=hits,
        direct=direct,
    )


def _simplify(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Drop repeated points and interior points on a straight run."""
    deduped: list[tuple[float, float]] = []
    for p in points:
        if not deduped or deduped[-1] != p:
            deduped.append(p)

    out: list[tuple[float, float]] = []
    for p in deduped:
        if len(out) >= 2:
            a, b = out[-2], out[-1]
            if (a[0] == b[0] == p[0]) or (a[1] == b[1] == p[1]):
                out[-1] = p
                continue
        out.append(p)
    return out


def _rounded_path(points: list[tuple[float, float]], radius: float) -> str:
    if not points:
        return ""
    parts = [f"M {_fmt(points[0][0])} {_fmt(points[0][1])}"]
    for i in range(1, len(points) - 1):
        (ax, ay), (bx, by), (cx, cy) = points[i - 1], points[i], points[i + 1]
        leg_in = abs(bx - ax) + abs(by - ay)
        leg_out = abs(cx - bx) + abs(cy - by)
        r = min(radius, leg_in / 2, leg_out / 2)
        in_x, in_y = _unit(ax, ay, bx, by)
        out_x, out_y = _unit(bx, by, cx, cy)
        parts.append(f"L {_fmt(bx - in_x * r)} {_fmt(by - in_y * r)}")
        parts.append(f"Q {_fmt(bx)} {_fmt(by)} {_fmt(bx + out_x * r)} {_fmt(by + out_y * r)}")
    if len(points) > 1:
        parts.append(f"L {_fmt(points[-1][0])} {_fmt(points[-1][1])}")
    return " ".join(parts)


def _unit(ax: float, ay: float, bx: float, by: float) -> tuple[float, float]:
    dx, dy = bx - ax, by - ay
    length = abs(dx) + abs(dy)
    if length == 0:
        return 0.0, 0.0
    return dx / length, dy / length


def _fmt(v: float) -> str:
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


# -- isometric --------------------------------------------------------------


def _iso_anchors(dx: float, dy: float) -> tuple[str, str]:
    if dx >= 0 and dy <= 0:
        return "top_right", "bottom_left"
    if dx < 0 and dy <= 0:
        return "top_left", "bottom_right"
    if dx >= 0 and dy > 0:
        return "bottom_right", "top_left"
    return "bottom_left", "top_right"


def _route_isometric(source: Rect, target: Rect, edge_id: str) -> RoutedEdge:
    (scx, scy), (tcx, tcy) = source.center, target.center
    src_anchor, tgt_anchor = _iso_anchors(tcx - scx, tcy - scy)
    sx = source.x + ISO_ANCHORS[src_anchor][0]
    sy = source.y + ISO_ANCHORS[src_anchor][1]
    tx = target.x + ISO_ANCHORS[tgt_anchor][0]
    ty = target.y + ISO_ANCHORS[tgt_anchor][1]

    # y = sy + 0.5 (x - sx) meets y = ty - 0.5 (x - tx)
    ix = ty - sy + 0.5 * sx + 0.5 * tx
    iy = sy + 0.5 * (ix - sx)
    if min(sx, tx) - ISO_WINDOW <= ix <= max(sx, tx) + ISO_WINDOW:
        bend, direct = (ix, iy), False
    else:
        bend, direct = ((sx + tx) / 2, (sy + ty) / 2), True

    points = [(sx, sy), bend, (tx, ty)]
    path = " ".join(
        [
            f"M {_fmt(sx)} {_fmt(sy)}",
            f"L {_fmt(bend[0])} {_fmt(bend[1])}",
            f"L {_fmt(tx)} {_fmt(ty)}",
        ]
    )
    return RoutedEdge(edge_id=edge_id, points=points, path=path, channel_y=bend[1], direct=direct)
