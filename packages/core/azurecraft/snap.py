"""Grid snapping for the two canvas lattices.

The 2D canvas uses a plain square lattice. The isometric canvas uses a 2:1
diamond lattice whose vertices sit at ``(k * G, j * G / 2)`` with ``k + j``
even; service cubes anchor on their bottom vertex and group diamonds on their
top vertex so every rendered edge lands on a grid line.
"""

from __future__ import annotations

import math

CARTESIAN_GRID = 20
CARTESIAN_GROUP_STEP = 40
CARTESIAN_MIN_GROUP_WIDTH = 200
CARTESIAN_MIN_GROUP_HEIGHT = 120

ISO_GRID = 40
ISO_DIAMOND_HALF_WIDTH = 40
# Diamond half-height (40) plus cube depth (15)
ISO_CUBE_BOTTOM_Y = 55
ISO_GROUP_STEP = 80
ISO_MIN_GROUP_WIDTH = 160


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity (``round`` would go to even)."""
    return math.floor(value + 0.5)


class CartesianGrid:
    """Square lattice used by every view mode except ``isometric``."""

    name = "cartesian"

    def __init__(self, grid: int = CARTESIAN_GRID) -> None:
        self.grid = grid

    def snap_point(self, x: float, y: float) -> tuple[float, float]:
        g = self.grid
        return float(round_half_up(x / g) * g), float(round_half_up(y / g) * g)

    def snap_group_position(self, x: float, y: float, width: float) -> tuple[float, float]:
        return self.snap_point(x, y)

    def snap_group_dimensions(self, raw_width: float, raw_height: float | None = None) -> tuple[float, float]:
        if raw_height is None:
            raw_height = raw_width / 2
        step = CARTESIAN_GROUP_STEP
        width = max(CARTESIAN_MIN_GROUP_WIDTH, round_half_up(raw_width / step) * step)
        height = max(CARTESIAN_MIN_GROUP_HEIGHT, round_half_up(raw_height / step) * step)
        return float(width), float(height)


class IsometricGrid:
    """2:1 diamond lattice: vertices at ``(k*G, j*G/2)`` where ``k + j`` is even."""

    name = "isometric"

    def __init__(self, grid: int = ISO_GRID) -> None:
        self.grid = grid

    def nearest_vertex(self, x: float, y: float) -> tuple[float, float]:
        g = self.grid
        half = g / 2
        k_floor = math.floor(x / g)
        j_floor = math.floor(y / half)

        best: tuple[float, float] | None = None
        best_dist = math.inf
        for k in (k_floor, k_floor + 1):
            for j in (j_floor, j_floor + 1):
                if (k + j) % 2 != 0:
                    continue
                gx, gy = k * g, j * half
                d = (gx - x) ** 2 + (gy - y) ** 2
                if d < best_dist:
                    best_dist = d
                    best = (float(gx), float(gy))
        # One of the four floor/ceil candidates always has even parity
        assert best is not None
        return best

    def is_vertex(self, x: float, y: float) -> bool:
        g = self.grid
        k = x / g
        j = y / (g / 2)
        if not (float(k).is_integer() and float(j).is_integer()):
            return False
        return (int(k) + int(j)) % 2 == 0

    def snap_point(self, x: float, y: float) -> tuple[float, float]:
        vx, vy = self.nearest_vertex(x + ISO_DIAMOND_HALF_WIDTH, y + ISO_CUBE_BOTTOM_Y)
        return vx - ISO_DIAMOND_HALF_WIDTH, vy - ISO_CUBE_BOTTOM_Y

    def snap_group_position(self, x: float, y: float, width: float) -> tuple[float, float]:
        vx, vy = self.nearest_vertex(x + width / 2, y)
        return vx - width / 2, vy

    def snap_group_dimensions(self, raw_width: float, raw_height: float | None = None) -> tuple[float, float]:
        # Height always follows width so all four diamond vertices stay on the lattice
        width = max(ISO_MIN_GROUP_WIDTH, round_half_up(raw_width / ISO_GROUP_STEP) * ISO_GROUP_STEP)
        return float(width), width / 2


_CARTESIAN = CartesianGrid()
_ISOMETRIC = IsometricGrid()


def get_grid(view_mode: str = "2d") -> CartesianGrid | IsometricGrid:
    return _ISOMETRIC if view_mode == "isometric" else _CARTESIAN


def snap_point(x: float, y: float, view_mode: str = "2d") -> tuple[float, float]:
    return get_grid(view_mode).snap_point(x, y)


def snap_group_position(x: float, y: float, width: float, view_mode: str = "2d") -> tuple[float, float]:
    return get_grid(view_mode).snap_group_position(x, y, width)


def snap_group_dimensions(
    raw_width: float, view_mode: str = "2d", raw_height: float | None = None
) -> tuple[float, float]:
    return get_grid(view_mode).snap_group_dimensions(raw_width, raw_height)


def is_lattice_vertex(x: float, y: float) -> bool:
    return _ISOMETRIC.is_vertex(x, y)
