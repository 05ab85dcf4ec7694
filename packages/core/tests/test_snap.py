"""Tests for grid snapping on the 2D and isometric lattices."""

from __future__ import annotations

import math

import pytest
from azurecraft.snap import (
    ISO_CUBE_BOTTOM_Y,
    ISO_DIAMOND_HALF_WIDTH,
    ISO_GRID,
    IsometricGrid,
    get_grid,
    is_lattice_vertex,
    round_half_up,
    snap_group_dimensions,
    snap_group_position,
    snap_point,
)

SAMPLE_POINTS = [(x * 7.3, y * 11.9) for x in range(-10, 30) for y in range(-10, 30)]


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2
    assert round_half_up(1.49) == 1


class TestCartesian:
    def test_snap_point(self):
        assert snap_point(29, 31) == (20.0, 40.0)
        assert snap_point(10, 10) == (20.0, 20.0)
        assert snap_point(-9, 0) == (0.0, 0.0)

    def test_snap_point_is_idempotent(self):
        for x, y in SAMPLE_POINTS[:50]:
            once = snap_point(x, y)
            assert snap_point(*once) == once

    def test_non_isometric_modes_use_square_grid(self):
        assert get_grid("cost-heatmap").name == "cartesian"
        assert get_grid("compliance").name == "cartesian"
        assert get_grid("bogus").name == "cartesian"

    def test_group_dimensions(self):
        assert snap_group_dimensions(330, "2d", 170) == (320.0, 160.0)

    def test_group_dimensions_minimums(self):
        assert snap_group_dimensions(10, "2d", 10) == (200.0, 120.0)

    def test_group_height_defaults_to_half_width(self):
        assert snap_group_dimensions(480) == (480.0, 240.0)

    def test_group_position_snaps_like_a_point(self):
        assert snap_group_position(33, 47, 400) == (40.0, 40.0)


class TestIsometric:
    def test_known_point(self):
        # Anchor (40, 55) lands on vertex (40, 60)
        assert snap_point(0, 0, "isometric") == (0.0, 5.0)

    def test_anchor_always_on_even_parity_vertex(self):
        for x, y in SAMPLE_POINTS:
            sx, sy = snap_point(x, y, "isometric")
            assert is_lattice_vertex(sx + ISO_DIAMOND_HALF_WIDTH, sy + ISO_CUBE_BOTTOM_Y)

    def test_anchor_is_nearest_candidate(self):
        half = ISO_GRID / 2
        for x, y in SAMPLE_POINTS:
            ax, ay = x + ISO_DIAMOND_HALF_WIDTH, y + ISO_CUBE_BOTTOM_Y
            sx, sy = snap_point(x, y, "isometric")
            chosen = math.dist((sx + ISO_DIAMOND_HALF_WIDTH, sy + ISO_CUBE_BOTTOM_Y), (ax, ay))
            k0, j0 = math.floor(ax / ISO_GRID), math.floor(ay / half)
            candidates = [
                math.dist((k * ISO_GRID, j * half), (ax, ay))
                for k in (k0, k0 + 1)
                for j in (j0, j0 + 1)
                if (k + j) % 2 == 0
            ]
            assert chosen == pytest.approx(min(candidates))

    def test_is_vertex(self):
        grid = IsometricGrid()
        assert grid.is_vertex(0, 0)
        assert grid.is_vertex(40, 20)
        assert not grid.is_vertex(40, 0)
        assert not grid.is_vertex(10, 0)

    def test_group_position_puts_top_vertex_on_lattice(self):
        for x, y in SAMPLE_POINTS[:200]:
            gx, gy = snap_group_position(x, y, 320, "isometric")
            assert is_lattice_vertex(gx + 160, gy)

    def test_group_dimensions(self):
        assert snap_group_dimensions(330, "isometric") == (320.0, 160.0)
        assert snap_group_dimensions(50, "isometric") == (160.0, 80.0)

    def test_group_height_ignores_requested_height(self):
        assert snap_group_dimensions(400, "isometric", 999) == (400.0, 200.0)

    @pytest.mark.parametrize("raw", [0, 37, 159, 161, 250, 333, 777, 1024])
    def test_group_dimension_invariants(self, raw):
        width, height = snap_group_dimensions(raw, "isometric")
        assert height == width / 2
        assert width % 80 == 0
        assert width >= 160
