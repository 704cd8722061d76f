from __future__ import annotations

import math

import pytest

from civitas.village.geometry import (
    DIRECTIONS,
    SIN60,
    build_sector,
    cube_ring,
    cube_spiral,
    cube_to_cartesian_flat,
    hex_points,
    sectors,
    spiral,
    triangular_layers,
)
from civitas.village.projection import (
    aligned_faces,
    circle_verts,
    index_ranges,
    iso,
    rotate_verts,
    translate_verts,
)


def _distance(c: tuple[int, int, int]) -> int:
    return max(abs(v) for v in c)


@pytest.mark.parametrize("t,expected", [(1, 1), (2, 2), (3, 2), (4, 3), (6, 3), (7, 4), (10, 4)])
def test_triangular_layers_rounds_up(t: int, expected: int) -> None:
    assert triangular_layers(t) == expected


def test_directions_are_unit_cube_steps() -> None:
    assert len(DIRECTIONS) == 6
    for d in DIRECTIONS:
        assert sum(d) == 0
        assert _distance(d) == 1


@pytest.mark.parametrize("radius", [1, 2, 3])
def test_cube_ring_has_six_r_cells_at_distance_r(radius: int) -> None:
    ring = cube_ring(radius)
    assert len(ring) == 6 * radius
    assert len(set(ring)) == len(ring)
    assert all(sum(c) == 0 and _distance(c) == radius for c in ring)
    # Starts on the direction-4 axis
    assert ring[0] == tuple(v * radius for v in DIRECTIONS[4])


def test_cube_ring_zero_is_origin() -> None:
    assert cube_ring(0) == [(0, 0, 0)]


@pytest.mark.parametrize("k", [1, 2, 3, 4])
def test_spiral_size_and_order(k: int) -> None:
    cells = cube_spiral(k)
    assert len(cells) == 1 + 3 * k * (k - 1)
    # Innermost rings come first
    dists = [_distance(c) for c in cells]
    assert dists == sorted(dists)
    assert spiral(k)[0] == (0.0, 0.0)


def test_flat_cartesian_neighbors_are_sqrt3_apart() -> None:
    for d in DIRECTIONS:
        x, y = cube_to_cartesian_flat(d)
        assert math.hypot(x, y) == pytest.approx(math.sqrt(3))


def test_sector_starts_next_to_origin_and_moves_outward() -> None:
    sector = build_sector(0, 3)
    assert sector[0] == pytest.approx(cube_to_cartesian_flat(DIRECTIONS[0]))
    assert len(sector) == sum((k + 1) ** 2 for k in range(1, 4))
    assert len(sectors(2)) == 6


def test_hex_points_scale_the_unit_hexagon() -> None:
    corners = hex_points(10)
    assert len(corners) == 6
    assert corners[0] == (10.0, 0.0)
    assert corners[1] == pytest.approx((5.0, 10 * SIN60))
    assert all(math.hypot(x, y) == pytest.approx(10.0) for x, y in corners)


def test_iso_axes() -> None:
    assert iso((0, 0, 1)) == (0.0, -1.0)
    x, y = iso((1, 0, 0))
    assert (x, y) == pytest.approx((math.sqrt(3) / 2, 0.5))
    x, y = iso((0, 1, 0))
    assert (x, y) == pytest.approx((-math.sqrt(3) / 2, 0.5))


def test_circle_verts_lie_on_the_circle_in_the_ground_plane() -> None:
    vs = circle_verts(2.0, 8)
    assert len(vs) == 8
    for x, y, z in vs:
        assert z == 0.0
        assert math.hypot(x, y) == pytest.approx(2.0)


def test_translate_and_rotate_verts() -> None:
    assert translate_verts([(1, 2, 3)], (1, 1, -3)) == [(2, 3, 0)]
    (v,) = rotate_verts([(1, 0, 0)], (0, 0, math.pi / 2))
    assert v == pytest.approx((0.0, 1.0, 0.0), abs=1e-9)
    (v,) = rotate_verts([(0, 1, 0)], (math.pi / 2, 0, 0))
    assert v == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)


def test_aligned_faces_wrap_around_the_ring() -> None:
    faces = aligned_faces(3, 0)
    assert faces == [(0, 1, 4, 3), (1, 2, 5, 4), (2, 0, 3, 5)]
    assert aligned_faces(2, 10)[0] == (10, 11, 13, 12)


def test_index_ranges_are_consecutive() -> None:
    assert index_ranges([2, 3, 1]) == [(0, 1), (2, 3, 4), (5,)]
    assert index_ranges([]) == []
