from __future__ import annotations

import re

import pytest

from civitas.core.constants import SLIDE_PALETTE
from civitas.village.meshes import (
    COBBLE,
    Mesh,
    aqueduct_mesh,
    cart_mesh,
    circle_mesh,
    colosseum_mesh,
    cylinder_mesh,
    fire_mesh,
    forum_mesh,
    granary_mesh,
    house_mesh,
    obelisk_mesh,
    temple_mesh,
)
from civitas.village.shading import (
    MIN_LIGHTING,
    face_normal,
    lighting,
    shade_color,
    shade_faces,
    shade_mesh,
)

_HEX = re.compile(r"^#[0-9a-f]{6}$")


def test_mesh_rejects_color_count_mismatch() -> None:
    with pytest.raises(ValueError, match="1 faces but 2 colors"):
        Mesh(role="bad", vertices=((0, 0, 0), (1, 0, 0), (0, 1, 0)), faces=((0, 1, 2),), colors=("#fff", "#000"))


def test_mesh_rejects_out_of_range_index() -> None:
    with pytest.raises(ValueError, match="indexes outside 3 vertices"):
        Mesh(role="bad", vertices=((0, 0, 0), (1, 0, 0), (0, 1, 0)), faces=((0, 1, 3),), colors=("#fff",))


@pytest.mark.parametrize(
    "build",
    [
        lambda: circle_mesh(5, 6, "#62B132"),
        lambda: house_mesh(4, 2, 1, 0.5),
        lambda: granary_mesh(6, 6, 3, 6),
        lambda: aqueduct_mesh(-44, 3, 6, 2, 4),
        lambda: obelisk_mesh(2, 14, 2, 4),
        lambda: cylinder_mesh(10, 1, 10, "#999999"),
        lambda: colosseum_mesh(10, 8, 10),
        cart_mesh,
        fire_mesh,
    ],
)
def test_builders_produce_valid_meshes(build) -> None:
    # Arrange / Act (construction validates faces and colors)
    mesh = build()

    # Assert
    assert mesh.faces
    assert len(mesh.colors) == len(mesh.faces)


def test_house_has_floor_walls_and_roof() -> None:
    mesh = house_mesh(2, 2, 2, 1)
    assert mesh.role == "house"
    assert len(mesh.vertices) == 10
    assert len(mesh.faces) == 9
    # Ridge sits on the center line above the walls
    assert mesh.vertices[8] == (0.0, 1.0, 3.0)


def test_granary_and_cylinder_face_counts() -> None:
    assert len(granary_mesh(6, 6, 3, 6).faces) == 1 + 6 + 6
    assert len(cylinder_mesh(1, 10, 6, "#999999").faces) == 6


def test_fire_uses_flame_color() -> None:
    mesh = fire_mesh()
    assert set(mesh.colors) == {SLIDE_PALETTE[9]}
    assert mesh.vertices[-1] == (0.0, 0.0, 10.0)


def test_colosseum_references_cobble_pattern() -> None:
    assert COBBLE in colosseum_mesh(10, 8, 10).colors


def test_walk_visits_children_depth_first() -> None:
    temple = temple_mesh()
    roles = [m.role for m in temple.walk()]
    assert roles[0] == "temple"
    assert roles[1] == "base"
    assert roles.count("pillar") == 10
    assert roles[-1] == "pediment"
    assert len(forum_mesh().walk()) == 4


def test_face_normal_of_ground_square_points_up() -> None:
    vs = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    assert face_normal(vs, (0, 1, 2, 3)) == (0, 0, 1)


def test_lighting_is_clamped_from_below() -> None:
    assert lighting((1, 1, 1)) == pytest.approx(1.0)
    assert lighting((0, 0, -1)) == MIN_LIGHTING


def test_shade_color_mixes_toward_black_by_lighting() -> None:
    # Lit faces go black; faces turned away keep (1 - MIN_LIGHTING) of each channel.
    assert shade_color("#ffffff", (1, 1, 1)) == "#000000"
    assert shade_color("#646464", (0, 0, -1)) == "#464646"
    dim = f"{round(255 * (1 - MIN_LIGHTING)):02x}"
    assert shade_color("#FFF", (0, 0, -1)) == f"#{dim * 3}"


def test_shade_color_passes_pattern_fills_through() -> None:
    assert shade_color(COBBLE, (0, 0, -1)) == COBBLE


def test_shade_color_rejects_non_hex() -> None:
    with pytest.raises(ValueError, match="not a hex color"):
        shade_color("teal", (0, 0, 1))


def test_shade_faces_one_color_per_face() -> None:
    vs = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 0, 1)]
    colors = shade_faces(vs, [(0, 1, 2), (0, 3, 1)], "#808080")
    assert len(colors) == 2
    assert all(_HEX.match(c) for c in colors)


def test_shade_mesh_keeps_geometry_and_recurses() -> None:
    # Arrange
    temple = temple_mesh()

    # Act
    shaded = shade_mesh(temple)

    # Assert
    assert [m.role for m in shaded.walk()] == [m.role for m in temple.walk()]
    for before, after in zip(temple.walk(), shaded.walk()):
        assert after.vertices == before.vertices
        assert after.faces == before.faces
        assert all(_HEX.match(c) or c.startswith("url(") for c in after.colors)
