from __future__ import annotations

import pytest

from civitas.markup.hiccup import node_tag
from civitas.plot.gallery import EXAMPLES, example_names, get_example


@pytest.mark.parametrize("name", sorted(EXAMPLES))
def test_every_example_renders(name: str) -> None:
    node = get_example(name).render()
    assert node_tag(node) in ("svg", "div")


def test_splom_example_is_brushable() -> None:
    assert node_tag(get_example("splom").render()) == "div"


def test_overrides_win_over_example_options() -> None:
    node = get_example("polar").render(width=300, height=300)
    assert node[1]["height"] < 300


def test_unknown_example_lists_choices() -> None:
    with pytest.raises(KeyError) as ei:
        get_example("pie")
    assert "scatter" in str(ei.value)
    assert example_names()[0] == "scatter"
