"""
Lightweight typing aliases used across the plot, markup, and village modules.

This module contains no runtime logic and is zero-IO.

Notes:
    - Node is the hiccup convention: ``[tag, attrs?, *children]`` as a list.
    - Keep the surface small and stable to avoid churn in dependents.

Examples:
    >>> from civitas.core.typing import Point3, Node
    >>> def lift(p: tuple[float, float]) -> Point3:
    ...     return (p[0], p[1], 0.0)
    >>> lift((1.0, 2.0))
    (1.0, 2.0, 0.0)
    >>> node: Node = ["circle", {"r": 2}]
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "Point2",
    "Point3",
    "Face",
    "Node",
    "Attrs",
    "JsonDict",
]

Point2 = tuple[float, float]
Point3 = tuple[float, float, float]
# Indices into a mesh's vertex list, in winding order.
Face = tuple[int, ...]

Node = list[Any]
Attrs = dict[str, Any]

JsonDict = dict[str, Any]
