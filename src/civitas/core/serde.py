"""
Canonical JSON serialization/deserialization utilities.

Provides a single canonical JSON policy used by the JSON-LD writer and by tests
that compare documents. This module is zero-IO and uses only the Python
standard library.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
    - Pretty output (for files meant to be read by people) uses
      `json_dumps_pretty`, which keeps key order as given.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "json_loads",
    "json_dumps_canonical",
    "json_dumps_pretty",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.

    Notes:
        This function assumes the input is JSON-serializable and does not perform
        coercion of unsupported types.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def json_dumps_pretty(obj: Any, indent: int = 2) -> str:
    """Serialize with indentation, preserving insertion order of keys."""
    return json.dumps(obj, indent=indent, ensure_ascii=False)


def json_loads(s: str) -> Any:
    """
    Deserialize a JSON string to Python objects using the stdlib json module.

    Args:
        s (str): JSON string to parse.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).
    """
    return json.loads(s)
