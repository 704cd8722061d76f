"""
Core package aggregator for civitas contracts (grammar, errors, constants, serde, typing).

## Contracts (single source of truth)
- Grammar — enums for marks, stats, coords, scales, positions, scale modes, shapes,
  plus normalization helpers.
- Errors — GrammarError, ViewSpecError, StatError.
- Constants — palette, theme, figure defaults, namespaces, village colors.
- Serde — canonical JSON.
- Typing — Point2/Point3/Face/Node aliases.

## Notes
- Zero-IO policy: stdlib only; no file/network IO.
- Naming policy: enum `.value` and field names are lower_snake.

## Downstream usage
- civitas.plot — views, stats, and renderers dispatch on grammar enums.
- civitas.village — meshes use Point3/Face aliases and VILLAGE_COLORS.
- civitas.site — JSON-LD writer serializes via serde.
- civitas.io.config — Settings defaults come from constants.

## Examples
```python
from civitas.core.grammar import Mark, mark_from_value
mark_from_value("band-h") == Mark.BAND_H  # True
```
"""
