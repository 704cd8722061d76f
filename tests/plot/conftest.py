from __future__ import annotations

import polars as pl
import pytest

from civitas.io.config import Settings


@pytest.fixture
def small_df() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "a": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
            "b": [2.0, 4.0, 6.0, 8.0, 10.0, 12.0],
            "g": ["p", "q", "p", "q", "p", "q"],
            "k": ["x", "y", "x", "x", "z", "y"],
        }
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(width=400, height=300, margin=30)
