from __future__ import annotations

from pathlib import Path

import pytest

from civitas.core.constants import BASE_URL, LDNS, PALETTE
from civitas.io.config import Settings
from civitas.io.errors import IoConfigError

_ENV_KEYS = [
    "CIVITAS_WIDTH",
    "CIVITAS_HEIGHT",
    "CIVITAS_MARGIN",
    "CIVITAS_OUT_DIR",
    "CIVITAS_THEME_BG",
    "CIVITAS_THEME_GRID",
    "CIVITAS_THEME_FONT_SIZE",
    "CIVITAS_THEME_PALETTE",
    "CIVITAS_SITE_DIR",
    "CIVITAS_DB_PATH",
    "CIVITAS_LDNS",
    "CIVITAS_BASE_URL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def _write_civitas_toml(tmp: Path, content: str) -> Path:
    p = tmp / "civitas.toml"
    p.write_text(content)
    return p


def test_settings_precedence_env_over_toml(clean_env: Path, monkeypatch) -> None:
    # Arrange TOML
    _write_civitas_toml(
        clean_env,
        """
        [civitas]
        width = 800
        out_dir = "toml_out"

        [civitas.site]
        ldns = "toml_ns"
        """.strip(),
    )
    # Arrange ENV that should override TOML
    monkeypatch.setenv("CIVITAS_WIDTH", "1024")
    monkeypatch.setenv("CIVITAS_LDNS", "env_ns")

    # Act
    s = Settings.load()

    # Assert precedence: env > TOML > defaults
    assert s.width == 1024
    assert s.out_dir == "toml_out"
    assert s.site.ldns == "env_ns"
    assert s.height == 400


def test_settings_from_toml_top_level_keys(clean_env: Path) -> None:
    _write_civitas_toml(
        clean_env,
        """
        height = 300
        [theme]
        font_size = 11
        palette = "#111111, #222222"
        """.strip(),
    )

    s = Settings.load()

    assert s.height == 300
    assert s.theme.font_size == 11
    assert s.theme.palette == ("#111111", "#222222")


def test_settings_from_pyproject_tool_table(clean_env: Path) -> None:
    (clean_env / "pyproject.toml").write_text('[tool.civitas]\nmargin = 25\n[tool.civitas.site]\ndb_path = "meta/db.yml"\n')

    s = Settings.load()

    assert s.margin == 25
    assert s.site.db_path == "meta/db.yml"


def test_settings_defaults_when_no_config(clean_env: Path) -> None:
    s = Settings.load()

    assert (s.width, s.height, s.margin) == (600, 400, 40)
    assert s.out_dir == "out"
    assert s.theme.palette == PALETTE
    assert s.site.ldns == LDNS
    assert s.site.base_url == BASE_URL


def test_invalid_env_values_fall_back_to_previous_layer(clean_env: Path, monkeypatch) -> None:
    _write_civitas_toml(clean_env, "width = 700\n")
    monkeypatch.setenv("CIVITAS_WIDTH", "wide")

    s = Settings.load()

    assert s.width == 700


def test_explicit_invalid_toml_raises(clean_env: Path) -> None:
    bad = _write_civitas_toml(clean_env, "width = = 3\n")

    with pytest.raises(IoConfigError):
        Settings.from_toml(bad)


def test_validate_rejects_margin_that_leaves_no_area() -> None:
    with pytest.raises(IoConfigError):
        Settings(width=100, height=100, margin=60).validate()
    assert Settings().validate() == Settings()


def test_load_validates_merged_geometry(clean_env: Path, monkeypatch) -> None:
    _write_civitas_toml(clean_env, "width = 200\nheight = 200\n")
    monkeypatch.setenv("CIVITAS_MARGIN", "100")

    with pytest.raises(IoConfigError, match="margin 100"):
        Settings.load()
