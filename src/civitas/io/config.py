"""
Configuration for civitas rendering and site tooling.

Defines Settings, a frozen dataclass carrying figure geometry, theme, and site
configuration. Defaults are sourced from civitas.core.constants (the single
source of truth).

Source of truth
- civitas.core.constants.DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_MARGIN
- civitas.core.constants.PALETTE, THEME_BG, THEME_GRID, THEME_FONT_SIZE
- civitas.core.constants.LDNS, BASE_URL

Import DAG discipline
- Depends only on stdlib and civitas.core.constants.
- Does not import higher layers (plot, village, site, app).

Notes
- Precedence: environment (CIVITAS_*) > TOML (civitas.toml, then
  [tool.civitas] in pyproject.toml) > defaults.
- Values that fail to parse are ignored, leaving the lower layer in place.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from civitas.core.constants import BASE_URL, LDNS, PALETTE, THEME_BG, THEME_FONT_SIZE, THEME_GRID
from civitas.core.constants import DEFAULT_HEIGHT as CORE_HEIGHT
from civitas.core.constants import DEFAULT_MARGIN as CORE_MARGIN
from civitas.core.constants import DEFAULT_WIDTH as CORE_WIDTH

from .errors import IoConfigError

__all__ = [
    "ThemeSettings",
    "SiteSettings",
    "Settings",
]


@dataclass(frozen=True)
class ThemeSettings:
    """Panel styling used by the plot renderers.

    Notes:
        - palette cycles by category index; unknown categories take the first color.
        - font_size applies to tick labels; headers and legends derive from it.
    """

    bg: str = THEME_BG
    grid: str = THEME_GRID
    font_size: int = THEME_FONT_SIZE
    palette: tuple[str, ...] = PALETTE


@dataclass(frozen=True)
class SiteSettings:
    """Site metadata locations and JSON-LD identifiers."""

    site_dir: str = "site"
    db_path: str = "site/db.yml"
    ldns: str = LDNS
    base_url: str = BASE_URL


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for civitas.

    Attributes:
        width (int): Default figure width in pixels.
        height (int): Default figure height in pixels.
        margin (int): Panel margin in pixels (room for tick labels).
        out_dir (str): Directory where the CLI writes rendered artifacts.
        theme (ThemeSettings): Panel styling.
        site (SiteSettings): Site metadata locations and JSON-LD identifiers.

    Examples:
        >>> from civitas.io.config import Settings
        >>> Settings(width=800).width
        800
    """

    width: int = CORE_WIDTH
    height: int = CORE_HEIGHT
    margin: int = CORE_MARGIN
    out_dir: str = "out"
    theme: ThemeSettings = field(default_factory=ThemeSettings)
    site: SiteSettings = field(default_factory=SiteSettings)

    def validate(self) -> Settings:
        """Return self, or raise IoConfigError when geometry cannot hold a panel."""
        if self.width <= 0 or self.height <= 0:
            raise IoConfigError(f"width/height must be positive, got {self.width}x{self.height}")
        if self.margin < 0 or 2 * self.margin >= min(self.width, self.height):
            raise IoConfigError(f"margin {self.margin} leaves no drawing area")
        if not self.theme.palette:
            raise IoConfigError("theme palette must not be empty")
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: Settings, cfg: dict[str, Any] | None) -> Settings:
        """Apply a loose config mapping onto Settings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _int(v: Any) -> int | None:
            try:
                return int(v)
            except (TypeError, ValueError):
                return None

        for key in ("width", "height", "margin"):
            if key in cfg:
                n = _int(cfg[key])
                if n is not None:
                    s = replace(s, **{key: n})

        if "out_dir" in cfg and isinstance(cfg["out_dir"], str):
            s = replace(s, out_dir=cfg["out_dir"])

        # theme (nested mapping)
        if "theme" in cfg and isinstance(cfg["theme"], dict):
            t = cfg["theme"]
            curr = s.theme
            font_size = _int(t.get("font_size", curr.font_size))
            palette = t.get("palette", curr.palette)
            if isinstance(palette, str):
                palette = [p.strip() for p in palette.split(",") if p.strip()]
            s = replace(
                s,
                theme=replace(
                    curr,
                    bg=str(t.get("bg", curr.bg)),
                    grid=str(t.get("grid", curr.grid)),
                    font_size=font_size if font_size is not None else curr.font_size,
                    palette=tuple(str(p) for p in palette) or curr.palette,
                ),
            )

        # site (nested mapping)
        if "site" in cfg and isinstance(cfg["site"], dict):
            st = cfg["site"]
            curr_site = s.site
            s = replace(
                s,
                site=replace(
                    curr_site,
                    site_dir=str(st.get("site_dir", curr_site.site_dir)),
                    db_path=str(st.get("db_path", curr_site.db_path)),
                    ldns=str(st.get("ldns", curr_site.ldns)),
                    base_url=str(st.get("base_url", curr_site.base_url)),
                ),
            )

        return s

    @classmethod
    def from_env(cls, base: Settings | None = None, prefix: str = "CIVITAS_") -> Settings:
        """
        Build Settings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - CIVITAS_WIDTH, CIVITAS_HEIGHT, CIVITAS_MARGIN
            - CIVITAS_OUT_DIR
            - CIVITAS_THEME_BG, CIVITAS_THEME_GRID, CIVITAS_THEME_FONT_SIZE
            - CIVITAS_THEME_PALETTE (comma-separated colors)
            - CIVITAS_SITE_DIR, CIVITAS_DB_PATH, CIVITAS_LDNS, CIVITAS_BASE_URL
        """
        s = base or cls()

        def get(name: str) -> str | None:
            return os.getenv(prefix + name)

        mapping: dict[str, Any] = {}
        for key in ("WIDTH", "HEIGHT", "MARGIN", "OUT_DIR"):
            v = get(key)
            if v:
                mapping[key.lower()] = v

        for key in ("BG", "GRID", "FONT_SIZE", "PALETTE"):
            v = get("THEME_" + key)
            if v:
                mapping.setdefault("theme", {})[key.lower()] = v

        site_keys = {
            "SITE_DIR": "site_dir",
            "DB_PATH": "db_path",
            "LDNS": "ldns",
            "BASE_URL": "base_url",
        }
        for env_key, cfg_key in site_keys.items():
            v = get(env_key)
            if v:
                mapping.setdefault("site", {})[cfg_key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Build Settings from a TOML file.

        Search order when `path` is None:
            1) ./civitas.toml (with either a top-level [civitas] table or direct keys)
            2) ./pyproject.toml under [tool.civitas]

        Returns defaults if no file is present. An explicit `path` that does not
        parse raises IoConfigError.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "civitas.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                if path is not None:
                    raise IoConfigError(f"invalid TOML in {p}: {exc}") from exc
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("civitas") if isinstance(tool, dict) else None
            elif isinstance(data.get("civitas"), dict):
                cfg = data["civitas"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Load Settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (civitas.toml, pyproject.toml).

        Returns:
            Settings

        Raises:
            IoConfigError: The merged geometry or palette is unusable (see validate).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s.validate()
