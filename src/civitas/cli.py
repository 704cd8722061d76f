"""
civitas command line.

Subcommands:
    plot         Render a gallery example, a bundled dataset, or a CSV/Parquet file.
    village      Write the village slide deck as SVG (and optionally HTML).
    jsonld       Export the site database notebooks as JSON-LD.
    frontmatter  Check ``.qmd`` front matter under a site directory.
    explorer     Write the notebook hex-grid explorer.

Examples:
    civitas plot splom --html out/splom.html
    civitas plot data.csv --x a --y b --color group --geom point
    civitas village --shade --html out/village.html
    civitas jsonld --db site/db.yml --out site/resources.jsonld
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from civitas.core.errors import CivitasError
from civitas.io.config import Settings
from civitas.io.datasets import DATASETS, load_dataset, read_table
from civitas.io.errors import IoError
from civitas.plot import geoms
from civitas.plot.algebra import distribution, layer, views
from civitas.plot.gallery import EXAMPLES, get_example
from civitas.plot.plot import plot
from civitas.plot.save import save
from civitas.site.db import load_db
from civitas.site.explorer import hex_grid
from civitas.site.jsonld import write_jsonld
from civitas.site.metadata import front_matters, warnings, write_notebook_stub
from civitas.village.scene import village_svg

__all__ = ["build_argparser", "main"]

_GEOMS = {
    "point": geoms.point,
    "linear": geoms.linear,
    "smooth": geoms.smooth,
    "line": geoms.line_mark,
    "histogram": geoms.histogram,
    "bar": geoms.bar,
    "stacked-bar": geoms.stacked_bar,
    "value-bar": geoms.value_bar,
}


def _outputs(args: argparse.Namespace, default_stem: str, out_dir: str) -> dict[str, str | None]:
    """Output paths from --svg/--html/--png, defaulting to <out_dir>/<stem>.svg."""
    outs = {"out_svg": args.svg, "out_html": args.html, "out_png": args.png}
    if not any(outs.values()):
        outs["out_svg"] = str(Path(out_dir) / f"{default_stem}.svg")
    return outs


def _add_output_args(p: argparse.ArgumentParser, *, png: bool = True) -> None:
    p.add_argument("--svg", type=str, default=None, help="Write SVG to this path.")
    p.add_argument("--html", type=str, default=None, help="Write a standalone HTML page to this path.")
    if png:
        p.add_argument("--png", type=str, default=None, help="Write PNG (requires vl-convert-python).")
    else:
        p.set_defaults(png=None)


def _cmd_plot(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="plot",
        description="Render a gallery example, a bundled dataset, or a CSV/Parquet file.",
    )
    p.add_argument("source", nargs="?", default=None, help="Example name, dataset name, or table path.")
    p.add_argument("--list", action="store_true", help="List gallery examples and exit.")
    p.add_argument("--x", type=str, default=None, help="X column (tables and datasets).")
    p.add_argument("--y", type=str, default=None, help="Y column; omit for a histogram of X.")
    p.add_argument("--color", type=str, default=None, help="Color column.")
    p.add_argument("--geom", choices=sorted(_GEOMS), default=None, help="Layer geometry.")
    p.add_argument("--width", type=int, default=None, help="Figure width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Figure height in pixels.")
    p.add_argument("--coord", choices=["cartesian", "flip", "polar"], default=None, help="Coordinate system.")
    _add_output_args(p)
    args = p.parse_args(argv)

    if args.list or not args.source:
        for name, ex in EXAMPLES.items():
            print(f"{name:<14} {ex.title}")
        return 0

    size = {k: v for k, v in (("width", args.width), ("height", args.height)) if v is not None}
    if args.coord:
        size["coord"] = args.coord
    if args.source not in EXAMPLES and args.x is None:
        p.error("--x is required when plotting a table or dataset")

    try:
        settings = Settings.load()
        if args.source in EXAMPLES and args.x is None:
            node = get_example(args.source).render(**size)
            stem = args.source
        else:
            df = load_dataset(args.source) if args.source in DATASETS else read_table(args.source)
            opts = {"color": args.color} if args.color else {}
            if args.y is None:
                spec = _GEOMS[args.geom or "histogram"](**opts)
                vs = layer(distribution(df, args.x), spec)
            else:
                spec = _GEOMS[args.geom or "point"](**opts)
                vs = layer(views(df, [(args.x, args.y)]), spec)
            node = plot(vs, settings=settings, **size)
            stem = Path(args.source).stem
    except (IoError, CivitasError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    try:
        written = save(node, **_outputs(args, stem, settings.out_dir))
    except (IoError, RuntimeError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    for path in written:
        print(f"[INFO] Wrote {path}")
    return 0


def _cmd_village(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="village", description="Write the village slide deck.")
    p.add_argument("--shade", action="store_true", help="Shade mesh faces by their normals.")
    p.add_argument("--radius", type=float, default=50.0, help="Tile radius.")
    _add_output_args(p, png=False)
    args = p.parse_args(argv)

    settings = Settings.load()
    node = village_svg(radius=args.radius, shade=args.shade)
    try:
        written = save(node, **_outputs(args, "village", settings.out_dir))
    except IoError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    for path in written:
        print(f"[INFO] Wrote {path}")
    return 0


def _cmd_jsonld(argv: list[str]) -> int:
    settings = Settings.load()
    p = argparse.ArgumentParser(prog="jsonld", description="Export notebooks from the site db as JSON-LD.")
    p.add_argument("--db", type=str, default=settings.site.db_path, help="Site database YAML.")
    p.add_argument(
        "--out",
        type=str,
        default=str(Path(settings.site.site_dir) / "resources.jsonld"),
        help="Output JSON-LD path.",
    )
    p.add_argument("--ldns", type=str, default=settings.site.ldns, help="Linked-data namespace prefix.")
    p.add_argument("--base", type=str, default=settings.site.base_url, help="Base URL for resource ids.")
    args = p.parse_args(argv)

    try:
        db = load_db(args.db)
        path = write_jsonld(args.out, db["notebook"], args.ldns, args.base)
    except (IoError, KeyError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(f"[INFO] Wrote {path}")
    return 0


def _cmd_frontmatter(argv: list[str]) -> int:
    settings = Settings.load()
    p = argparse.ArgumentParser(prog="frontmatter", description="Check .qmd front matter under a site directory.")
    p.add_argument("--site-dir", type=str, default=settings.site.site_dir, help="Directory to scan.")
    p.add_argument("--db", type=str, default=None, help="Also create missing notebook stubs from this db.")
    p.add_argument("--root", type=str, default="notebooks", help="Root directory for notebook stubs.")
    args = p.parse_args(argv)

    try:
        fronts = front_matters(args.site_dir)
    except IoError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    # front_matter() already logged each warning as it read the file.
    problems = sum(len(warnings({k: v for k, v in front.items() if k != "source_path"})) for front in fronts)
    print(f"[INFO] Checked {len(fronts)} files, {problems} warnings")

    if args.db:
        try:
            db = load_db(args.db)
            created = sum(write_notebook_stub(nb, args.root) for nb in db["notebook"])
        except (IoError, ValueError) as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            return 1
        print(f"[INFO] Created {created} notebook stubs under {args.root}")
    return 1 if problems else 0


def _cmd_explorer(argv: list[str]) -> int:
    settings = Settings.load()
    p = argparse.ArgumentParser(prog="explorer", description="Write the notebook hex-grid explorer.")
    p.add_argument("--db", type=str, default=settings.site.db_path, help="Site database YAML.")
    p.add_argument("--width", type=float, default=500.0, help="Half-width of the viewBox.")
    _add_output_args(p, png=False)
    args = p.parse_args(argv)

    try:
        node = hex_grid(load_db(args.db), width=args.width)
        written = save(node, **_outputs(args, "explorer", settings.out_dir))
    except (IoError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    for path in written:
        print(f"[INFO] Wrote {path}")
    return 0


_COMMANDS = {
    "plot": _cmd_plot,
    "village": _cmd_village,
    "jsonld": _cmd_jsonld,
    "frontmatter": _cmd_frontmatter,
    "explorer": _cmd_explorer,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="civitas", description="Village scenes, plots, and site metadata.")
    sub = p.add_subparsers(dest="cmd", required=True)
    for name in _COMMANDS:
        sub.add_parser(name)
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    cmd, rest = argv[0], argv[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    else:
        try:
            code = handler(rest)
        except IoError as e:
            # Settings.load() failures surface here for every subcommand.
            print(f"[ERROR] {e}", file=sys.stderr)
            code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
