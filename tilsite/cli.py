from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional

from .collection import PostCollection
from .config import CONFIG_NAME, load_config, read_index_fragment, settings_from_config
from .content import read_posts
from .errors import InputNotFound, TilsiteError
from .markup import MarkdownRenderer, PygmentsHighlighter
from .pages import SiteRenderer
from .render import Resources, ensure_dir

POSTS_DIR_NAME = "tils"
OUTPUT_DIR_NAME = "site"


def build_site(args: argparse.Namespace) -> Path:
    cwd = Path.cwd()
    indir = Path(args.indir) if args.indir else cwd
    tildir = indir / POSTS_DIR_NAME
    output_dir = Path(args.outdir) if args.outdir else cwd / OUTPUT_DIR_NAME
    config_path = Path(args.config) if args.config else indir / CONFIG_NAME

    if not tildir.is_dir():
        raise InputNotFound(tildir)

    settings = settings_from_config(load_config(config_path), base_url=args.base_url, dev=args.dev)
    index_fragment = read_index_fragment(indir, Path(args.index) if args.index else None)

    markdown = MarkdownRenderer(PygmentsHighlighter(settings.highlight_theme))
    collection = PostCollection(read_posts(tildir, markdown))
    collection.check_slugs()
    print(f"Loaded {len(collection)} posts from {tildir}")

    ensure_dir(output_dir)
    renderer = SiteRenderer(output_dir, settings, collection, markdown, Resources.load(), index_fragment)
    renderer.render()
    return output_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a directory of TILs into a static site.")
    parser.add_argument(
        "-i",
        "--indir",
        default=None,
        help=f"Directory to render from. Must contain a '{POSTS_DIR_NAME}' subdirectory (default: current directory).",
    )
    parser.add_argument(
        "-o",
        "--outdir",
        default=None,
        help=f"Directory to render into (default: ./{OUTPUT_DIR_NAME}).",
    )
    parser.add_argument(
        "--index",
        default=None,
        help="Markdown fragment for the front page (default: <indir>/_index.md, if present).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to site config file, TOML/YAML/JSON (default: <indir>/{CONFIG_NAME}).",
    )
    parser.add_argument("--base-url", default=None, help="Base site URL to render links from.")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Render links against '/' regardless of the configured base URL.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    start = time.perf_counter()
    try:
        output_dir = build_site(args)
    except TilsiteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {output_dir}")
