from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError
from .markup import DEFAULT_THEME
from .utils import normalize_base_url, parse_int

CONFIG_NAME = "site.toml"
INDEX_FRAGMENT_NAME = "_index.md"
FEED_LIMIT = 20
RECENT_LIMIT = 20


@dataclass(frozen=True)
class Link:
    title: str
    url: str


@dataclass(frozen=True)
class SiteSettings:
    base_url: str = "/"
    social: Optional[str] = None
    top_links: tuple[Link, ...] = ()
    highlight_theme: str = DEFAULT_THEME
    feed_limit: int = FEED_LIMIT
    recent_limit: int = RECENT_LIMIT

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


def parse_links(value: object) -> tuple[Link, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError("top_links must be a list of {title, url} tables")
    links = []
    for item in value:
        if not isinstance(item, dict) or not item.get("title") or not item.get("url"):
            raise ConfigError(f"top_links entry needs a title and a url: {item!r}")
        links.append(Link(title=str(item["title"]), url=str(item["url"])))
    return tuple(links)


def settings_from_config(
    config: dict, base_url: Optional[str] = None, dev: bool = False
) -> SiteSettings:
    """Build settings from a loaded config mapping.

    Precedence for the base URL: ``dev`` (always ``/``), then an explicit
    ``base_url`` argument, then the config file, then ``/``.
    """
    if dev:
        base_url = "/"
    elif base_url is None:
        base_url = str(config.get("base_url") or "/")
    social = config.get("social", config.get("mastodon"))
    return SiteSettings(
        base_url=base_url,
        social=str(social) if social else None,
        top_links=parse_links(config.get("top_links")),
        highlight_theme=str(config.get("highlight_theme") or DEFAULT_THEME),
        feed_limit=max(0, parse_int(config.get("feed_limit"), FEED_LIMIT)),
        recent_limit=max(0, parse_int(config.get("recent_limit"), RECENT_LIMIT)),
    )


def read_index_fragment(indir: Path, index: Optional[Path] = None) -> Optional[str]:
    if index is None:
        index = indir / INDEX_FRAGMENT_NAME
        if not index.is_file():
            return None
    try:
        return index.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read index fragment {index}: {exc}") from exc
