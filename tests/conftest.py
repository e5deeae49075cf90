"""Shared pytest fixtures for tilsite tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from tilsite.collection import PostCollection
from tilsite.config import SiteSettings
from tilsite.content import Post, PostMeta, slugify
from tilsite.markup import MarkdownRenderer, PygmentsHighlighter
from tilsite.render import Resources


def make_post(title: str, date: str, tags: tuple[str, ...] = (), origin: Optional[str] = None) -> Post:
    return Post(
        meta=PostMeta(title=title, date=date, tags=tuple(sorted(tags)), origin=origin),
        content=f"<p>{title}</p>",
        source=f"{slugify(title)}.md",
    )


def til_text(title: str, date: str, tags: tuple[str, ...] = (), body: str = "Body text.") -> str:
    lines = ["---", f"title: {title}", f"date: {date}"]
    if tags:
        lines.append(f"tags: [{', '.join(tags)}]")
    lines.extend(["---", body, ""])
    return "\n".join(lines)


@pytest.fixture
def markdown() -> MarkdownRenderer:
    return MarkdownRenderer(PygmentsHighlighter())


@pytest.fixture
def resources() -> Resources:
    return Resources.load()


@pytest.fixture
def settings() -> SiteSettings:
    return SiteSettings(base_url="https://til.example.org/")


@pytest.fixture
def two_posts() -> PostCollection:
    """The two-post scenario: an older rust post and a newer rust/web post."""
    return PostCollection(
        [
            make_post("Older rust note", "2024-01-01", ("rust",)),
            make_post("Newer web note", "2024-02-01", ("rust", "web")),
        ]
    )


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Input directory with an empty ``tils`` subdirectory."""
    (tmp_path / "in" / "tils").mkdir(parents=True)
    return tmp_path / "in"


@pytest.fixture
def write_til(site_root: Path) -> Callable[..., Path]:
    def _write(name: str, text: str) -> Path:
        path = site_root / "tils" / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
