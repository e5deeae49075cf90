from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import MalformedFrontMatter, MissingRequiredField, TilsiteError
from .markup import MarkdownRenderer

POST_SUFFIX = ".md"


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "post"


@dataclass(frozen=True)
class PostMeta:
    title: str
    date: str
    tags: tuple[str, ...] = ()
    origin: Optional[str] = None


@dataclass(frozen=True)
class Post:
    meta: PostMeta
    content: str
    source: str = field(default="", compare=False)

    @property
    def slug(self) -> str:
        return slugify(self.meta.title)


def split_front_matter(text: str, source: str = "<text>") -> tuple[dict, str]:
    """Split a leading ``---`` delimited YAML block from the body.

    Text without a leading fence has no metadata. An unterminated fence or a
    block that is not a YAML mapping is an error.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        raise MalformedFrontMatter(source, "unterminated front matter block")

    try:
        # BaseLoader keeps every scalar as the text the author wrote.
        data = yaml.load("\n".join(lines[1:end]), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise MalformedFrontMatter(source, str(exc)) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontMatter(source, "front matter must be a mapping")
    body = "\n".join(lines[end + 1 :])
    return data, body


def _scalar(value: object) -> str:
    return str(value).strip()


def parse_tags(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.strip()
        if value.startswith("[") and value.endswith("]"):
            items = [item.strip().strip("'\"") for item in value[1:-1].split(",")]
        else:
            items = [item.strip() for item in value.split(",")]
    elif isinstance(value, (list, tuple, set)):
        items = [_scalar(item) for item in value if item is not None]
    else:
        items = [_scalar(value)]
    return tuple(sorted({item for item in items if item}))


def parse_meta(data: dict, source: str = "<text>") -> PostMeta:
    meta = {str(key).strip().lower(): value for key, value in data.items()}

    def required(key: str) -> str:
        value = meta.get(key)
        text = _scalar(value) if value is not None else ""
        if not text:
            raise MissingRequiredField(source, key)
        return text

    origin = meta.get("origin")
    if origin is not None:
        origin = _scalar(origin) or None
    return PostMeta(
        title=required("title"),
        date=required("date"),
        tags=parse_tags(meta.get("tags")),
        origin=origin,
    )


def parse_post(text: str, renderer: MarkdownRenderer, source: str = "<text>") -> Post:
    data, body = split_front_matter(text, source)
    meta = parse_meta(data, source)
    return Post(meta=meta, content=renderer.convert(body, source), source=source)


def list_post_files(tildir: Path) -> list[Path]:
    return sorted(
        (path for path in tildir.iterdir() if path.is_file() and path.name.endswith(POST_SUFFIX)),
        key=lambda p: p.name,
    )


def read_posts(tildir: Path, renderer: MarkdownRenderer) -> list[Post]:
    posts = []
    for md_file in list_post_files(tildir):
        try:
            raw_text = md_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TilsiteError(f"failed to read {md_file}: {exc}") from exc
        posts.append(parse_post(raw_text, renderer, md_file.name))
    return posts
