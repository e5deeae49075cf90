from __future__ import annotations

from typing import Iterable

from .content import Post, slugify
from .errors import SlugCollision


def newest_first(posts: Iterable[Post]) -> list[Post]:
    """Order posts by date, most recent first.

    Dates compare as plain strings, so they must be zero-padded (``2024-03-07``).
    The ascending sort is stable and the result is reversed afterwards, which
    means that among posts sharing a date the one inserted first comes last.
    """
    ordered = sorted(posts, key=lambda post: post.meta.date)
    ordered.reverse()
    return ordered


class PostCollection:
    def __init__(self, posts: Iterable[Post]) -> None:
        self.posts: tuple[Post, ...] = tuple(posts)

    def __iter__(self):
        return iter(self.posts)

    def __len__(self) -> int:
        return len(self.posts)

    def by_age(self) -> list[Post]:
        return newest_first(self.posts)

    def recent(self, limit: int) -> list[Post]:
        return self.by_age()[:limit]

    def tags(self) -> list[str]:
        return sorted({tag for post in self.posts for tag in post.meta.tags})

    def by_tag(self) -> dict[str, list[Post]]:
        return {tag: newest_first(post for post in self.posts if tag in post.meta.tags) for tag in self.tags()}

    def tag_counts(self) -> dict[str, int]:
        return {tag: len(posts) for tag, posts in self.by_tag().items()}

    def check_slugs(self) -> None:
        """Refuse to build when two posts or two tags would share an output path."""
        seen: dict[str, str] = {}
        for post in self.posts:
            path = f"post/{post.slug}"
            if path in seen:
                raise SlugCollision(path, seen[path], post.source or post.meta.title)
            seen[path] = post.source or post.meta.title
        for tag in self.tags():
            path = f"category/{slugify(tag)}"
            if path in seen:
                raise SlugCollision(path, f"tag '{seen[path]}'", f"tag '{tag}'")
            seen[path] = tag
