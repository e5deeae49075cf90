from __future__ import annotations

import html
from pathlib import Path
from typing import Optional

from .collection import PostCollection
from .config import SiteSettings
from .content import Post, slugify
from .markup import Highlighter, MarkdownRenderer
from .render import Resources, render_template, write_text
from .utils import join_url

SITE_TITLE = "TILs"
BASE_TEMPLATE = "base.html"
STATIC_ASSETS = ("style.css", "index.js")
SYNTAX_STYLESHEET = "syntax.css"
FEED_NAME = "feed.rss"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"


def post_url(settings: SiteSettings, post: Post) -> str:
    return join_url(settings.base_url, f"post/{post.slug}/")


def category_url(settings: SiteSettings, tag: str) -> str:
    return join_url(settings.base_url, f"category/{slugify(tag)}/")


def build_nav(settings: SiteSettings) -> str:
    return "".join(
        f'<a href="{html.escape(link.url)}">{html.escape(link.title)}</a>' for link in settings.top_links
    )


def build_extra_head(settings: SiteSettings) -> str:
    if not settings.social:
        return ""
    return f'<link rel="me" href="{html.escape(settings.social)}">'


def build_footer(settings: SiteSettings) -> str:
    parts = [f'<a href="{join_url(settings.base_url, FEED_NAME)}">RSS</a>']
    if settings.social:
        parts.append(f'<a rel="me" href="{html.escape(settings.social)}">Social</a>')
    return " &middot; ".join(parts)


def build_tag_chips(settings: SiteSettings, tags: tuple[str, ...]) -> str:
    return " ".join(
        f'<a class="chip" href="{category_url(settings, tag)}">{html.escape(tag)}</a>' for tag in tags
    )


def build_post_list(settings: SiteSettings, posts: list[Post]) -> str:
    items = []
    for post in posts:
        items.append(
            '<li class="til-item">'
            f'<span class="til-date">{html.escape(post.meta.date)}</span> '
            f'<a class="til-title" href="{post_url(settings, post)}">{html.escape(post.meta.title)}</a> '
            f'<span class="til-tags">{build_tag_chips(settings, post.meta.tags)}</span>'
            "</li>"
        )
    if not items:
        return '<p class="empty">Nothing here yet.</p>'
    return '<ul class="til-list">' + "\n".join(items) + "</ul>"


def build_topic_list(settings: SiteSettings, tag_counts: dict[str, int]) -> str:
    items = [
        f'<li><a href="{category_url(settings, tag)}">{html.escape(tag)}</a> '
        f'<span class="til-tag-count">{count}</span></li>'
        for tag, count in tag_counts.items()
    ]
    return '<ul class="topic-list">' + "\n".join(items) + "</ul>"


def render_page(base_template: str, settings: SiteSettings, title: str, content: str) -> str:
    return render_template(
        base_template,
        name=BASE_TEMPLATE,
        title=html.escape(title),
        root=settings.base_url,
        extra_head=build_extra_head(settings),
        nav=build_nav(settings),
        footer=build_footer(settings),
        content=content,
    )


def write_assets(output_dir: Path, resources: Resources, highlighter: Highlighter) -> None:
    for name in STATIC_ASSETS:
        write_text(output_dir / name, resources.get(name))
    write_text(output_dir / SYNTAX_STYLESHEET, highlighter.stylesheet())


def build_index(
    base_template: str,
    output_dir: Path,
    collection: PostCollection,
    settings: SiteSettings,
    fragment_html: Optional[str],
) -> None:
    sections = []
    if fragment_html:
        sections.append(f'<section class="index-fragment">{fragment_html}</section>')
    sections.append(
        '<section class="topics">'
        "<h2>Topics</h2>"
        '<div class="topic-sort">'
        '<button type="button" onclick="sortAlpha()">A-Z</button>'
        '<button type="button" onclick="sortCount()">Most used</button>'
        "</div>"
        f"{build_topic_list(settings, collection.tag_counts())}"
        "</section>"
    )
    sections.append(
        '<section class="recent">'
        "<h2>Recent</h2>"
        f"{build_post_list(settings, collection.recent(settings.recent_limit))}"
        "</section>"
    )
    html_doc = render_page(base_template, settings, SITE_TITLE, "\n".join(sections))
    write_text(output_dir / "index.html", html_doc)


def build_categories(
    base_template: str, output_dir: Path, collection: PostCollection, settings: SiteSettings
) -> None:
    for tag, posts in collection.by_tag().items():
        content = (
            '<div class="section-head">'
            f"<h1>{html.escape(tag)}</h1>"
            f"<p>{len(posts)} {'post' if len(posts) == 1 else 'posts'} tagged {html.escape(tag)}.</p>"
            "</div>"
            f"{build_post_list(settings, posts)}"
        )
        html_doc = render_page(base_template, settings, f"{tag} | {SITE_TITLE}", content)
        write_text(output_dir / "category" / slugify(tag) / "index.html", html_doc)


def build_posts(
    base_template: str, output_dir: Path, collection: PostCollection, settings: SiteSettings
) -> None:
    for post in collection:
        origin_html = ""
        if post.meta.origin:
            origin_html = f'<a class="til-origin" href="{html.escape(post.meta.origin)}">Source</a>'
        content = (
            '<article class="post">'
            f'<h1 class="post-title">{html.escape(post.meta.title)}</h1>'
            '<div class="post-meta">'
            f'<span class="post-date">{html.escape(post.meta.date)}</span>'
            f'<span class="post-tags">{build_tag_chips(settings, post.meta.tags)}</span>'
            f"{origin_html}"
            "</div>"
            f'<div class="post-body">{post.content}</div>'
            f'<div class="post-footer"><a href="{settings.base_url}">Back to home</a></div>'
            "</article>"
        )
        html_doc = render_page(base_template, settings, f"{post.meta.title} | {SITE_TITLE}", content)
        write_text(output_dir / "post" / post.slug / "index.html", html_doc)


def build_rss(collection: PostCollection, settings: SiteSettings) -> str:
    items = []
    for post in collection.recent(settings.feed_limit):
        link = post_url(settings, post)
        lines = [
            "<item>",
            f"<title>{html.escape(post.meta.title)}</title>",
            f"<link>{html.escape(link)}</link>",
            f'<guid isPermaLink="true">{html.escape(link)}</guid>',
            # Dates go out as written in the post, not as RFC 822.
            f"<pubDate>{html.escape(post.meta.date)}</pubDate>",
        ]
        lines.extend(f"<category>{html.escape(tag)}</category>" for tag in post.meta.tags)
        lines.append(f"<content:encoded>{html.escape(post.content)}</content:encoded>")
        lines.append("</item>")
        items.append("\n".join(lines))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="utf-8"?>',
            f'<rss version="2.0" xmlns:content="{CONTENT_NS}">',
            "<channel>",
            f"<title>{SITE_TITLE}</title>",
            f"<link>{html.escape(settings.base_url)}</link>",
            "<description></description>",
            *items,
            "</channel>",
            "</rss>",
            "",
        ]
    )


def write_feed(output_dir: Path, collection: PostCollection, settings: SiteSettings) -> None:
    write_text(output_dir / FEED_NAME, build_rss(collection, settings))


class SiteRenderer:
    """Write every output file for one collection into ``output_dir``.

    Existing files are overwritten and nothing is deleted, so pages of posts
    that disappeared since the last build stay behind.
    """

    def __init__(
        self,
        output_dir: Path,
        settings: SiteSettings,
        collection: PostCollection,
        markdown: MarkdownRenderer,
        resources: Resources,
        index_fragment: Optional[str] = None,
    ) -> None:
        self.output_dir = output_dir
        self.settings = settings
        self.collection = collection
        self.highlighter = markdown.highlighter
        self.resources = resources
        self.fragment_html = None
        if index_fragment is not None:
            self.fragment_html = markdown.convert(index_fragment, "index fragment")

    def render(self) -> None:
        base_template = self.resources.get(BASE_TEMPLATE)
        write_assets(self.output_dir, self.resources, self.highlighter)
        build_index(base_template, self.output_dir, self.collection, self.settings, self.fragment_html)
        build_categories(base_template, self.output_dir, self.collection, self.settings)
        build_posts(base_template, self.output_dir, self.collection, self.settings)
        write_feed(self.output_dir, self.collection, self.settings)
