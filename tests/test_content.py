"""Tests for front matter parsing, metadata validation and post ingestion."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.conftest import til_text
from tilsite.content import (
    PostMeta,
    parse_meta,
    parse_post,
    parse_tags,
    read_posts,
    slugify,
    split_front_matter,
)
from tilsite.errors import MalformedFrontMatter, MissingRequiredField


class TestSlugify:
    def test_lowercases_and_replaces_punctuation(self) -> None:
        assert slugify("Hello, World!") == "hello-world"

    def test_underscores_become_dashes(self) -> None:
        assert slugify("snake_case title") == "snake-case-title"

    def test_empty_falls_back(self) -> None:
        assert slugify("???") == "post"


class TestSplitFrontMatter:
    def test_yaml_block(self) -> None:
        data, body = split_front_matter("---\ntitle: Hi\ndate: 2024-01-01\n---\nBody\n")
        assert data["title"] == "Hi"
        assert body == "Body"

    def test_no_front_matter(self) -> None:
        data, body = split_front_matter("Just text")
        assert data == {}
        assert body == "Just text"

    def test_empty_block(self) -> None:
        data, body = split_front_matter("---\n---\nBody")
        assert data == {}
        assert body == "Body"

    def test_strips_bom(self) -> None:
        data, _ = split_front_matter("\ufeff---\ntitle: Hi\n---\n")
        assert data == {"title": "Hi"}

    def test_unterminated_block(self) -> None:
        with pytest.raises(MalformedFrontMatter):
            split_front_matter("---\ntitle: Hi\nBody")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(MalformedFrontMatter):
            split_front_matter("---\ntitle: [unclosed\n---\nBody")

    def test_non_mapping(self) -> None:
        with pytest.raises(MalformedFrontMatter) as excinfo:
            split_front_matter("---\n- a\n- b\n---\nBody", "list.md")
        assert "list.md" in str(excinfo.value)


class TestParseMeta:
    def test_full_metadata(self) -> None:
        data, _ = split_front_matter(
            "---\ntitle: Hi\ndate: 2024-03-07\ntags: [web, rust]\norigin: https://example.org/a\n---\n"
        )
        meta = parse_meta(data)
        assert meta == PostMeta(
            title="Hi", date="2024-03-07", tags=("rust", "web"), origin="https://example.org/a"
        )

    @pytest.mark.parametrize(
        "date", ["2024-03-07", "2024-03-07T10:00:00Z", "2024-03-07 10:00:00", "2024-03-07T10:00:00.50+02:00"]
    )
    def test_dates_are_kept_verbatim(self, date: str) -> None:
        data, _ = split_front_matter(f"---\ntitle: Hi\ndate: {date}\n---\n")
        assert parse_meta(data).date == date

    def test_numeric_looking_values_stay_text(self) -> None:
        data, _ = split_front_matter("---\ntitle: 3.10\ndate: 2024-03-07\ntags: [3.10, web, 1e3]\n---\n")
        meta = parse_meta(data)
        assert meta.title == "3.10"
        assert meta.tags == ("1e3", "3.10", "web")

    def test_empty_yaml_value_is_missing(self) -> None:
        data, _ = split_front_matter("---\ntitle: Hi\ndate:\n---\n")
        with pytest.raises(MissingRequiredField):
            parse_meta(data)

    def test_tags_default_to_empty(self) -> None:
        assert parse_meta({"title": "Hi", "date": "2024-01-01"}).tags == ()

    def test_keys_are_case_insensitive(self) -> None:
        meta = parse_meta({"Title": "Hi", "DATE": "2024-01-01"})
        assert meta.title == "Hi"

    @pytest.mark.parametrize("field", ["title", "date"])
    def test_missing_required_field(self, field: str) -> None:
        data = {"title": "Hi", "date": "2024-01-01"}
        del data[field]
        with pytest.raises(MissingRequiredField) as excinfo:
            parse_meta(data, "note.md")
        assert excinfo.value.field == field
        assert "note.md" in str(excinfo.value)

    def test_blank_title_is_missing(self) -> None:
        with pytest.raises(MissingRequiredField):
            parse_meta({"title": "  ", "date": "2024-01-01"})

    def test_null_date_is_missing(self) -> None:
        with pytest.raises(MissingRequiredField):
            parse_meta({"title": "Hi", "date": None})


class TestParseTags:
    def test_comma_string(self) -> None:
        assert parse_tags("b, a, b") == ("a", "b")

    def test_bracketed_string(self) -> None:
        assert parse_tags("[x, 'y']") == ("x", "y")

    def test_list_is_deduplicated_and_sorted(self) -> None:
        assert parse_tags(["web", "rust", "web"]) == ("rust", "web")

    def test_single_scalar(self) -> None:
        assert parse_tags("python") == ("python",)

    def test_blank_string(self) -> None:
        assert parse_tags(" , ") == ()
        assert parse_tags("[]") == ()

    def test_bracketed_string_with_empty_items(self) -> None:
        assert parse_tags('[a, , "b"]') == ("a", "b")


class TestParsePost:
    def test_renders_body(self, markdown) -> None:
        post = parse_post(til_text("Hello", "2024-01-01", body="Some *emphasis*."), markdown, "hello.md")
        assert post.meta.title == "Hello"
        assert "<em>emphasis</em>" in post.content
        assert post.slug == "hello"
        assert post.source == "hello.md"


class TestReadPosts:
    def test_skips_non_markdown_entries(self, site_root: Path, write_til, markdown) -> None:
        write_til("b.md", til_text("Second", "2024-01-02"))
        write_til("a.md", til_text("First", "2024-01-01"))
        write_til("notes.txt", "not a post")
        (site_root / "tils" / "folder.md").mkdir()
        posts = read_posts(site_root / "tils", markdown)
        assert [post.meta.title for post in posts] == ["First", "Second"]

    def test_bad_post_aborts(self, site_root: Path, write_til, markdown) -> None:
        write_til("good.md", til_text("Good", "2024-01-01"))
        write_til("bad.md", "---\ntitle: No date\n---\nBody")
        with pytest.raises(MissingRequiredField) as excinfo:
            read_posts(site_root / "tils", markdown)
        assert excinfo.value.source == "bad.md"
