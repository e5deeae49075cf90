from __future__ import annotations

import html
import re
import xml.etree.ElementTree as etree
from typing import Protocol

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.preprocessors import Preprocessor
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .errors import ConfigError, RenderFault

DEFAULT_THEME = "solarized-dark"

FENCED_BLOCK_RE = re.compile(
    r"(?P<fence>^(?P<char>[`~])(?P=char){2,})(?!(?P=char))[ ]*(?P<lang>[\w#.+-]*)[^\n]*\n"
    r"(?P<code>.*?)(?<=\n)"
    r"(?P=fence)(?P=char)*[ ]*$",
    re.MULTILINE | re.DOTALL,
)
UNDERLINE_RE = r"(?<!\w)__(?![_\s])(.+?)(?<![_\s])__(?!\w)"


class Highlighter(Protocol):
    def render(self, code: str, language: str) -> str: ...

    def stylesheet(self) -> str: ...


def plain_code_block(code: str, language: str = "") -> str:
    if language:
        return f'<pre><code class="language-{html.escape(language)}">{html.escape(code)}</code></pre>'
    return f"<pre><code>{html.escape(code)}</code></pre>"


class PygmentsHighlighter:
    """Highlight code with Pygments.

    With ``inline=False`` tokens carry CSS class names and ``stylesheet()``
    returns the matching rules for the theme. With ``inline=True`` the colors
    are written as style attributes and the stylesheet is only needed for the
    block background.
    """

    def __init__(self, theme: str = DEFAULT_THEME, css_class: str = "highlight", inline: bool = False) -> None:
        try:
            get_style_by_name(theme)
        except ClassNotFound as exc:
            raise ConfigError(f"unknown highlight theme: {theme}") from exc
        self.theme = theme
        self.css_class = css_class
        self.inline = inline

    def _formatter(self) -> HtmlFormatter:
        return HtmlFormatter(style=self.theme, cssclass=self.css_class, noclasses=self.inline, wrapcode=True)

    def render(self, code: str, language: str) -> str:
        if not language:
            return plain_code_block(code)
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            return plain_code_block(code, language)
        return highlight(code, lexer, self._formatter())

    def stylesheet(self) -> str:
        return self._formatter().get_style_defs(f".{self.css_class}") + "\n"


class FencedHighlightPreprocessor(Preprocessor):
    def __init__(self, md: markdown.Markdown, highlighter: Highlighter) -> None:
        super().__init__(md)
        self.highlighter = highlighter

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        while True:
            m = FENCED_BLOCK_RE.search(text)
            if not m:
                break
            block = self.highlighter.render(m.group("code"), m.group("lang"))
            placeholder = self.md.htmlStash.store(block)
            text = f"{text[: m.start()]}\n{placeholder}\n{text[m.end() :]}"
        return text.split("\n")


class FencedHighlightExtension(Extension):
    def __init__(self, highlighter: Highlighter, **kwargs):
        super().__init__(**kwargs)
        self.highlighter = highlighter

    def extendMarkdown(self, md):
        # Same slot as the stock fenced_code extension, which is not loaded.
        md.preprocessors.register(FencedHighlightPreprocessor(md, self.highlighter), "fenced_code_block", 25)


class UnderlineInlineProcessor(InlineProcessor):
    def handleMatch(self, m, data):
        el = etree.Element("u")
        el.text = m.group(1)
        return el, m.start(0), m.end(0)


class UnderlineExtension(Extension):
    """Render ``__text__`` as ``<u>`` instead of strong emphasis."""

    def extendMarkdown(self, md):
        # Ahead of em_strong2, which would otherwise claim double underscores.
        md.inlinePatterns.register(UnderlineInlineProcessor(UNDERLINE_RE, md), "underline", 55)


class MarkdownRenderer:
    def __init__(self, highlighter: Highlighter) -> None:
        self.highlighter = highlighter
        self.md = markdown.Markdown(
            extensions=[
                "tables",
                "footnotes",
                "pymdownx.tilde",
                "pymdownx.caret",
                UnderlineExtension(),
                FencedHighlightExtension(highlighter),
            ],
            extension_configs={
                "pymdownx.tilde": {"delete": True, "subscript": False},
                "pymdownx.caret": {"insert": True, "superscript": True},
            },
        )

    def convert(self, text: str, source: str = "<text>") -> str:
        try:
            return self.md.convert(text)
        except Exception as exc:
            raise RenderFault(f"failed to render Markdown in {source}: {exc}") from exc
        finally:
            self.md.reset()
