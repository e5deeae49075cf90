from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import OutputWriteFailure, RenderFault

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")
ASSETS_DIR = Path(__file__).resolve().parent / "assets"


class Resources:
    """Read-only table of the files shipped in ``tilsite/assets``."""

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = MappingProxyType(dict(files))

    @classmethod
    def load(cls, root: Path = ASSETS_DIR) -> Resources:
        files = {item.name: item.read_text(encoding="utf-8") for item in sorted(root.iterdir()) if item.is_file()}
        return cls(files)

    def __contains__(self, name: str) -> bool:
        return name in self._files

    def names(self) -> list[str]:
        return sorted(self._files)

    def get(self, name: str) -> str:
        try:
            return self._files[name]
        except KeyError:
            raise RenderFault(f"no such resource: {name}") from None


def render_template(template: str, name: Optional[str] = None, **context: str) -> str:
    """Fill ``{{key}}`` placeholders in a single pass.

    Every placeholder needs a value and every value needs a placeholder.
    Substituted text is never scanned again, so post bodies may contain
    literal braces.
    """
    label = name or "template"
    wanted = set(PLACEHOLDER_RE.findall(template))
    missing = sorted(wanted - context.keys())
    if missing:
        raise RenderFault(f"{label} references undefined field(s): {', '.join(missing)}")
    unused = sorted(context.keys() - wanted)
    if unused:
        raise RenderFault(f"{label} has no placeholder for: {', '.join(unused)}")
    return PLACEHOLDER_RE.sub(lambda m: context[m.group(1)], template)


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteFailure(path, exc.strerror or str(exc)) from exc


def write_text(path: Path, text: str) -> None:
    ensure_dir(path.parent)
    try:
        path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise OutputWriteFailure(path, exc.strerror or str(exc)) from exc
