from __future__ import annotations

from pathlib import Path


class TilsiteError(Exception):
    """Base class for every fatal build error."""


class InputNotFound(TilsiteError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"expected directory at {path}")
        self.path = path


class MalformedFrontMatter(TilsiteError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"couldn't parse front matter in {source}: {reason}")
        self.source = source


class MissingRequiredField(TilsiteError):
    def __init__(self, source: str, field: str) -> None:
        super().__init__(f"missing required field '{field}' in {source}")
        self.source = source
        self.field = field


class SlugCollision(TilsiteError):
    def __init__(self, path: str, first: str, second: str) -> None:
        super().__init__(f"{first} and {second} both render to {path}")
        self.path = path


class OutputWriteFailure(TilsiteError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to write {path}: {reason}")
        self.path = path


class RenderFault(TilsiteError):
    pass


class ConfigError(TilsiteError):
    pass
