from __future__ import annotations


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def normalize_base_url(value: str) -> str:
    # All URL joining assumes a terminating slash.
    value = value.strip()
    if not value.endswith("/"):
        value += "/"
    return value


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return f"{base}/"
    return f"{base}/{path}"
