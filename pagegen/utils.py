from __future__ import annotations


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    if not base:
        return path
    return f"{base}/{path}"
