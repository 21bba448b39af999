"""Viewer settings: environment first, then `.env`, then `.env.defaults`.

Both files are looked up in the checkout root and in the working directory
(for an installed package run from a project folder).
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator

CHECKOUT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILES = (".env.defaults", ".env")


def _search_dirs() -> Iterator[Path]:
    yield CHECKOUT_ROOT
    try:
        cwd = Path.cwd().resolve()
    except OSError:
        return
    if cwd != CHECKOUT_ROOT:
        yield cwd


def read_env_file(path: Path) -> Dict[str, str]:
    """Parse `KEY=value` lines; blanks, comments and lines without `=` are skipped."""
    values: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value
    return values


@lru_cache(maxsize=1)
def load_defaults() -> Dict[str, str]:
    """Merged file settings; `.env` entries override `.env.defaults`."""
    merged: Dict[str, str] = {}
    dirs = list(_search_dirs())
    for name in ENV_FILES:
        for directory in dirs:
            path = directory / name
            if path.is_file():
                merged.update(read_env_file(path))
    return merged


def get_setting(key: str, fallback: str | None = None) -> str | None:
    value = os.environ.get(key)
    if value is not None:
        return value
    return load_defaults().get(key, fallback)


def get_bool_setting(key: str, fallback: bool = False) -> bool:
    value = get_setting(key)
    if value is None:
        return fallback
    return value.strip().lower() in ('true', '1', 'yes')


def require_setting(key: str) -> str:
    """Like get_setting, but a missing key is a startup error."""
    value = get_setting(key)
    if value is None:
        raise RuntimeError(f"Setting '{key}' is not set in the environment, .env or .env.defaults")
    return value
