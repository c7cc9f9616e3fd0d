from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True, slots=True)
class Settings:
    api_base_url: str
    request_timeout: float = 10.0
    search_debounce: float = 0.25
    search_min_length: int = 2
    search_max_suggestions: int = 6
    path_separator: str = "::"


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from exc


def settings_from_env(environ: Mapping[str, str] | None = None) -> Settings:
    if environ is None:
        environ = os.environ
    api_base_url = environ.get("NOTES_API_BASE_URL", "").strip()
    if not api_base_url:
        raise RuntimeError("NOTES_API_BASE_URL must be set.")
    return Settings(
        api_base_url=api_base_url.rstrip("/"),
        request_timeout=_read_float(environ, "NOTES_API_TIMEOUT", 10.0),
        search_debounce=_read_float(environ, "NOTES_SEARCH_DEBOUNCE", 0.25),
    )
