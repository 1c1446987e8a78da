"""Utility helpers for the export engine."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable


WHITESPACE_RE = re.compile(r"\s+")
TOKEN_RE = re.compile(r"[a-z0-9]+", re.IGNORECASE)


def slugify(value: str | None, fallback: str = "") -> str:
    """Return a URL-friendly slug, or ``fallback`` when nothing survives."""

    value = unicodedata.normalize("NFKD", value or "")
    value = value.encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-zA-Z0-9]+", "-", value)
    value = value.strip("-")
    value = re.sub(r"-+", "-", value)
    return value.lower() or fallback


def normalize_platform_key(value: object) -> str:
    """Collapse a platform label into its export key (``"Home Assistant"`` -> ``"homeassistant"``)."""

    if not isinstance(value, str):
        return ""
    return WHITESPACE_RE.sub("", value.strip().lower())


def unique_strings(values: Iterable[object] | None) -> list[str]:
    """Trim, drop blanks and deduplicate case-insensitively keeping first-seen casing."""

    seen: set[str] = set()
    result: list[str] = []
    for value in values or ():
        if not isinstance(value, str):
            continue
        trimmed = value.strip()
        if not trimmed:
            continue
        key = trimmed.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(trimmed)
    return result


def split_values(value: object) -> list[str]:
    """Accept a comma-separated string or an iterable of strings."""

    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",")]
    if isinstance(value, Iterable):
        return [str(part).strip() for part in value if part is not None]
    raise TypeError("expected a string or iterable of strings")


def first_token(value: str | None) -> str | None:
    """Return the first alphanumeric token of ``value`` lower-cased."""

    if not value:
        return None
    match = TOKEN_RE.search(value)
    return match.group(0).lower() if match else None


def collation_key(value: str) -> tuple[str, str]:
    """Sort key approximating locale-aware ordering (accent and case insensitive first)."""

    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.casefold(), value
