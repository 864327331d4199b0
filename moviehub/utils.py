"""Utility helpers for the MovieHub service."""

from __future__ import annotations

from datetime import datetime


def normalize_title(value: str | None) -> str:
    """Return the comparison key used to detect duplicate titles.

    Leading and trailing whitespace is dropped, inner whitespace runs collapse
    to a single space and the result is case-folded.
    """

    return " ".join((value or "").split()).casefold()


def release_year(release_date: str | None) -> str | None:
    """Return the four-digit year prefix of an ISO release date."""

    if not isinstance(release_date, str) or len(release_date) < 4:
        return None
    year = release_date[:4]
    if not year.isdigit():
        return None
    return year


def format_runtime(minutes: int | None) -> str:
    """Render a runtime as ``2h 18min`` style text."""

    if not minutes:
        return ""
    hours, remaining = divmod(int(minutes), 60)
    if hours == 0:
        return f"{remaining}min"
    if remaining == 0:
        return f"{hours}h"
    return f"{hours}h {remaining}min"


def build_image_url(path: str | None, base_url: str) -> str:
    """Resolve a poster reference against the catalog image base URL."""

    if not path:
        return ""
    if path.startswith(("http://", "https://", "data:")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def timestamp_id(moment: datetime) -> int:
    """Return a millisecond timestamp usable as a local movie identifier."""

    return int(moment.timestamp() * 1000)
