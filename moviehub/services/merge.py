"""Combine the local collection and the catalog snapshot into one list."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..models import MovieRecord


@dataclass(slots=True)
class MoviePage:
    """One page of a movie listing."""

    items: list[MovieRecord]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "results": [item.model_dump(mode="json", by_alias=True) for item in self.items],
            "page": self.page,
            "pageSize": self.page_size,
            "totalResults": self.total,
            "totalPages": self.total_pages,
        }


def unique_by_id(records: Iterable[MovieRecord]) -> list[MovieRecord]:
    """Drop records whose id was already seen; the first occurrence wins."""

    seen: set[int] = set()
    unique: list[MovieRecord] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


def merge_view(
    catalog: Sequence[MovieRecord], local: Sequence[MovieRecord]
) -> list[MovieRecord]:
    """Return local movies newest first followed by the catalog snapshot.

    Local movies override catalog movies sharing their id.
    """

    return unique_by_id([*reversed(local), *catalog])


def paginate(records: Sequence[MovieRecord], page: int, page_size: int) -> MoviePage:
    """Slice ``records`` into a 1-indexed page."""

    if page < 1:
        raise ValueError("page must be at least 1")
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    start = (page - 1) * page_size
    return MoviePage(
        items=list(records[start : start + page_size]),
        page=page,
        page_size=page_size,
        total=len(records),
    )
