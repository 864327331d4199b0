from __future__ import annotations

import pytest

from fakes import custom_movie, movie
from moviehub.services.merge import merge_view, paginate, unique_by_id


def test_local_movies_come_first_newest_first() -> None:
    catalog = [movie(1, "Popular A"), movie(2, "Popular B")]
    local = [custom_movie(100, "Older Custom"), custom_movie(101, "Newer Custom")]

    merged = merge_view(catalog, local)

    assert [record.id for record in merged] == [101, 100, 1, 2]


def test_local_record_wins_on_id_collision() -> None:
    catalog = [movie(42, "Remote Version", overview="remote"), movie(7, "Other")]
    local = [custom_movie(42, "Local Version", overview="local")]

    merged = merge_view(catalog, local)

    assert len(merged) == 2
    assert merged[0].title == "Local Version"
    assert merged[0].overview == "local"
    assert [record.id for record in merged] == [42, 7]


def test_merge_size_and_repeatability() -> None:
    """The merge holds |L| + |C minus ids(L)| movies and is stable across calls."""

    catalog = [movie(1, "A"), movie(2, "B"), movie(3, "C")]
    local = [custom_movie(2, "B local"), custom_movie(9, "Z local")]

    first = merge_view(catalog, local)
    second = merge_view(catalog, local)

    local_ids = {record.id for record in local}
    expected = len(local) + len([record for record in catalog if record.id not in local_ids])
    assert len(first) == expected == 4
    assert first == second


def test_merge_of_empty_inputs() -> None:
    assert merge_view([], []) == []


def test_unique_by_id_keeps_first_occurrence() -> None:
    records = [movie(1, "first"), movie(1, "second"), movie(2, "other")]
    assert [record.title for record in unique_by_id(records)] == ["first", "other"]


def test_paginate_slices_and_counts_pages() -> None:
    records = [movie(index, f"Movie {index}") for index in range(1, 21)]

    page = paginate(records, 3, 9)

    assert [record.id for record in page.items] == [19, 20]
    assert page.total == 20
    assert page.total_pages == 3
    payload = page.to_payload()
    assert payload["totalPages"] == 3
    assert payload["results"][0]["id"] == 19


def test_paginate_past_the_end_is_empty() -> None:
    page = paginate([movie(1, "Only")], 5, 9)
    assert page.items == []
    assert page.total_pages == 1
    assert paginate([], 1, 9).total_pages == 0


def test_paginate_rejects_page_zero() -> None:
    with pytest.raises(ValueError):
        paginate([], 0, 9)
