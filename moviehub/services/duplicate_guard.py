"""Admission control for movies added to the local collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from ..errors import DuplicateMovieError, MovieValidationError
from ..models import DuplicateCheck, MovieDraft, MovieRecord
from ..utils import normalize_title, timestamp_id
from .catalog_cache import CatalogCache
from .collection import LocalCollectionStore
from .merge import merge_view

logger = logging.getLogger(__name__)

MISSING_FIELD_MESSAGES: dict[str, str] = {
    "title": "Please enter a movie title.",
    "overview": "Please enter a description.",
    "release_date": "Please choose a release date.",
    "duration": "Please enter the duration in minutes.",
    "genre_ids": "Please select at least one genre.",
    "image": "Please choose a poster image.",
}


@dataclass(slots=True, frozen=True)
class ValidatedDraft:
    """Draft values after required-field validation."""

    title: str
    overview: str
    release_date: str
    runtime_minutes: int
    genre_ids: list[int]
    image: str
    rating: float


class DuplicateGuard:
    """Validate candidate movies and admit them into the local collection."""

    def __init__(
        self,
        collection: LocalCollectionStore,
        catalog: CatalogCache,
        *,
        title_check_min_length: int = 2,
    ):
        self._collection = collection
        self._catalog = catalog
        self._title_check_min_length = title_check_min_length

    def check_duplicate(
        self, candidate_title: str, candidate_image: str | None = None
    ) -> DuplicateCheck:
        """Compare a candidate against the merged catalog.

        Titles are compared against every movie; posters only against local
        movies.
        """

        key = normalize_title(candidate_title)
        title_conflict = bool(key) and any(
            record.title_key == key
            for record in merge_view(self._catalog.records(), self._collection.all())
        )
        image_conflict = bool(candidate_image) and any(
            record.is_custom and record.poster_image == candidate_image
            for record in self._collection.all()
        )
        return DuplicateCheck(title_conflict=title_conflict, image_conflict=image_conflict)

    def live_title_check(self, partial_title: str) -> DuplicateCheck:
        """Title-only check for a title that is still being typed."""

        if len((partial_title or "").strip()) < self._title_check_min_length:
            return DuplicateCheck()
        return self.check_duplicate(partial_title)

    def validate(self, draft: MovieDraft) -> ValidatedDraft:
        """Check required fields in priority order, stopping at the first gap."""

        title = draft.title.strip()
        if not title:
            raise MovieValidationError("title", MISSING_FIELD_MESSAGES["title"])

        overview = draft.overview.strip()
        if not overview:
            raise MovieValidationError("overview", MISSING_FIELD_MESSAGES["overview"])

        release_date = draft.release_date.strip()
        if not release_date:
            raise MovieValidationError(
                "release_date", MISSING_FIELD_MESSAGES["release_date"]
            )
        try:
            date.fromisoformat(release_date)
        except ValueError as exc:
            raise MovieValidationError(
                "release_date", "Release date must use the YYYY-MM-DD format."
            ) from exc

        duration = draft.duration.strip()
        if not duration:
            raise MovieValidationError("duration", MISSING_FIELD_MESSAGES["duration"])
        try:
            runtime_minutes = int(duration)
        except ValueError as exc:
            raise MovieValidationError(
                "duration", "Duration must be a whole number of minutes."
            ) from exc
        if runtime_minutes <= 0:
            raise MovieValidationError(
                "duration", "Duration must be a whole number of minutes."
            )

        if not draft.genre_ids:
            raise MovieValidationError("genre_ids", MISSING_FIELD_MESSAGES["genre_ids"])

        image = draft.image.strip()
        if not image:
            raise MovieValidationError("image", MISSING_FIELD_MESSAGES["image"])

        rating = 0.0
        if draft.rating.strip():
            try:
                rating = float(draft.rating)
            except ValueError as exc:
                raise MovieValidationError(
                    "rating", "Rating must be a number between 0 and 10."
                ) from exc
            if not 0 <= rating <= 10:
                raise MovieValidationError(
                    "rating", "Rating must be a number between 0 and 10."
                )

        return ValidatedDraft(
            title=title,
            overview=overview,
            release_date=release_date,
            runtime_minutes=runtime_minutes,
            genre_ids=list(dict.fromkeys(draft.genre_ids)),
            image=image,
            rating=rating,
        )

    async def admit(
        self, draft: MovieDraft, *, now: datetime | None = None
    ) -> MovieRecord:
        """Validate ``draft``, reject duplicates and append it to the collection."""

        values = self.validate(draft)
        check = self.check_duplicate(values.title, values.image)
        if check.has_conflict:
            raise DuplicateMovieError(check)

        created_at = now or datetime.now(timezone.utc)
        movie_id = timestamp_id(created_at)
        taken = self._collection.ids()
        while movie_id in taken:
            movie_id += 1

        record = MovieRecord(
            id=movie_id,
            title=values.title,
            overview=values.overview,
            release_date=values.release_date,
            runtime_minutes=values.runtime_minutes,
            vote_average=values.rating,
            genre_ids=values.genre_ids,
            poster_image=values.image,
            backdrop_image=values.image,
            is_custom=True,
            created_at=created_at,
        )
        await self._collection.append(record)
        logger.info("Added custom movie %s (%s)", record.title, record.id)
        return record
