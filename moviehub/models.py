"""Pydantic models describing movie records and query payloads."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .utils import build_image_url, format_runtime, normalize_title, release_year

MovieSource = Literal["local", "remote"]


class Genre(BaseModel):
    """Reference entry from the remote genre catalog."""

    id: int
    name: str = ""


class MovieRecord(BaseModel):
    """A movie from either the remote catalog or the local collection.

    Field aliases follow the catalog API so that remote payloads validate
    directly and the local collection is stored in the same shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = Field(default="", validation_alias=AliasChoices("title", "name"))
    overview: str = ""
    release_date: str = ""
    runtime_minutes: int | None = Field(default=None, alias="runtime")
    vote_average: float = 0.0
    genre_ids: list[int] = Field(default_factory=list)
    genres: list[Genre] = Field(default_factory=list)
    poster_image: str | None = Field(default=None, alias="poster_path")
    backdrop_image: str | None = Field(default=None, alias="backdrop_path")
    is_custom: bool = Field(default=False, alias="isCustom")
    created_at: datetime | None = None

    @field_validator("title", "overview", "release_date", mode="before")
    @classmethod
    def _blank_text(cls, value: object) -> object:
        if value is None:
            return ""
        return value

    @field_validator("vote_average", mode="before")
    @classmethod
    def _default_rating(cls, value: object) -> object:
        if value is None or value == "":
            return 0.0
        return value

    @field_validator("runtime_minutes", mode="before")
    @classmethod
    def _clean_runtime(cls, value: object) -> object:
        if value is None or value == "":
            return None
        try:
            minutes = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return minutes if minutes >= 0 else None

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _unique_genre_ids(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            unique: list[Any] = []
            for entry in value:
                if entry not in unique:
                    unique.append(entry)
            return unique
        return value

    @field_validator("genres", mode="before")
    @classmethod
    def _default_genres(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def title_key(self) -> str:
        """Return the normalised title used for duplicate detection."""

        return normalize_title(self.title)

    @property
    def release_year(self) -> str | None:
        return release_year(self.release_date)

    @property
    def genre_id_set(self) -> frozenset[int]:
        """Return every genre id attached to the record, whatever its shape."""

        return frozenset(self.genre_ids) | {genre.id for genre in self.genres}

    def display_title(self) -> str:
        """Return a human-friendly title for cards and detail pages."""

        title = self.title.strip()
        return title or "Untitled"

    def format_runtime(self) -> str:
        return format_runtime(self.runtime_minutes)

    def poster_url(self, base_url: str) -> str:
        """Return a displayable poster reference.

        Local records carry self-contained encoded images which pass through
        untouched; remote records hold paths relative to ``base_url``.
        """

        return build_image_url(self.poster_image or self.backdrop_image, base_url)

    def to_storage(self) -> dict[str, Any]:
        """Return the JSON-compatible payload persisted for local records."""

        return self.model_dump(mode="json", by_alias=True)


class MovieDraft(BaseModel):
    """Raw user input for a movie waiting to be admitted to the collection."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    overview: str = Field(
        default="", validation_alias=AliasChoices("overview", "description")
    )
    release_date: str = Field(
        default="", validation_alias=AliasChoices("release_date", "releaseDate")
    )
    duration: str = Field(
        default="", validation_alias=AliasChoices("duration", "runtime")
    )
    genre_ids: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("genre_ids", "genreIds", "genres"),
    )
    image: str = Field(
        default="", validation_alias=AliasChoices("image", "poster", "poster_path")
    )
    rating: str = Field(
        default="", validation_alias=AliasChoices("rating", "vote_average")
    )

    @field_validator(
        "title", "overview", "release_date", "duration", "image", "rating",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _coerce_genres(cls, value: object) -> object:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class SearchParams(BaseModel):
    """Search and filter inputs accepted by the query engine."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = Field(
        default=None, validation_alias=AliasChoices("text", "query")
    )
    year: str | None = None
    min_rating: float | None = Field(
        default=None, validation_alias=AliasChoices("min_rating", "minRating")
    )
    genre_ids: frozenset[int] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("genre_ids", "genreIds", "genres"),
    )

    @field_validator("text", "min_rating", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _parse_year(cls, value: object) -> object:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if len(text) != 4 or not text.isdigit():
            raise ValueError("Year must be a four-digit number")
        return text

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _parse_genres(cls, value: object) -> object:
        if value is None or value == "":
            return frozenset()
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",") if part.strip()]
        return value

    def is_empty(self) -> bool:
        """Return ``True`` when no search input was supplied at all."""

        return (
            self.text is None
            and self.year is None
            and self.min_rating is None
            and not self.genre_ids
        )

    def has_filters(self) -> bool:
        return self.year is not None or self.min_rating is not None or bool(self.genre_ids)


@dataclass(slots=True, frozen=True)
class DuplicateCheck:
    """Outcome of comparing a candidate movie against the catalog."""

    title_conflict: bool = False
    image_conflict: bool = False

    @property
    def has_conflict(self) -> bool:
        return self.title_conflict or self.image_conflict

    def to_payload(self) -> dict[str, bool]:
        return {
            "titleConflict": self.title_conflict,
            "imageConflict": self.image_conflict,
        }
