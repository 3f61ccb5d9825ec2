"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum

_MOVIE_MARKERS = ("movie", "film", "feature")
_SERIES_MARKERS = ("series", "show", "tv", "episode", "season")


class EntityKind(StrEnum):
    """Loose family of a title: the UI and the provider disagree on exact labels."""

    MOVIE = "movie"
    SERIES = "series"

    @classmethod
    def classify(cls, value: str | None) -> EntityKind | None:
        """Map a free-form type label ("Movie", "TV Show", "series") to a family.

        Returns ``None`` when the label is absent or unrecognised so callers can
        skip the comparison instead of failing it.
        """

        if not value:
            return None
        lowered = value.strip().lower().replace("_", " ")
        # "TV Movie" is a movie, so movie markers win
        if any(marker in lowered for marker in _MOVIE_MARKERS):
            return cls.MOVIE
        if any(marker in lowered for marker in _SERIES_MARKERS):
            return cls.SERIES
        return None


class ResultSource(StrEnum):
    CACHE = "cache"
    CACHE_STALE = "cache-stale"
    API = "api"
    API_REFRESH = "api-refresh"

    @property
    def needs_persist(self) -> bool:
        return self in {ResultSource.API, ResultSource.API_REFRESH}
