"""Persistent rating records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from reelrate.domain.coercion import format_timestamp

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(slots=True, frozen=True)
class RatingRecord:
    """Canonical rating for one tracked title, addressed only by ``key``.

    ``title`` is the locally normalised title the match was made with, not the
    provider's own spelling, so repeated lookups of the same scraped title stay
    consistent. ``release_date`` may be ``None`` for rows written by older
    collaborators; the staleness policy treats that as stale.
    """

    key: str
    external_id: str
    title: str
    year: int
    release_date: datetime | None
    rating: float
    vote_count: int
    updated_at: datetime
    secondary_rating: str | None = None

    def to_wire(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "key": self.key,
            "externalId": self.external_id,
            "title": self.title,
            "year": self.year,
            "releaseDate": format_timestamp(self.release_date) if self.release_date else None,
            "rating": self.rating,
            "voteCount": self.vote_count,
            "updatedAt": format_timestamp(self.updated_at),
        }
        if self.secondary_rating is not None:
            payload["secondaryRating"] = self.secondary_rating
        return payload


@dataclass(slots=True, frozen=True)
class EpisodeRating:
    series_id: str
    season: int
    episode: int
    title: str
    rating: float
    vote_count: int
    release_date: datetime | None
    updated_at: datetime

    def to_wire(self) -> dict[str, object]:
        return {
            "seriesId": self.series_id,
            "season": self.season,
            "episode": self.episode,
            "title": self.title,
            "rating": self.rating,
            "voteCount": self.vote_count,
            "releaseDate": format_timestamp(self.release_date) if self.release_date else None,
            "updatedAt": format_timestamp(self.updated_at),
        }
