"""Turn provider payloads into persisted records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelrate.domain.coercion import coerce_rating, coerce_votes, coerce_year, parse_released
from reelrate.domain.model import EpisodeRating, RatingRecord

if TYPE_CHECKING:
    from datetime import datetime

    from reelrate.domain.ports import EpisodeMatch, ProviderMatch


def build_record(
    *,
    key: str,
    title: str,
    match: ProviderMatch,
    now: datetime,
) -> RatingRecord:
    """Build the record for ``key`` from a winning match.

    ``title`` is the locally normalised title, deliberately not ``match.title``.
    Unknown release dates default to ``now``, which keeps the record in the
    shortest freshness tier until the provider learns the date.
    """

    return RatingRecord(
        key=key,
        external_id=match.external_id,
        title=title,
        year=coerce_year(match.year),
        release_date=parse_released(match.released) or now,
        rating=coerce_rating(match.rating),
        vote_count=coerce_votes(match.votes),
        secondary_rating=match.secondary_rating,
        updated_at=now,
    )


def build_episode(
    *,
    series_id: str,
    season: int,
    match: EpisodeMatch,
    now: datetime,
) -> EpisodeRating | None:
    episode_number = _parse_episode_number(match.episode)
    if episode_number is None:
        return None
    return EpisodeRating(
        series_id=series_id,
        season=season,
        episode=episode_number,
        title=match.title,
        rating=coerce_rating(match.rating),
        vote_count=0,
        release_date=parse_released(match.released),
        updated_at=now,
    )


def _parse_episode_number(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
