"""Translate OMDb payloads into provider-port values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelrate.domain.ports import EpisodeMatch, ProviderMatch

from .schema import ROTTEN_TOMATOES

if TYPE_CHECKING:
    from .schema import OmdbEpisode, OmdbTitle


def translate_title(payload: OmdbTitle) -> ProviderMatch:
    return ProviderMatch(
        external_id=payload.imdb_id,
        title=payload.title,
        year=payload.year,
        released=payload.released,
        rating=payload.imdb_rating,
        votes=payload.imdb_votes,
        kind=payload.type,
        secondary_rating=payload.source_rating(ROTTEN_TOMATOES),
    )


def translate_episode(payload: OmdbEpisode) -> EpisodeMatch:
    return EpisodeMatch(
        episode=payload.episode,
        title=payload.title,
        released=payload.released,
        rating=payload.imdb_rating,
        external_id=payload.imdb_id,
    )
