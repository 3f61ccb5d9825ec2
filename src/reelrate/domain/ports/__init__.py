"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import EpisodeRatingRepository, RatingRecordRepository
from .provider import EpisodeMatch, EpisodeProvider, ProviderMatch, RatingProvider
from .unit_of_work import (
    RatingRepositories,
    RatingsUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "EpisodeMatch",
    "EpisodeProvider",
    "EpisodeRatingRepository",
    "ProviderMatch",
    "RatingProvider",
    "RatingRecordRepository",
    "RatingRepositories",
    "RatingsUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]
