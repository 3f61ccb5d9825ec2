"""SQLAlchemy adapter package for the rating store."""

from __future__ import annotations

from .mappings import create_all_tables, episode_rating_table, metadata, rating_record_table
from .repositories import SqlAlchemyEpisodeRatingRepository, SqlAlchemyRatingRecordRepository
from .unit_of_work import (
    SqlAlchemyRatingsUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyEpisodeRatingRepository",
    "SqlAlchemyRatingRecordRepository",
    "SqlAlchemyRatingsUnitOfWork",
    "StartupError",
    "create_all_tables",
    "episode_rating_table",
    "is_started",
    "metadata",
    "rating_record_table",
    "shutdown",
    "startup",
]
