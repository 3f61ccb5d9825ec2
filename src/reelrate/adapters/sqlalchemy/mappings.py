"""SQLAlchemy table metadata for the rating store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    func,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

rating_record_table = Table(
    "rating_record",
    metadata,
    Column("key", String, primary_key=True),
    Column("external_id", String, nullable=False, index=True),
    Column("title", String, nullable=False),
    Column("year", Integer, nullable=False, default=0),
    Column("release_date", UTCDateTime, nullable=True),
    Column("rating", Float, nullable=False, default=0.0),
    Column("secondary_rating", String, nullable=True),
    Column("vote_count", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime, nullable=False, server_default=func.current_timestamp()),
    Column("updated_at", UTCDateTime, nullable=False, index=True),
)

episode_rating_table = Table(
    "episode_rating",
    metadata,
    Column("series_id", String, primary_key=True),
    Column("season", Integer, primary_key=True),
    Column("episode", Integer, primary_key=True),
    Column("title", String, nullable=True),
    Column("rating", Float, nullable=False, default=0.0),
    Column("vote_count", Integer, nullable=False, default=0),
    Column("release_date", UTCDateTime, nullable=True),
    Column("updated_at", UTCDateTime, nullable=False),
    Index("ix_episode_rating_series_season", "series_id", "season"),
)

# Columns a conflicting upsert replaces; ``created_at`` is kept from the first write.
RATING_RECORD_UPSERT_COLUMNS: tuple[str, ...] = (
    "external_id",
    "title",
    "year",
    "release_date",
    "rating",
    "secondary_rating",
    "vote_count",
    "updated_at",
)
EPISODE_RATING_UPSERT_COLUMNS: tuple[str, ...] = (
    "title",
    "rating",
    "vote_count",
    "release_date",
    "updated_at",
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
    log.debug("Ensured tables: %s", ", ".join(sorted(metadata.tables)))
