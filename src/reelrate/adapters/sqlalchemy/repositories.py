"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from reelrate.adapters.sqlalchemy.mappings import (
    EPISODE_RATING_UPSERT_COLUMNS,
    RATING_RECORD_UPSERT_COLUMNS,
    episode_rating_table,
    rating_record_table,
)
from reelrate.domain.errors import StoreError
from reelrate.domain.model import EpisodeRating, RatingRecord

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence

    from sqlalchemy import Row, Table
    from sqlalchemy.orm import Session


def _upsert(
    session: Session,
    table: Table,
    rows: Sequence[Mapping[str, object]],
    *,
    update_columns: Sequence[str],
) -> None:
    """``INSERT ... ON CONFLICT (primary key) DO UPDATE`` for the session's dialect."""

    dialect = session.get_bind().dialect.name
    if dialect == "sqlite":
        stmt: Any = sqlite.insert(table)
    elif dialect == "postgresql":
        stmt = postgresql.insert(table)
    else:
        raise StoreError(f"upsert not supported on {dialect}")
    stmt = stmt.on_conflict_do_update(
        index_elements=[column.name for column in table.primary_key.columns],
        set_={name: stmt.excluded[name] for name in update_columns},
    )
    session.execute(stmt, list(rows))


def _record_from_row(row: Row[Any]) -> RatingRecord:
    mapping = row._mapping  # noqa: SLF001
    return RatingRecord(
        key=mapping["key"],
        external_id=mapping["external_id"],
        title=mapping["title"],
        year=mapping["year"] or 0,
        release_date=mapping["release_date"],
        rating=mapping["rating"] or 0.0,
        secondary_rating=mapping["secondary_rating"],
        vote_count=mapping["vote_count"] or 0,
        updated_at=mapping["updated_at"],
    )


def _record_to_row(record: RatingRecord) -> dict[str, object]:
    return {
        "key": record.key,
        "external_id": record.external_id,
        "title": record.title,
        "year": record.year,
        "release_date": record.release_date,
        "rating": record.rating,
        "secondary_rating": record.secondary_rating,
        "vote_count": record.vote_count,
        "updated_at": record.updated_at,
    }


class SqlAlchemyRatingRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def read_many(self, keys: Collection[str]) -> dict[str, RatingRecord]:
        if not keys:
            return {}
        columns = [rating_record_table.c[name] for name in ("key", *RATING_RECORD_UPSERT_COLUMNS)]
        stmt = select(*columns).where(rating_record_table.c.key.in_(list(keys)))
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"reading {len(keys)} rating record(s) failed: {exc}") from exc
        return {record.key: record for record in map(_record_from_row, rows)}

    def write_many(self, records: Sequence[RatingRecord]) -> None:
        if not records:
            return
        try:
            _upsert(
                self.session,
                rating_record_table,
                [_record_to_row(record) for record in records],
                update_columns=RATING_RECORD_UPSERT_COLUMNS,
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"writing {len(records)} rating record(s) failed: {exc}") from exc


class SqlAlchemyEpisodeRatingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def read_season(self, series_id: str, season: int) -> list[EpisodeRating]:
        table = episode_rating_table
        stmt = (
            select(table)
            .where(table.c.series_id == series_id)
            .where(table.c.season == season)
            .order_by(table.c.episode)
        )
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"reading episodes of {series_id} S{season} failed: {exc}") from exc
        return [EpisodeRating(**cast(dict[str, Any], dict(row._mapping))) for row in rows]  # noqa: SLF001

    def write_many(self, episodes: Sequence[EpisodeRating]) -> None:
        if not episodes:
            return
        rows = [
            {
                "series_id": episode.series_id,
                "season": episode.season,
                "episode": episode.episode,
                "title": episode.title,
                "rating": episode.rating,
                "vote_count": episode.vote_count,
                "release_date": episode.release_date,
                "updated_at": episode.updated_at,
            }
            for episode in episodes
        ]
        try:
            _upsert(
                self.session,
                episode_rating_table,
                rows,
                update_columns=EPISODE_RATING_UPSERT_COLUMNS,
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"writing {len(episodes)} episode rating(s) failed: {exc}") from exc


if TYPE_CHECKING:
    from reelrate.domain.ports.persistence import (
        EpisodeRatingRepository,
        RatingRecordRepository,
    )

    _session_stub = cast("Session", object())
    _ratings_check: RatingRecordRepository = SqlAlchemyRatingRecordRepository(_session_stub)
    _episodes_check: EpisodeRatingRepository = SqlAlchemyEpisodeRatingRepository(_session_stub)
