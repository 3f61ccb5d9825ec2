"""Ports for persisting rating records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from reelrate.domain.model import EpisodeRating, RatingRecord


@runtime_checkable
class RatingRecordRepository(Protocol):
    """Keyed record store with batched lookup and batched upsert."""

    def read_many(self, keys: Collection[str]) -> dict[str, RatingRecord]:
        """Return stored records by key; unknown keys are simply absent."""
        ...

    def write_many(self, records: Sequence[RatingRecord]) -> None:
        """Upsert ``records`` keyed on ``key``, replacing every stored field."""
        ...


@runtime_checkable
class EpisodeRatingRepository(Protocol):
    def read_season(self, series_id: str, season: int) -> list[EpisodeRating]: ...

    def write_many(self, episodes: Sequence[EpisodeRating]) -> None: ...
