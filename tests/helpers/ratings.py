"""Reusable fakes and helpers for rating resolution tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

from reelrate.domain.errors import ProviderTransportError, StoreError
from reelrate.domain.model import EpisodeRating, RatingRecord
from reelrate.domain.ports import EpisodeMatch, ProviderMatch, RatingRepositories
from reelrate.domain.staleness import StalenessPolicy

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from types import TracebackType

NOW = datetime(2024, 6, 1, 12, tzinfo=UTC)


def frozen_policy(now: datetime = NOW) -> StalenessPolicy:
    return StalenessPolicy(clock=lambda: now)


def make_match(
    external_id: str = "tt0000001",
    title: str = "Example Title",
    *,
    rating: str | None = "7.5",
    kind: str | None = "movie",
    year: str | None = "2018",
    released: str | None = "27 Jul 2018",
    votes: str | None = "1,234",
    secondary_rating: str | None = None,
) -> ProviderMatch:
    return ProviderMatch(
        external_id=external_id,
        title=title,
        year=year,
        released=released,
        rating=rating,
        votes=votes,
        kind=kind,
        secondary_rating=secondary_rating,
    )


def make_record(
    key: str = "/title/example",
    *,
    external_id: str = "tt0000001",
    title: str = "Example Title",
    year: int = 2018,
    release_date: datetime | None = datetime(2018, 7, 27, tzinfo=UTC),
    rating: float = 7.5,
    vote_count: int = 1234,
    updated_at: datetime = NOW,
    secondary_rating: str | None = None,
) -> RatingRecord:
    return RatingRecord(
        key=key,
        external_id=external_id,
        title=title,
        year=year,
        release_date=release_date,
        rating=rating,
        vote_count=vote_count,
        updated_at=updated_at,
        secondary_rating=secondary_rating,
    )


type LookupKind = Literal["title", "id", "search"]


@dataclass
class FakeProvider:
    """Scripted provider recording every lookup in call order.

    ``failing`` holds queries (or ``"kind:query"`` entries) that raise a transport error.
    """

    titles: dict[str, ProviderMatch] = field(default_factory=dict)
    ids: dict[str, ProviderMatch] = field(default_factory=dict)
    searches: dict[str, ProviderMatch] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[tuple[LookupKind, str]] = field(default_factory=list)

    async def by_title(self, title: str, year: int | None = None) -> ProviderMatch | None:
        return self._answer("title", title, self.titles)

    async def by_external_id(self, external_id: str) -> ProviderMatch | None:
        return self._answer("id", external_id, self.ids)

    async def by_search(self, title: str) -> ProviderMatch | None:
        return self._answer("search", title, self.searches)

    def _answer(
        self,
        kind: LookupKind,
        query: str,
        table: dict[str, ProviderMatch],
    ) -> ProviderMatch | None:
        self.calls.append((kind, query))
        if query in self.failing or f"{kind}:{query}" in self.failing:
            raise ProviderTransportError(f"connection reset while fetching {query}")
        return table.get(query)


@dataclass
class FakeEpisodeProvider:
    seasons: dict[tuple[str, int], list[EpisodeMatch]] = field(default_factory=dict)
    fail: bool = False
    calls: list[tuple[str, int]] = field(default_factory=list)

    async def season_episodes(self, series_id: str, season: int) -> list[EpisodeMatch] | None:
        self.calls.append((series_id, season))
        if self.fail:
            raise ProviderTransportError("timeout")
        return self.seasons.get((series_id, season))


@dataclass
class InMemoryRatingRepository:
    records: dict[str, RatingRecord] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    reads: list[set[str]] = field(default_factory=list)

    def read_many(self, keys: Collection[str]) -> dict[str, RatingRecord]:
        self.reads.append(set(keys))
        if self.fail_reads:
            raise StoreError("database is locked")
        return {key: self.records[key] for key in keys if key in self.records}

    def write_many(self, records: Sequence[RatingRecord]) -> None:
        if self.fail_writes:
            raise StoreError("disk I/O error")
        for record in records:
            self.records[record.key] = record


@dataclass
class InMemoryEpisodeRepository:
    episodes: dict[tuple[str, int, int], EpisodeRating] = field(default_factory=dict)
    fail_writes: bool = False

    def read_season(self, series_id: str, season: int) -> list[EpisodeRating]:
        return sorted(
            (
                episode
                for (sid, number, _), episode in self.episodes.items()
                if sid == series_id and number == season
            ),
            key=lambda episode: episode.episode,
        )

    def write_many(self, episodes: Sequence[EpisodeRating]) -> None:
        if self.fail_writes:
            raise StoreError("disk I/O error")
        for episode in episodes:
            self.episodes[(episode.series_id, episode.season, episode.episode)] = episode


class FakeUnitOfWork:
    """Shares its repositories across instances so a test can inspect the store."""

    def __init__(self, repositories: RatingRepositories) -> None:
        self._repositories = repositories
        self.commits = 0

    @property
    def repositories(self) -> RatingRepositories:
        return self._repositories

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        return False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        return None


@dataclass
class FakeStore:
    ratings: InMemoryRatingRepository = field(default_factory=InMemoryRatingRepository)
    episodes: InMemoryEpisodeRepository = field(default_factory=InMemoryEpisodeRepository)
    units: list[FakeUnitOfWork] = field(default_factory=list)
    threads: list[int] = field(default_factory=list)

    def __call__(self) -> FakeUnitOfWork:
        self.threads.append(threading.get_ident())
        uow = FakeUnitOfWork(RatingRepositories(ratings=self.ratings, episodes=self.episodes))
        self.units.append(uow)
        return uow

    @property
    def commits(self) -> int:
        return sum(uow.commits for uow in self.units)
