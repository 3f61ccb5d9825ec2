"""Per-season episode ratings, cached with the same freshness policy as titles."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from reelrate.domain.errors import NotFound, ProviderTransportError, StoreError
from reelrate.domain.model import ResultSource
from reelrate.domain.resolution import build_episode
from reelrate.domain.staleness import StalenessPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from reelrate.domain.model import EpisodeRating
    from reelrate.domain.ports import EpisodeProvider, RatingsUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SeasonRatings:
    series_id: str
    season: int
    episodes: list[EpisodeRating]
    source: ResultSource

    def to_wire(self) -> dict[str, object]:
        return {
            "seriesId": self.series_id,
            "season": self.season,
            "source": self.source.value,
            "episodes": [episode.to_wire() for episode in self.episodes],
        }


@dataclass(slots=True)
class EpisodeRatingService:
    provider: EpisodeProvider
    unit_of_work_factory: Callable[[], RatingsUnitOfWork]
    policy: StalenessPolicy = field(default_factory=StalenessPolicy)

    async def season(self, series_id: str, season: int) -> SeasonRatings:
        """Return the ratings of one season, fetching when the cached set is stale.

        An episode without a release date counts as stale, so seasons still airing
        are refetched on the shortest tier.
        """

        cached = await asyncio.to_thread(self._read, series_id, season)
        if cached and not any(
            self.policy.is_stale(episode.release_date, episode.updated_at) for episode in cached
        ):
            return SeasonRatings(series_id, season, cached, ResultSource.CACHE)

        try:
            matches = await self.provider.season_episodes(series_id, season)
        except ProviderTransportError as exc:
            if not cached:
                raise
            log.warning("Episode refresh for %s S%d failed: %s", series_id, season, exc)
            return SeasonRatings(series_id, season, cached, ResultSource.CACHE_STALE)

        now = self.policy.now()
        episodes = [
            episode
            for match in matches or ()
            if (episode := build_episode(series_id=series_id, season=season, match=match, now=now))
            is not None
        ]
        if not episodes:
            if cached:
                return SeasonRatings(series_id, season, cached, ResultSource.CACHE_STALE)
            raise NotFound(f"no episodes for {series_id} season {season}")

        try:
            await asyncio.to_thread(self._write, episodes)
        except StoreError as exc:
            log.warning("Persisting episodes for %s S%d failed: %s", series_id, season, exc)
        return SeasonRatings(series_id, season, episodes, ResultSource.API)

    def _write(self, episodes: list[EpisodeRating]) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.episodes.write_many(episodes)
            uow.commit()

    def _read(self, series_id: str, season: int) -> list[EpisodeRating]:
        try:
            with self.unit_of_work_factory() as uow:
                return uow.repositories.episodes.read_season(series_id, season)
        except StoreError as exc:
            log.warning("Reading episodes for %s S%d failed: %s", series_id, season, exc)
            return []
