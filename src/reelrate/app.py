"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import AsyncExitStack
from logging import getLogger
from typing import TYPE_CHECKING

from reelrate.adapters.omdb import OmdbClient
from reelrate.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRatingsUnitOfWork,
    is_started,
    startup,
)
from reelrate.domain.batch import BatchOrchestrator, BatchOutcome
from reelrate.domain.episodes import EpisodeRatingService, SeasonRatings
from reelrate.domain.ports.unit_of_work import RatingsUnitOfWork
from reelrate.domain.resolution import ResolutionEngine
from reelrate.domain.staleness import StalenessPolicy

if TYPE_CHECKING:
    from reelrate.domain.ports import EpisodeProvider, RatingProvider

UnitOfWorkFactory = Callable[[], RatingsUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def resolve_ratings(
    payload: object,
    *,
    provider: RatingProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    policy: StalenessPolicy | None = None,
) -> BatchOutcome:
    """Resolve one batch of scraped titles against the store and OMDb."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyRatingsUnitOfWork
    effective_policy = policy or StalenessPolicy()

    async def run() -> BatchOutcome:
        async with AsyncExitStack() as stack:
            effective_provider = provider or await stack.enter_async_context(OmdbClient())
            orchestrator = BatchOrchestrator(
                engine=ResolutionEngine(provider=effective_provider, policy=effective_policy),
                unit_of_work_factory=effective_uow,
            )
            return await orchestrator.resolve(payload)

    outcome = asyncio.run(run())
    log.info(
        f"Finished rating batch: results={len(outcome.results)}, dropped={outcome.dropped}, "
        f"persisted={outcome.persisted}, store_error={outcome.store_error is not None}"
    )
    return outcome


def season_ratings(
    series_id: str,
    season: int,
    *,
    provider: EpisodeProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    policy: StalenessPolicy | None = None,
) -> SeasonRatings:
    """Return the episode ratings of one season, refreshing them when stale."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyRatingsUnitOfWork

    async def run() -> SeasonRatings:
        async with AsyncExitStack() as stack:
            effective_provider = provider or await stack.enter_async_context(OmdbClient())
            service = EpisodeRatingService(
                provider=effective_provider,
                unit_of_work_factory=effective_uow,
                policy=policy or StalenessPolicy(),
            )
            return await service.season(series_id, season)

    log.info("Fetching episode ratings: series=%s, season=%s", series_id, season)
    return asyncio.run(run())
