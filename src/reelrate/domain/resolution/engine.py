"""Resolve one scraped title (plus its cached record) into a rating record."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from reelrate.domain.coercion import parse_rating, parse_released
from reelrate.domain.errors import (
    MissingTitle,
    NotFound,
    ProviderMismatch,
    ProviderTransportError,
    ResolutionError,
)
from reelrate.domain.merge import merge_refreshed
from reelrate.domain.model import ResolutionResult, ResultSource
from reelrate.domain.staleness import StalenessPolicy

from .builder import build_record
from .strategies import DEFAULT_STRATEGIES, StrategyContext, TitleStrategy
from .titles import normalize_title
from .validation import is_valid_match, is_verified, ratings_disagree

if TYPE_CHECKING:
    from reelrate.domain.model import RatingRecord, ResolutionRequest
    from reelrate.domain.ports import ProviderMatch, RatingProvider

log = getLogger(__name__)


def _check_match(match: ProviderMatch, context: StrategyContext) -> ProviderMatch:
    if not is_valid_match(match, context.entity_kind):
        raise ProviderMismatch(
            f"{match.external_id}: rating={match.rating!r} type={match.kind!r} "
            f"(wanted {context.entity_kind})"
        )
    return match


@dataclass(slots=True)
class ResolutionEngine:
    """Cache short-circuit, then the ordered title fallback chain.

    The engine never writes: it returns results whose ``source`` tells the batch
    orchestrator whether the record needs persisting.
    """

    provider: RatingProvider
    policy: StalenessPolicy = field(default_factory=StalenessPolicy)
    strategies: tuple[TitleStrategy, ...] = DEFAULT_STRATEGIES

    async def resolve(
        self,
        request: ResolutionRequest,
        cached: RatingRecord | None = None,
    ) -> ResolutionResult:
        try:
            return await self._resolve(request, cached)
        except ResolutionError as exc:
            log.info("Resolution failed for %s (%r): %s", request.key, request.title, exc)
            return ResolutionResult.failed(request.key, str(exc))

    async def _resolve(
        self,
        request: ResolutionRequest,
        cached: RatingRecord | None,
    ) -> ResolutionResult:
        if cached is not None:
            shortcut = await self._from_cache(request, cached)
            if shortcut is not None:
                return shortcut

        if request.title is None:
            raise MissingTitle

        title = normalize_title(request.title)
        if title != request.title:
            log.debug("Normalised title %r -> %r", request.title, title)

        context = StrategyContext(
            provider=self.provider,
            entity_kind=request.entity_kind,
            verification_rating=request.verification_rating,
        )
        match = await self._run_chain(title, context)
        record = build_record(key=request.key, title=title, match=match, now=self.policy.now())
        return ResolutionResult.resolved(record, ResultSource.API)

    async def _from_cache(
        self,
        request: ResolutionRequest,
        cached: RatingRecord,
    ) -> ResolutionResult | None:
        observed = request.verification_rating
        if not self.policy.is_stale(cached.release_date, cached.updated_at):
            if ratings_disagree(cached.rating, observed):
                log.info(
                    "Cached rating %.1f for %s contradicts observed %.1f; re-resolving",
                    cached.rating,
                    request.key,
                    observed,
                )
                return None
            return ResolutionResult.resolved(cached, ResultSource.CACHE)

        if cached.external_id:
            refreshed = await self._refresh(cached)
            record = refreshed.data
            if (
                refreshed.source is ResultSource.API_REFRESH
                and record is not None
                and request.title is not None
                and ratings_disagree(record.rating, observed)
            ):
                log.info(
                    "Refreshed rating %.1f for %s still contradicts observed %.1f; re-resolving",
                    record.rating,
                    request.key,
                    observed,
                )
                return None
            return refreshed

        if request.title is None:
            return ResolutionResult.resolved(cached, ResultSource.CACHE_STALE)
        return None

    async def _refresh(self, cached: RatingRecord) -> ResolutionResult:
        """Refresh by external id; a failed refresh keeps the stale record.

        Falling back to a title search here could silently swap in a different
        title, so an id-keyed failure is never papered over.
        """

        try:
            match = await self.provider.by_external_id(cached.external_id)
        except ProviderTransportError as exc:
            log.warning("Refresh of %s (%s) failed: %s", cached.key, cached.external_id, exc)
            return ResolutionResult.resolved(cached, ResultSource.CACHE_STALE)

        if match is None or parse_rating(match.rating) is None:
            log.info("Refresh of %s (%s) returned no rating", cached.key, cached.external_id)
            return ResolutionResult.resolved(cached, ResultSource.CACHE_STALE)

        incoming = build_record(
            key=cached.key,
            title=cached.title,
            match=match,
            now=self.policy.now(),
        )
        merged = merge_refreshed(
            cached,
            incoming,
            release_known=parse_released(match.released) is not None,
        )
        return ResolutionResult.resolved(merged, ResultSource.API_REFRESH)

    async def _run_chain(self, title: str, context: StrategyContext) -> ProviderMatch:
        """Return the first valid, verified match, else the first kept fallback."""

        fallback: ProviderMatch | None = None
        transport_error: ProviderTransportError | None = None

        for strategy in self.strategies:
            query = strategy.query_for(title, context)
            if query is None:
                continue
            log.debug("Strategy %s: querying %r", strategy.name, query)
            try:
                match = await strategy.attempt(query, context)
            except ProviderTransportError as exc:
                log.warning("Strategy %s failed for %r: %s", strategy.name, query, exc)
                transport_error = transport_error or exc
                continue
            if match is None:
                continue
            try:
                _check_match(match, context)
            except ProviderMismatch as exc:
                log.debug("Strategy %s rejected match: %s", strategy.name, exc)
                continue
            if is_verified(match, context.verification_rating):
                log.debug("Strategy %s matched %s", strategy.name, match.external_id)
                return match
            log.debug(
                "Strategy %s match %s disagrees with observed rating %s",
                strategy.name,
                match.external_id,
                context.verification_rating,
            )
            if strategy.keeps_unverified and fallback is None:
                fallback = match

        if fallback is not None:
            return fallback
        if transport_error is not None:
            raise transport_error
        raise NotFound
