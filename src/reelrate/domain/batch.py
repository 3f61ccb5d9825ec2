"""Batch orchestration: one store read, concurrent resolution, one store write.

The store is synchronous; both round trips run in a worker thread so the event
loop keeps serving provider calls.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from reelrate.domain.errors import InvalidBatchError, MissingKey, StoreError
from reelrate.domain.model import ResolutionResult, requests_from_wire

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from reelrate.domain.model import RatingRecord, ResolutionRequest
    from reelrate.domain.ports import RatingsUnitOfWork
    from reelrate.domain.resolution import ResolutionEngine

log = getLogger(__name__)


@dataclass(slots=True)
class BatchOutcome:
    """Results of one batch plus what happened to persistence.

    ``results`` holds one entry per keyed input item; items repeating a key share
    the result resolved for its first occurrence.
    """

    results: list[ResolutionResult]
    dropped: int = 0
    persisted: int = 0
    store_error: str | None = None

    def to_wire(self) -> dict[str, object]:
        return {"results": [result.to_wire() for result in self.results]}


def parse_batch(payload: object) -> list[ResolutionRequest | None]:
    """Accept ``{"movies": [...]}`` or a bare list; anything else is malformed."""

    items = payload.get("movies") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise InvalidBatchError("Batch request must be a list of items")
    return requests_from_wire(items)


def dedupe_requests(requests: Sequence[ResolutionRequest]) -> list[ResolutionRequest]:
    """Keep the first request per key, in input order."""

    first_by_key: dict[str, ResolutionRequest] = {}
    for request in requests:
        first_by_key.setdefault(request.key, request)
    return list(first_by_key.values())


@dataclass(slots=True)
class BatchOrchestrator:
    engine: ResolutionEngine
    unit_of_work_factory: Callable[[], RatingsUnitOfWork]

    async def resolve(self, payload: object) -> BatchOutcome:
        """Resolve a batch; item failures land in their results, never raise.

        Raises :class:`InvalidBatchError` only when ``payload`` is not a batch.
        """

        parsed = parse_batch(payload)
        keyed = [request for request in parsed if request is not None]
        dropped = len(parsed) - len(keyed)
        if dropped:
            log.warning("Dropped %d item(s): %s", dropped, MissingKey.reason)
        distinct = dedupe_requests(keyed)
        if not distinct:
            return BatchOutcome(results=[], dropped=dropped)

        snapshot = await asyncio.to_thread(
            self._read_snapshot, {request.key for request in distinct}
        )
        log.info(
            "Resolving batch: items=%d, distinct=%d, cached=%d",
            len(keyed),
            len(distinct),
            len(snapshot),
        )

        gathered = await asyncio.gather(
            *(self.engine.resolve(request, snapshot.get(request.key)) for request in distinct),
            return_exceptions=True,
        )
        by_key = {
            request.key: _capture(request, result)
            for request, result in zip(distinct, gathered, strict=True)
        }

        outcome = BatchOutcome(
            results=[by_key[request.key] for request in keyed],
            dropped=dropped,
        )
        updates = [
            result.data
            for result in by_key.values()
            if result.data is not None and result.source is not None and result.source.needs_persist
        ]
        if updates:
            try:
                await asyncio.to_thread(self._write, updates)
            except StoreError as exc:
                log.warning("Persisting %d record(s) failed: %s", len(updates), exc)
                outcome.store_error = str(exc)
            else:
                outcome.persisted = len(updates)

        log.info(
            "Finished batch: resolved=%d, failed=%d, persisted=%d",
            sum(1 for result in by_key.values() if result.ok),
            sum(1 for result in by_key.values() if not result.ok),
            outcome.persisted,
        )
        return outcome

    def _read_snapshot(self, keys: set[str]) -> dict[str, RatingRecord]:
        try:
            with self.unit_of_work_factory() as uow:
                return uow.repositories.ratings.read_many(keys)
        except StoreError as exc:
            log.warning("Reading cached ratings failed, resolving without cache: %s", exc)
            return {}

    def _write(self, records: list[RatingRecord]) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.ratings.write_many(records)
            uow.commit()


def _capture(
    request: ResolutionRequest,
    result: ResolutionResult | BaseException,
) -> ResolutionResult:
    if isinstance(result, ResolutionResult):
        return result
    if not isinstance(result, Exception):
        raise result
    log.error("Unexpected failure resolving %s", request.key, exc_info=result)
    return ResolutionResult.failed(request.key, f"internal error: {result}")
