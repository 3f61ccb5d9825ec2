"""HTTP client for the OMDb API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import BaseModel, ValidationError

from reelrate.adapters.http_resilience import ResilientClient
from reelrate.config.omdb import OMDB_BASE_URL, OmdbConfig, get_omdb_config
from reelrate.domain.errors import ProviderTransportError

from .schema import OmdbEnvelope, OmdbSearchResponse, OmdbSeasonResponse, OmdbTitle
from .translator import translate_episode, translate_title

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from types import TracebackType

    from reelrate.config.http_resilience import ResilienceConfig
    from reelrate.domain.ports import EpisodeMatch, ProviderMatch

log = getLogger(__name__)


def is_found_payload(payload: object) -> bool:
    """Only successful lookups are worth caching at the HTTP layer."""

    return isinstance(payload, dict) and cast(dict[str, object], payload).get("Response") == "True"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class OmdbClient:
    """OMDb lookups by title, by IMDb id, by search, and by season.

    Use as an async context manager to share one connection pool (and HTTP
    cache) across a batch; outside of one, each call opens its own client.
    """

    def __init__(
        self,
        *,
        config: OmdbConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_omdb_config(cache_predicate=is_found_payload)
        self._resilience = self._config.resilience
        self._client_factory = client_factory or _default_client_factory
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> OmdbClient:
        self._client = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def by_title(self, title: str, year: int | None = None) -> ProviderMatch | None:
        params: dict[str, str] = {"t": title}
        if year:
            params["y"] = str(year)
        payload = await self._lookup(params, OmdbTitle)
        return translate_title(payload) if payload is not None else None

    async def by_external_id(self, external_id: str) -> ProviderMatch | None:
        payload = await self._lookup({"i": external_id}, OmdbTitle)
        return translate_title(payload) if payload is not None else None

    async def by_search(self, title: str) -> ProviderMatch | None:
        """Search, then fetch the details of the first ranked candidate."""

        results = await self._lookup({"s": title}, OmdbSearchResponse)
        if results is None or not results.search:
            return None
        best = results.search[0]
        log.debug("OMDb search %r ranked %s (%s) first", title, best.imdb_id, best.title)
        return await self.by_external_id(best.imdb_id)

    async def season_episodes(self, series_id: str, season: int) -> list[EpisodeMatch] | None:
        payload = await self._lookup({"i": series_id, "Season": str(season)}, OmdbSeasonResponse)
        if payload is None:
            return None
        return [translate_episode(episode) for episode in payload.episodes]

    async def _lookup[TModel: BaseModel](
        self,
        params: dict[str, str],
        model: type[TModel],
    ) -> TModel | None:
        payload = await self._perform_request(params)
        try:
            envelope = OmdbEnvelope.model_validate(payload)
            if not envelope.found:
                log.debug("OMDb %s: %s", _describe(params), envelope.error or "not found")
                return None
            return model.model_validate(payload)
        except ValidationError as exc:
            raise ProviderTransportError(
                f"unexpected OMDb payload for {_describe(params)}: {exc.error_count()} error(s)"
            ) from exc

    async def _perform_request(self, params: dict[str, str]) -> dict[str, object]:
        url = self._resilience.base_url or OMDB_BASE_URL
        query = httpx.QueryParams({"apikey": self._config.api_key, **params})
        try:
            async with self._session() as client:
                response = await client.get(url, params=query)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise ProviderTransportError(
                f"OMDb request {_describe(params)} failed: {exc}"
            ) from exc
        except ValueError as exc:
            raise ProviderTransportError(
                f"OMDb request {_describe(params)} returned invalid JSON"
            ) from exc

        if not isinstance(payload, dict):
            raise ProviderTransportError(f"unexpected OMDb payload for {_describe(params)}")
        return cast(dict[str, object], payload)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[ResilientClient]:
        if self._client is not None:
            yield self._client
            return
        async with self._client_factory(self._resilience) as client:
            yield client


def _describe(params: dict[str, str]) -> str:
    return "&".join(f"{key}={value}" for key, value in params.items())


if TYPE_CHECKING:
    from reelrate.domain.ports import EpisodeProvider, RatingProvider

    _provider_check: RatingProvider = OmdbClient()
    _episode_check: EpisodeProvider = OmdbClient()
