"""Port for the external ratings provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class ProviderMatch:
    """A provider title payload reduced to the raw strings the engine needs.

    Values are kept as the provider reported them (``"N/A"``, ``"1,234"``) so that
    validation and lenient parsing happen in one place.
    """

    external_id: str
    title: str
    year: str | None = None
    released: str | None = None
    rating: str | None = None
    votes: str | None = None
    kind: str | None = None
    secondary_rating: str | None = None


@dataclass(slots=True, frozen=True)
class EpisodeMatch:
    episode: str
    title: str
    released: str | None = None
    rating: str | None = None
    external_id: str | None = None


@runtime_checkable
class RatingProvider(Protocol):
    """Request/response lookups; ``None`` is the normal not-found outcome.

    Implementations raise :class:`reelrate.domain.errors.ProviderTransportError`
    on transport failures and never retry by themselves.
    """

    async def by_title(self, title: str, year: int | None = None) -> ProviderMatch | None: ...

    async def by_external_id(self, external_id: str) -> ProviderMatch | None: ...

    async def by_search(self, title: str) -> ProviderMatch | None: ...


@runtime_checkable
class EpisodeProvider(Protocol):
    async def season_episodes(self, series_id: str, season: int) -> list[EpisodeMatch] | None: ...
