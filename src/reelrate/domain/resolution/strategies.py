"""Named title reformulations tried in order until the provider yields a match.

Each strategy pairs a pure reformulation ``(title, context) -> query | None`` with
the provider lookup mode to run the query through. Returning ``None`` from the
reformulation means "not applicable" and costs no provider call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .titles import has_ampersand, replace_ampersand, split_on_special_char

if TYPE_CHECKING:
    from collections.abc import Callable

    from reelrate.domain.model import EntityKind
    from reelrate.domain.ports import ProviderMatch, RatingProvider


class LookupMode(StrEnum):
    TITLE = "title"
    SEARCH = "search"


@dataclass(slots=True, frozen=True)
class StrategyContext:
    provider: RatingProvider
    entity_kind: EntityKind | None = None
    verification_rating: float | None = None

    @property
    def confirming(self) -> bool:
        """A verification rating means the caller is confirming a detail page."""

        return self.verification_rating is not None


type Reformulation = Callable[[str, StrategyContext], str | None]


@dataclass(slots=True, frozen=True)
class TitleStrategy:
    name: str
    reformulate: Reformulation
    mode: LookupMode
    # The primary lookup's unverified result is discarded; fallbacks may be kept
    # as a last resort.
    keeps_unverified: bool = True

    def query_for(self, title: str, context: StrategyContext) -> str | None:
        query = self.reformulate(title, context)
        if query is None or not query.strip():
            return None
        return query

    async def attempt(self, query: str, context: StrategyContext) -> ProviderMatch | None:
        if self.mode is LookupMode.TITLE:
            return await context.provider.by_title(query)
        return await context.provider.by_search(query)


def _as_is(title: str, _context: StrategyContext) -> str | None:
    return title


def _ampersand(title: str, _context: StrategyContext) -> str | None:
    if not has_ampersand(title):
        return None
    return replace_ampersand(title)


def _special_char_split(title: str, context: StrategyContext) -> str | None:
    return split_on_special_char(title, reverse=context.confirming)


EXACT_TITLE = TitleStrategy("exact-title", _as_is, LookupMode.TITLE, keeps_unverified=False)
AMPERSAND = TitleStrategy("ampersand", _ampersand, LookupMode.TITLE)
SEARCH = TitleStrategy("search", _as_is, LookupMode.SEARCH)
SPECIAL_CHAR_SPLIT = TitleStrategy("special-char-split", _special_char_split, LookupMode.SEARCH)

DEFAULT_STRATEGIES: tuple[TitleStrategy, ...] = (
    EXACT_TITLE,
    AMPERSAND,
    SEARCH,
    SPECIAL_CHAR_SPLIT,
)
