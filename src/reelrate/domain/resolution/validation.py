"""Acceptance checks for provider matches."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reelrate.domain.coercion import parse_rating
from reelrate.domain.model import EntityKind

if TYPE_CHECKING:
    from reelrate.domain.ports import ProviderMatch

VERIFICATION_TOLERANCE = 0.2


def ratings_disagree(rating: float, verification_rating: float | None) -> bool:
    """Whether an independently observed rating contradicts ``rating``.

    Ratings have one decimal, so the difference is rounded before comparing to
    keep 7.1 vs 7.3 on the same side as 7.0 vs 7.2.
    """

    if verification_rating is None:
        return False
    return round(abs(rating - verification_rating), 3) >= VERIFICATION_TOLERANCE


def kinds_compatible(requested: EntityKind | None, reported: str | None) -> bool:
    provider_kind = EntityKind.classify(reported)
    if requested is None or provider_kind is None:
        return True
    return requested is provider_kind


def is_valid_match(match: ProviderMatch, requested: EntityKind | None) -> bool:
    """A match is usable when it has a numeric rating and a compatible type."""

    if parse_rating(match.rating) is None:
        return False
    return kinds_compatible(requested, match.kind)


def is_verified(match: ProviderMatch, verification_rating: float | None) -> bool:
    rating = parse_rating(match.rating)
    if rating is None:
        return False
    return not ratings_disagree(rating, verification_rating)
