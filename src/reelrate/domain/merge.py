"""Precedence rules for splicing an id-keyed refresh into a cached record."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reelrate.domain.model import RatingRecord


def merge_refreshed(
    existing: RatingRecord,
    incoming: RatingRecord,
    *,
    release_known: bool = True,
) -> RatingRecord:
    """Return ``existing`` updated with the numeric fields of ``incoming``.

    Numeric fields (rating, votes, secondary rating) and the update time always
    come from the refresh. The title is always the cached one: it is the
    locally normalised title future lookups are keyed against. Year and release
    date come from the refresh unless the provider now reports them unknown
    (year ``0``, or ``release_known`` false), in which case the cached values stay.
    """

    return replace(
        existing,
        external_id=incoming.external_id or existing.external_id,
        year=incoming.year or existing.year,
        release_date=(
            incoming.release_date
            if release_known and incoming.release_date is not None
            else existing.release_date or incoming.release_date
        ),
        rating=incoming.rating,
        vote_count=incoming.vote_count,
        secondary_rating=(
            incoming.secondary_rating
            if incoming.secondary_rating is not None
            else existing.secondary_rating
        ),
        updated_at=incoming.updated_at,
    )
