"""Freshness policy for cached ratings.

Ratings of newly released titles move quickly while votes accumulate, so they are
revalidated often; ratings of older titles are effectively settled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from reelrate.domain.coercion import parse_timestamp


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class TtlTier:
    """Records released at most ``max_age_days`` ago live for ``ttl``."""

    max_age_days: float | None
    ttl: timedelta


DEFAULT_TIERS: tuple[TtlTier, ...] = (
    TtlTier(max_age_days=7, ttl=timedelta(hours=1)),
    TtlTier(max_age_days=14, ttl=timedelta(days=1)),
    TtlTier(max_age_days=None, ttl=timedelta(days=30)),
)


def select_ttl(
    days_since_release: float,
    tiers: tuple[TtlTier, ...] = DEFAULT_TIERS,
) -> timedelta:
    for tier in tiers:
        if tier.max_age_days is None or days_since_release <= tier.max_age_days:
            return tier.ttl
    return tiers[-1].ttl


def is_stale(
    release_date: datetime | str | None,
    updated_at: datetime | str | None,
    now: datetime,
    *,
    tiers: tuple[TtlTier, ...] = DEFAULT_TIERS,
) -> bool:
    """Return whether a record must be revalidated before reuse.

    A missing or unparsable release date (or update time) is stale: the policy
    fails open toward a refresh.
    """

    released = parse_timestamp(release_date)
    updated = parse_timestamp(updated_at)
    if released is None or updated is None:
        return True

    days_since_release = (now - released) / timedelta(days=1)
    return now - updated > select_ttl(days_since_release, tiers)


@dataclass(slots=True, frozen=True)
class StalenessPolicy:
    """Injectable bundle of tier table and clock."""

    tiers: tuple[TtlTier, ...] = DEFAULT_TIERS
    clock: Clock = field(default=utcnow)

    def now(self) -> datetime:
        return self.clock()

    def is_stale(
        self,
        release_date: datetime | str | None,
        updated_at: datetime | str | None,
    ) -> bool:
        return is_stale(release_date, updated_at, self.clock(), tiers=self.tiers)
