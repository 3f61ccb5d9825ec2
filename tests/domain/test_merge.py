from __future__ import annotations

from datetime import UTC, datetime

from reelrate.domain.merge import merge_refreshed
from tests.helpers.ratings import NOW, make_record


def test_refresh_replaces_numbers_and_keeps_local_title() -> None:
    existing = make_record(title="Heat", rating=8.1, vote_count=100, secondary_rating="87%")
    incoming = make_record(
        title="Heat (1995)",
        rating=8.3,
        vote_count=250,
        updated_at=NOW,
        secondary_rating="88%",
    )

    merged = merge_refreshed(existing, incoming)

    assert merged.title == "Heat"
    assert merged.rating == 8.3
    assert merged.vote_count == 250
    assert merged.secondary_rating == "88%"
    assert merged.updated_at == NOW
    assert merged.key == existing.key


def test_unknown_year_and_release_keep_cached_values() -> None:
    cached_release = datetime(1995, 12, 15, tzinfo=UTC)
    existing = make_record(year=1995, release_date=cached_release)
    incoming = make_record(year=0, release_date=NOW)

    merged = merge_refreshed(existing, incoming, release_known=False)

    assert merged.year == 1995
    assert merged.release_date == cached_release


def test_missing_secondary_rating_keeps_cached_one() -> None:
    existing = make_record(secondary_rating="91%")
    incoming = make_record(secondary_rating=None)

    assert merge_refreshed(existing, incoming).secondary_rating == "91%"


def test_known_release_date_overrides_cached_one() -> None:
    existing = make_record(release_date=None)
    incoming = make_record(release_date=datetime(2020, 1, 1, tzinfo=UTC))

    merged = merge_refreshed(existing, incoming)

    assert merged.release_date == datetime(2020, 1, 1, tzinfo=UTC)
