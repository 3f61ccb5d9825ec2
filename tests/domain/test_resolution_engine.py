"""Behaviour of the cache short-circuit and the title fallback chain."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from reelrate.domain.model import RatingRecord, ResolutionRequest, ResolutionResult, ResultSource
from reelrate.domain.resolution import ResolutionEngine
from tests.helpers.ratings import NOW, FakeProvider, frozen_policy, make_match, make_record

STALE = NOW - timedelta(days=40)


def _resolve(
    provider: FakeProvider,
    request: ResolutionRequest,
    cached_record: RatingRecord | None = None,
) -> ResolutionResult:
    engine = ResolutionEngine(provider=provider, policy=frozen_policy())
    return asyncio.run(engine.resolve(request, cached_record))


def test_fresh_cache_hit_makes_no_provider_calls() -> None:
    provider = FakeProvider()
    cached = make_record("/title/heat", title="Heat", updated_at=NOW - timedelta(days=2))

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"), cached)

    assert result.source is ResultSource.CACHE
    assert result.data == cached
    assert provider.calls == []


def test_resolution_is_idempotent_against_its_own_output() -> None:
    provider = FakeProvider(titles={"Heat": make_match("tt0113277", "Heat")})
    request = ResolutionRequest(key="/title/heat", title="Heat")

    first = _resolve(provider, request)
    assert first.source is ResultSource.API
    calls_after_first = list(provider.calls)

    second = _resolve(provider, request, first.data)

    assert second.source is ResultSource.CACHE
    assert second.data == first.data
    assert provider.calls == calls_after_first


def test_exact_title_builds_record_with_normalised_title() -> None:
    provider = FakeProvider(
        titles={"Dune": make_match("tt1160419", "Dune: Part One", rating="8.0", votes="700,000")}
    )

    result = _resolve(provider, ResolutionRequest(key="/title/dune", title="Dune (2021)"))

    assert result.ok
    assert result.source is ResultSource.API
    record = result.data
    assert record is not None
    assert record.title == "Dune"
    assert record.external_id == "tt1160419"
    assert record.rating == 8.0
    assert record.vote_count == 700000
    assert record.year == 2018
    assert record.release_date == datetime(2018, 7, 27, tzinfo=UTC)
    assert record.updated_at == NOW
    assert provider.calls == [("title", "Dune")]


def test_unknown_release_date_defaults_to_now() -> None:
    provider = FakeProvider(titles={"Heat": make_match(released="N/A", year="N/A")})

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"))

    assert result.data is not None
    assert result.data.release_date == NOW
    assert result.data.year == 0


def test_ampersand_spelling_is_tried_before_search() -> None:
    provider = FakeProvider(
        titles={"Fast and Furious": make_match("tt1013752", "Fast & Furious")},
        searches={"Fast & Furious": make_match("tt9999999", "Something Else")},
    )

    result = _resolve(provider, ResolutionRequest(key="/title/ff", title="Fast & Furious"))

    assert result.data is not None
    assert result.data.external_id == "tt1013752"
    assert provider.calls == [("title", "Fast & Furious"), ("title", "Fast and Furious")]


def test_forward_split_keeps_text_before_separator() -> None:
    provider = FakeProvider(
        searches={"Mission: Impossible": make_match("tt0117060", "Mission: Impossible")}
    )

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/mi", title="Mission: Impossible - Fallout"),
    )

    assert result.data is not None
    assert result.data.external_id == "tt0117060"
    assert provider.calls == [
        ("title", "Mission: Impossible - Fallout"),
        ("search", "Mission: Impossible - Fallout"),
        ("search", "Mission: Impossible"),
    ]


def test_forward_split_keeps_hyphenated_words_whole() -> None:
    provider = FakeProvider(
        searches={
            "Spider": make_match("tt0000009", "Spider"),
            "Spider-Man": make_match("tt0145487", "Spider-Man"),
        }
    )

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/spidey", title="Spider-Man: No Way Home"),
    )

    assert result.data is not None
    assert result.data.external_id == "tt0145487"
    assert provider.calls[-1] == ("search", "Spider-Man")


def test_reverse_split_when_confirming_a_detail_page() -> None:
    provider = FakeProvider(
        searches={"Edge of Tomorrow": make_match("tt1631867", "Edge of Tomorrow", rating="7.9")}
    )
    request = ResolutionRequest(
        key="/title/eot",
        title="Live Die Repeat: Edge of Tomorrow",
        verification_rating=7.9,
    )

    result = _resolve(provider, request)

    assert result.data is not None
    assert result.data.external_id == "tt1631867"
    assert provider.calls[-1] == ("search", "Edge of Tomorrow")


def test_verification_mismatch_invalidates_fresh_cache() -> None:
    provider = FakeProvider(titles={"Heat": make_match("tt0113277", "Heat", rating="7.5")})
    cached = make_record("/title/heat", title="Heat", rating=6.0)

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/heat", title="Heat", verification_rating=7.5),
        cached,
    )

    assert result.source is ResultSource.API
    assert result.data is not None
    assert result.data.rating == 7.5


def test_small_rating_difference_keeps_cache() -> None:
    provider = FakeProvider()
    cached = make_record("/title/heat", title="Heat", rating=7.1)

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/heat", title="Heat", verification_rating=7.2),
        cached,
    )

    assert result.source is ResultSource.CACHE
    assert provider.calls == []


def test_unverified_primary_result_is_discarded() -> None:
    provider = FakeProvider(
        titles={"Heat": make_match("tt0000001", "Heat", rating="5.0")},
        searches={"Heat": make_match("tt0113277", "Heat", rating="8.0")},
    )

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/heat", title="Heat", verification_rating=8.0),
    )

    assert result.data is not None
    assert result.data.external_id == "tt0113277"


def test_unverified_fallback_is_used_when_nothing_verifies() -> None:
    provider = FakeProvider(
        titles={"Heat": make_match("tt0000001", "Heat", rating="5.0")},
        searches={"Heat": make_match("tt0000002", "Heat", rating="5.1")},
    )

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/heat", title="Heat", verification_rating=8.0),
    )

    assert result.data is not None
    assert result.data.external_id == "tt0000002"


def test_unverified_primary_alone_is_not_found() -> None:
    provider = FakeProvider(titles={"Heat": make_match("tt0000001", "Heat", rating="5.0")})

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/heat", title="Heat", verification_rating=8.0),
    )

    assert not result.ok
    assert result.error == "not found"


def test_type_mismatch_is_treated_as_not_found() -> None:
    provider = FakeProvider(titles={"Heat": make_match(kind="movie")})

    result = _resolve(
        provider,
        ResolutionRequest(key="/title/heat", title="Heat", entity_type="TV Show"),
    )

    assert result.error == "not found"
    assert result.data is None


def test_missing_rating_is_treated_as_not_found() -> None:
    provider = FakeProvider(titles={"Heat": make_match(rating="N/A")})

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"))

    assert result.error == "not found"


def test_missing_title_without_cache_fails() -> None:
    result = _resolve(FakeProvider(), ResolutionRequest(key="/title/unknown"))

    assert result.key == "/title/unknown"
    assert result.error == "title missing"


def test_stale_record_is_refreshed_by_external_id() -> None:
    provider = FakeProvider(
        ids={"tt0113277": make_match("tt0113277", "Heat (1995)", rating="8.3", votes="2,000")}
    )
    cached = make_record(
        "/title/heat",
        external_id="tt0113277",
        title="Heat",
        rating=8.1,
        updated_at=STALE,
    )

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"), cached)

    assert result.source is ResultSource.API_REFRESH
    assert result.data is not None
    assert result.data.title == "Heat"
    assert result.data.rating == 8.3
    assert result.data.vote_count == 2000
    assert result.data.updated_at == NOW
    assert provider.calls == [("id", "tt0113277")]


def test_stale_record_with_id_is_refreshed_before_verification() -> None:
    provider = FakeProvider(
        titles={"Heat": make_match("tt0999999", "Heat", rating="7.6")},
        ids={"tt0113277": make_match("tt0113277", "Heat", rating="7.6")},
    )
    cached = make_record(
        "/title/heat",
        external_id="tt0113277",
        title="Heat",
        rating=7.0,
        updated_at=STALE,
    )
    request = ResolutionRequest(key="/title/heat", title="Heat", verification_rating=7.6)

    result = _resolve(provider, request, cached)

    assert result.source is ResultSource.API_REFRESH
    assert result.data is not None
    assert result.data.external_id == "tt0113277"
    assert result.data.rating == 7.6
    assert provider.calls == [("id", "tt0113277")]


def test_refreshed_rating_that_still_disagrees_is_re_resolved_by_title() -> None:
    provider = FakeProvider(
        titles={"Heat": make_match("tt0113277", "Heat", rating="8.3")},
        ids={"tt0000042": make_match("tt0000042", "Heat", rating="5.1")},
    )
    cached = make_record(
        "/title/heat",
        external_id="tt0000042",
        title="Heat",
        rating=5.0,
        updated_at=STALE,
    )
    request = ResolutionRequest(key="/title/heat", title="Heat", verification_rating=8.3)

    result = _resolve(provider, request, cached)

    assert result.source is ResultSource.API
    assert result.data is not None
    assert result.data.external_id == "tt0113277"
    assert provider.calls == [("id", "tt0000042"), ("title", "Heat")]


def test_failed_refresh_returns_stale_record_without_title_search() -> None:
    provider = FakeProvider(failing={"tt0113277"}, titles={"Heat": make_match()})
    cached = make_record("/title/heat", external_id="tt0113277", updated_at=STALE)

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"), cached)

    assert result.source is ResultSource.CACHE_STALE
    assert result.data == cached
    assert provider.calls == [("id", "tt0113277")]


def test_refresh_without_rating_returns_stale_record() -> None:
    provider = FakeProvider(ids={"tt0113277": make_match("tt0113277", rating="N/A")})
    cached = make_record("/title/heat", external_id="tt0113277", updated_at=STALE)

    result = _resolve(provider, ResolutionRequest(key="/title/heat"), cached)

    assert result.source is ResultSource.CACHE_STALE
    assert result.data == cached


def test_stale_record_without_id_or_title_is_served_stale() -> None:
    provider = FakeProvider()
    cached = make_record("/title/heat", external_id="", updated_at=STALE)

    result = _resolve(provider, ResolutionRequest(key="/title/heat"), cached)

    assert result.source is ResultSource.CACHE_STALE
    assert provider.calls == []


def test_stale_record_without_id_is_resolved_by_title() -> None:
    provider = FakeProvider(titles={"Heat": make_match("tt0113277", "Heat")})
    cached = make_record("/title/heat", external_id="", updated_at=STALE)

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"), cached)

    assert result.source is ResultSource.API
    assert result.data is not None
    assert result.data.external_id == "tt0113277"


def test_transport_error_mid_chain_does_not_stop_later_strategies() -> None:
    provider = FakeProvider(
        failing={"title:Heat"},
        searches={"Heat": make_match("tt0113277", "Heat")},
    )

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"))

    assert result.source is ResultSource.API
    assert result.data is not None
    assert provider.calls == [("title", "Heat"), ("search", "Heat")]


def test_transport_error_is_reported_when_nothing_matches() -> None:
    provider = FakeProvider(failing={"Heat"})

    result = _resolve(provider, ResolutionRequest(key="/title/heat", title="Heat"))

    assert not result.ok
    assert result.error is not None
    assert "connection reset" in result.error
