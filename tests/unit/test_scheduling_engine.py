"""
Tests for the scheduling engine.

Covers multi-market assignment (request order, intra-request reservation,
partial failure) and blocking with displacement.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from pubcal.components.scheduling import SchedulingConfig, SchedulingService

TODAY = date(2026, 1, 5)
JAN_10 = date(2026, 1, 10)
JAN_11 = date(2026, 1, 11)
JAN_12 = date(2026, 1, 12)
JAN_13 = date(2026, 1, 13)


def scheduled_dates(seed, manuscript_id: int) -> dict[str, date | None]:
    return {p.market: p.scheduled_date for p in seed.all() if p.manuscript_id == manuscript_id}


def scheduled_count(seed, day: date) -> int:
    return sum(1 for p in seed.all() if p.status == "scheduled" and p.scheduled_date == day)


# --- Multi-market scheduling ---


class TestScheduleMarkets:
    def test_single_market_skips_full_dates(self, seed, scheduling) -> None:
        """Jan 10-12 full, Jan 13 empty: a new manuscript lands on Jan 13."""
        for day in (JAN_10, JAN_11, JAN_12):
            seed.fill(day)
        mid = seed.manuscript("New Book")

        result, errors = scheduling.schedule_markets(mid, ["amazon.com"], JAN_10)

        assert errors == []
        assert result is not None
        assert [(a.market, a.date) for a in result.assigned] == [("amazon.com", JAN_13)]
        assert result.failed == ()
        assert scheduled_dates(seed, mid) == {"amazon.com": JAN_13}

    def test_intra_request_reservation(self, seed, scheduling) -> None:
        """Date with 2 occupied slots: A takes the 3rd, B and C move to the next day."""
        seed.fill(JAN_10, count=2)
        mid = seed.manuscript("M")

        result, errors = scheduling.schedule_markets(
            mid, ["amazon.com", "amazon.de", "amazon.fr"], JAN_10
        )

        assert errors == []
        assert [(a.market, a.date) for a in result.assigned] == [
            ("amazon.com", JAN_10),
            ("amazon.de", JAN_11),
            ("amazon.fr", JAN_11),
        ]
        assert scheduled_count(seed, JAN_10) == 3
        assert scheduled_count(seed, JAN_11) == 2

    def test_same_manuscript_packs_same_date(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(mid, ["amazon.com", "amazon.de"], JAN_10)

        assert [a.date for a in result.assigned] == [JAN_10, JAN_10]

    def test_cursor_never_moves_backwards(self, seed, scheduling) -> None:
        """A later market never gets an earlier date than the one before it."""
        seed.fill(JAN_10)
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(
            mid, ["amazon.com", "amazon.de", "amazon.fr", "amazon.it"], JAN_10
        )

        dates = [a.date for a in result.assigned]
        assert dates == sorted(dates)
        assert dates == [JAN_11, JAN_11, JAN_11, JAN_12]

    def test_request_order_is_processing_order(self, seed, scheduling) -> None:
        seed.fill(JAN_10, count=2)
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(mid, ["amazon.fr", "amazon.com"], JAN_10)

        assert [(a.market, a.date) for a in result.assigned] == [
            ("amazon.fr", JAN_10),
            ("amazon.com", JAN_11),
        ]

    def test_default_start_is_today(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(mid, ["amazon.com"])

        assert result.assigned[0].date == TODAY

    def test_recent_past_start_clamped_to_today(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(
            mid, ["amazon.com"], TODAY - timedelta(days=3)
        )

        assert errors == []
        assert result.assigned[0].date == TODAY

    def test_start_too_far_in_past_rejected(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(
            mid, ["amazon.com"], TODAY - timedelta(days=31)
        )

        assert result is None
        assert [e.code for e in errors] == ["past_date"]
        assert seed.all() == []

    def test_skips_blocked_dates(self, seed, scheduling) -> None:
        seed.block(JAN_10)
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(mid, ["amazon.com"], JAN_10)

        assert result.assigned[0].date == JAN_11

    def test_duplicate_markets_scheduled_once(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(
            mid, ["amazon.com", "amazon.com", "amazon.de"], JAN_10
        )

        assert [a.market for a in result.assigned] == ["amazon.com", "amazon.de"]
        assert len(seed.all()) == 2

    def test_existing_rows_are_skipped(self, seed, scheduling) -> None:
        mid = seed.manuscript()
        seed.scheduled(mid, "amazon.com", JAN_12)
        seed.published(mid, "amazon.de", date(2025, 12, 1))

        result, errors = scheduling.schedule_markets(
            mid, ["amazon.com", "amazon.de", "amazon.fr"], JAN_10
        )

        assert errors == []
        assert result.skipped == ("amazon.com", "amazon.de")
        assert [(a.market, a.date) for a in result.assigned] == [("amazon.fr", JAN_10)]
        assert scheduled_dates(seed, mid)["amazon.com"] == JAN_12

    def test_pending_row_is_promoted(self, seed, scheduling) -> None:
        mid = seed.manuscript()
        pending_id = seed.pending(mid, "amazon.com")

        result, _ = scheduling.schedule_markets(mid, ["amazon.com"], JAN_10)

        assert result.assigned[0].publication_id == pending_id
        publication = seed.get(pending_id)
        assert publication.status == "scheduled"
        assert publication.scheduled_date == JAN_10
        assert len(seed.all()) == 1


class TestScheduleMarketsValidation:
    def test_unknown_manuscript(self, seed, scheduling) -> None:
        result, errors = scheduling.schedule_markets(404, ["amazon.com"], JAN_10)

        assert result is None
        assert [e.code for e in errors] == ["not_found"]

    def test_unknown_market_rejects_whole_request(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(mid, ["amazon.com", "ebay.com"], JAN_10)

        assert result is None
        assert [(e.code, e.market) for e in errors] == [("invalid_market", "ebay.com")]
        assert seed.all() == []

    def test_empty_market_list(self, seed, scheduling) -> None:
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(mid, [], JAN_10)

        assert result is None
        assert [e.code for e in errors] == ["invalid_market"]


class TestHorizon:
    @pytest.fixture
    def config(self) -> SchedulingConfig:
        return SchedulingConfig(horizon_days=3)

    def test_partial_success(self, seed, scheduling) -> None:
        """Markets after the horizon is used up fail; earlier ones keep their dates."""
        seed.fill(TODAY + timedelta(days=1))
        seed.fill(TODAY + timedelta(days=2))
        seed.fill(TODAY, count=1)
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(
            mid, ["amazon.com", "amazon.de", "amazon.fr"], TODAY
        )

        assert errors == []
        assert [(a.market, a.date) for a in result.assigned] == [
            ("amazon.com", TODAY),
            ("amazon.de", TODAY),
        ]
        assert [(f.market, f.code) for f in result.failed] == [
            ("amazon.fr", "no_capacity_within_horizon")
        ]
        assert set(scheduled_dates(seed, mid)) == {"amazon.com", "amazon.de"}

    def test_all_markets_fail(self, seed, scheduling) -> None:
        for offset in range(3):
            seed.block(TODAY + timedelta(days=offset))
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(mid, ["amazon.com", "amazon.de"], TODAY)

        assert errors == []
        assert result.assigned == ()
        assert [f.market for f in result.failed] == ["amazon.com", "amazon.de"]
        assert seed.all() == []


# --- Blocking ---


class TestBlockDate:
    def test_block_empty_date(self, seed, scheduling) -> None:
        result, errors = scheduling.block_date(JAN_10, "Holiday")

        assert errors == []
        assert result.blocked_date.date == JAN_10
        assert result.blocked_date.reason == "Holiday"
        assert result.rescheduled_count == 0
        assert result.unresolved == ()

    def test_displaces_in_ascending_id_order(self, seed, scheduling) -> None:
        """Two publications on a blocked date move out, lowest id first."""
        p1, p2 = seed.fill(JAN_10, count=2)
        seed.fill(JAN_11, count=2)

        result, errors = scheduling.block_date(JAN_10)

        assert errors == []
        assert result.rescheduled_count == 2
        assert [(d.publication_id, d.from_date, d.to_date) for d in result.rescheduled] == [
            (p1, JAN_10, JAN_11),
            (p2, JAN_10, JAN_12),
        ]
        assert seed.get(p1).scheduled_date == JAN_11
        assert seed.get(p2).scheduled_date == JAN_12
        assert scheduled_count(seed, JAN_10) == 0
        assert scheduled_count(seed, JAN_11) == 3

    def test_displacement_skips_blocked_and_full_dates(self, seed, scheduling) -> None:
        (p1,) = seed.fill(JAN_10, count=1)
        seed.block(JAN_11)
        seed.fill(JAN_12)

        result, _ = scheduling.block_date(JAN_10)

        assert result.rescheduled[0].to_date == JAN_13
        assert seed.get(p1).scheduled_date == JAN_13

    def test_published_rows_stay(self, seed, scheduling) -> None:
        mid = seed.manuscript()
        published_id = seed.published(mid, "amazon.com", JAN_10)

        result, _ = scheduling.block_date(JAN_10)

        assert result.rescheduled_count == 0
        assert seed.get(published_id).scheduled_date == JAN_10

    def test_already_blocked(self, seed, scheduling) -> None:
        seed.block(JAN_10, "first")
        before = seed.all()

        result, errors = scheduling.block_date(JAN_10, "second")

        assert result is None
        assert [e.code for e in errors] == ["already_blocked"]
        assert seed.all() == before

    def test_past_block_moves_rows_to_today_or_later(self, seed, scheduling) -> None:
        past = TODAY - timedelta(days=2)
        (p1,) = seed.fill(past, count=1)

        result, errors = scheduling.block_date(past)

        assert errors == []
        assert result.rescheduled[0].to_date == TODAY
        assert seed.get(p1).scheduled_date == TODAY


class TestUnresolvedDisplacement:
    @pytest.fixture
    def config(self) -> SchedulingConfig:
        return SchedulingConfig(horizon_days=2)

    def test_reports_unresolved_and_keeps_block(self, seed, scheduling) -> None:
        p1, p2 = seed.fill(JAN_10, count=2)
        seed.fill(JAN_11, count=2)
        seed.fill(JAN_12, count=3)

        result, errors = scheduling.block_date(JAN_10)

        assert errors == []
        assert [d.publication_id for d in result.rescheduled] == [p1]
        assert result.unresolved == (p2,)
        assert [(w.code, w.publication_id) for w in result.warnings] == [
            ("unresolved_displacement", p2)
        ]
        assert seed.get(p2).scheduled_date == JAN_10


class TestEndOfCalendar:
    def test_schedule_on_full_last_date_fails_per_market(self, seed, scheduling) -> None:
        seed.fill(date.max)
        mid = seed.manuscript()

        result, errors = scheduling.schedule_markets(mid, ["amazon.com"], date.max)

        assert errors == []
        assert [(f.market, f.code) for f in result.failed] == [
            ("amazon.com", "no_capacity_within_horizon")
        ]
        assert scheduled_dates(seed, mid) == {}

    def test_block_last_date_leaves_rows_unresolved(self, seed, scheduling) -> None:
        (p1,) = seed.fill(date.max, count=1)

        result, errors = scheduling.block_date(date.max, "End")

        assert errors == []
        assert result.blocked_date.date == date.max
        assert result.rescheduled == ()
        assert result.unresolved == (p1,)
        assert [w.code for w in result.warnings] == ["unresolved_displacement"]
        assert seed.get(p1).scheduled_date == date.max

    def test_block_day_before_last_moves_onto_last(self, seed, scheduling) -> None:
        eve = date.max - timedelta(days=1)
        (p1,) = seed.fill(eve, count=1)

        result, errors = scheduling.block_date(eve)

        assert errors == []
        assert result.rescheduled[0].to_date == date.max
        assert seed.get(p1).scheduled_date == date.max


class TestUnblockDate:
    def test_unblock_is_not_retroactive(self, seed, scheduling) -> None:
        (p1,) = seed.fill(JAN_10, count=1)
        result, _ = scheduling.block_date(JAN_10)

        removed, errors = scheduling.unblock_date(result.blocked_date.id)

        assert errors == []
        assert removed.date == JAN_10
        assert seed.get(p1).scheduled_date == JAN_11
        assert scheduling.list_blocked_dates() == []

    def test_unblock_unknown_id(self, seed, scheduling) -> None:
        mid = seed.manuscript()
        seed.scheduled(mid, "amazon.com", JAN_10)
        before = seed.all()

        removed, errors = scheduling.unblock_date(123)

        assert removed is None
        assert [e.code for e in errors] == ["not_found"]
        assert seed.all() == before


def test_list_blocked_dates_range(seed, scheduling) -> None:
    seed.block(JAN_10)
    seed.block(date(2026, 3, 1))

    rows = scheduling.list_blocked_dates(date(2026, 1, 1), date(2026, 1, 31))

    assert [b.date for b in rows] == [JAN_10]


def test_default_clock_and_config(uow_factory) -> None:
    service = SchedulingService(uow_factory)

    assert service.config.daily_capacity == 3
    assert "amazon.com" in service.config.markets
    assert isinstance(service.clock.today(), date)
