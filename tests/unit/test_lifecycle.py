"""
Tests for the publication lifecycle manager.
"""

from __future__ import annotations

from datetime import date, timedelta

TODAY = date(2026, 1, 5)
JAN_10 = date(2026, 1, 10)
JAN_15 = date(2026, 1, 15)


class TestReschedule:
    def test_move_to_free_date(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_15)

        publication, errors = lifecycle.reschedule(pid, JAN_10)

        assert errors == []
        assert publication.scheduled_date == JAN_10
        assert publication.status == "scheduled"
        assert seed.get(pid).scheduled_date == JAN_10

    def test_past_date_rejected(self, seed, lifecycle) -> None:
        """Rescheduling to yesterday fails and leaves the row untouched."""
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_15)
        before = seed.get(pid)

        publication, errors = lifecycle.reschedule(pid, TODAY - timedelta(days=1))

        assert publication is None
        assert [e.code for e in errors] == ["past_date"]
        assert errors[0].publication_id == pid
        assert seed.get(pid) == before

    def test_today_is_allowed(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_15)

        publication, errors = lifecycle.reschedule(pid, TODAY)

        assert errors == []
        assert publication.scheduled_date == TODAY

    def test_blocked_date_unavailable(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_15)
        seed.block(JAN_10)

        publication, errors = lifecycle.reschedule(pid, JAN_10)

        assert publication is None
        assert [e.code for e in errors] == ["date_unavailable"]
        assert seed.get(pid).scheduled_date == JAN_15

    def test_full_date_unavailable(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_15)
        seed.fill(JAN_10)

        publication, errors = lifecycle.reschedule(pid, JAN_10)

        assert publication is None
        assert [e.code for e in errors] == ["date_unavailable"]

    def test_same_date_is_noop_even_when_full(self, seed, lifecycle) -> None:
        """Own row is excluded from the count; same date changes nothing."""
        ids = seed.fill(JAN_10)
        before = seed.get(ids[0])

        publication, errors = lifecycle.reschedule(ids[0], JAN_10)

        assert errors == []
        assert publication.scheduled_date == JAN_10
        assert seed.get(ids[0]) == before

    def test_not_found(self, lifecycle) -> None:
        publication, errors = lifecycle.reschedule(999, JAN_10)

        assert publication is None
        assert [e.code for e in errors] == ["not_found"]

    def test_published_cannot_be_rescheduled(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.published(mid, "amazon.com", JAN_10)

        publication, errors = lifecycle.reschedule(pid, JAN_15)

        assert publication is None
        assert [e.code for e in errors] == ["invalid_transition"]

    def test_not_found_checked_before_past_date(self, lifecycle) -> None:
        _, errors = lifecycle.reschedule(999, TODAY - timedelta(days=1))

        assert [e.code for e in errors] == ["not_found"]


class TestMarkPublished:
    def test_publish_scheduled(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_10)

        publication, errors = lifecycle.mark_published(pid, " https://kdp.example/b1 ")

        assert errors == []
        assert publication.status == "published"
        assert publication.published_date == TODAY
        assert publication.scheduled_date == JAN_10
        assert publication.kdp_url == "https://kdp.example/b1"

    def test_publish_without_url(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_10)

        publication, _ = lifecycle.mark_published(pid)

        assert publication.kdp_url is None

    def test_published_frees_capacity(self, seed, lifecycle, scheduling) -> None:
        ids = seed.fill(JAN_10)
        lifecycle.mark_published(ids[0])
        mid = seed.manuscript()

        result, _ = scheduling.schedule_markets(mid, ["amazon.de"], JAN_10)

        assert result.assigned[0].date == JAN_10

    def test_pending_row_is_invalid_transition(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.pending(mid, "amazon.com")

        publication, errors = lifecycle.mark_published(pid)

        assert publication is None
        assert [e.code for e in errors] == ["invalid_transition"]
        assert seed.get(pid).status == "pending"

    def test_already_published(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.published(mid, "amazon.com", JAN_10)

        _, errors = lifecycle.mark_published(pid)

        assert [e.code for e in errors] == ["invalid_transition"]

    def test_missing_row_is_not_found(self, lifecycle) -> None:
        _, errors = lifecycle.mark_published(42)

        assert [e.code for e in errors] == ["not_found"]


class TestMarkPublishedForMarket:
    def test_rowless_pair_is_invalid_transition(self, seed, lifecycle) -> None:
        mid = seed.manuscript()

        publication, errors = lifecycle.mark_published_for_market(mid, "amazon.com")

        assert publication is None
        assert [(e.code, e.market) for e in errors] == [("invalid_transition", "amazon.com")]
        assert lifecycle.status_for(mid, "amazon.com") == "pending"
        assert seed.all() == []

    def test_materialized_pending_is_invalid_transition(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.pending(mid, "amazon.de")

        _, errors = lifecycle.mark_published_for_market(mid, "amazon.de")

        assert [e.code for e in errors] == ["invalid_transition"]
        assert seed.get(pid).status == "pending"

    def test_publishes_scheduled_pair(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.fr", JAN_10)

        publication, errors = lifecycle.mark_published_for_market(
            mid, "amazon.fr", "https://kdp.example/fr"
        )

        assert errors == []
        assert publication.id == pid
        assert publication.published_date == TODAY
        assert publication.scheduled_date == JAN_10
        assert seed.get(pid).kdp_url == "https://kdp.example/fr"

    def test_unknown_manuscript(self, lifecycle) -> None:
        _, errors = lifecycle.mark_published_for_market(42, "amazon.com")

        assert [e.code for e in errors] == ["not_found"]

    def test_unknown_market(self, seed, lifecycle) -> None:
        _, errors = lifecycle.mark_published_for_market(seed.manuscript(), "amazon.xx")

        assert [e.code for e in errors] == ["invalid_market"]


class TestDelete:
    def test_delete_scheduled_frees_slot(self, seed, lifecycle, scheduling) -> None:
        ids = seed.fill(JAN_10)

        deleted, errors = lifecycle.delete(ids[1])

        assert deleted is True
        assert errors == []
        assert seed.get(ids[1]) is None
        mid = seed.manuscript()
        result, _ = scheduling.schedule_markets(mid, ["amazon.com"], JAN_10)
        assert result.assigned[0].date == JAN_10

    def test_delete_published(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.published(mid, "amazon.com", JAN_10)

        deleted, _ = lifecycle.delete(pid)

        assert deleted is True
        assert lifecycle.status_for(mid, "amazon.com") == "pending"

    def test_delete_missing(self, lifecycle) -> None:
        deleted, errors = lifecycle.delete(7)

        assert deleted is False
        assert [e.code for e in errors] == ["not_found"]


class TestCreatePending:
    def test_create(self, seed, lifecycle) -> None:
        mid = seed.manuscript()

        publication, errors = lifecycle.create_pending(mid, "amazon.it", "  proofing  ")

        assert errors == []
        assert publication.status == "pending"
        assert publication.scheduled_date is None
        assert publication.notes == "proofing"

    def test_unknown_market(self, seed, lifecycle) -> None:
        mid = seed.manuscript()

        _, errors = lifecycle.create_pending(mid, "amazon.jp")

        assert [e.code for e in errors] == ["invalid_market"]

    def test_unknown_manuscript(self, lifecycle) -> None:
        _, errors = lifecycle.create_pending(77, "amazon.com")

        assert [e.code for e in errors] == ["not_found"]

    def test_existing_pair(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_10)

        publication, errors = lifecycle.create_pending(mid, "amazon.com")

        assert publication is None
        assert [(e.code, e.publication_id) for e in errors] == [("invalid_transition", pid)]


class TestQueries:
    def test_status_for(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        seed.scheduled(mid, "amazon.com", JAN_10)
        seed.published(mid, "amazon.de", JAN_10)

        assert lifecycle.status_for(mid, "amazon.com") == "scheduled"
        assert lifecycle.status_for(mid, "amazon.de") == "published"
        assert lifecycle.status_for(mid, "amazon.fr") == "pending"

    def test_get(self, seed, lifecycle) -> None:
        mid = seed.manuscript()
        pid = seed.scheduled(mid, "amazon.com", JAN_10)

        publication, errors = lifecycle.get(pid)
        missing, missing_errors = lifecycle.get(pid + 100)

        assert errors == []
        assert publication.id == pid
        assert missing is None
        assert [e.code for e in missing_errors] == ["not_found"]

    def test_lists_are_ordered_by_id(self, seed, lifecycle) -> None:
        first = seed.manuscript("First")
        second = seed.manuscript("Second")
        a = seed.scheduled(first, "amazon.com", JAN_15)
        b = seed.scheduled(second, "amazon.com", JAN_10)
        c = seed.scheduled(first, "amazon.de", JAN_10)

        assert [p.id for p in lifecycle.list_all()] == [a, b, c]
        assert [p.id for p in lifecycle.list_for_manuscript(first)] == [a, c]
