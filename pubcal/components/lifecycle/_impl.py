"""
LifecycleService - publication status state machine.

States:
- pending: no row (or a materialized row without dates)
- scheduled: scheduled_date set, counts against capacity
- published: terminal; published_date set once, never changed

Transitions:
- scheduled -> scheduled (reschedule, date checks delegated to the engine)
- scheduled -> published (mark published)
- scheduled|published|pending -> deleted (frees any slot held)
"""

from __future__ import annotations

import logging
from datetime import date

from pubcal.components.scheduling import SchedulingService
from pubcal.core.entities import Publication, PublicationStatus, utc_now
from pubcal.core.errors import SchedulingError
from pubcal.core.ports.db import UnitOfWorkPort

logger = logging.getLogger(__name__)


def _not_found(publication_id: int) -> SchedulingError:
    return SchedulingError(
        code="not_found",
        message=f"Publication {publication_id} not found",
        publication_id=publication_id,
    )


class LifecycleService:
    """Publication lifecycle manager on top of the scheduling engine."""

    def __init__(self, scheduling: SchedulingService) -> None:
        self.scheduling = scheduling

    # --- Queries ---

    def get(self, publication_id: int) -> tuple[Publication | None, list[SchedulingError]]:
        def work(uow: UnitOfWorkPort) -> tuple[Publication | None, list[SchedulingError]]:
            publication = uow.publications.get_by_id(publication_id)
            if publication is None:
                return None, [_not_found(publication_id)]
            return publication, []

        return self.scheduling.transaction(work, operation="get_publication")

    def list_for_manuscript(self, manuscript_id: int) -> list[Publication]:
        def work(uow: UnitOfWorkPort) -> tuple[list[Publication], list[SchedulingError]]:
            return uow.publications.list_for_manuscript(manuscript_id), []

        rows, _ = self.scheduling.transaction(work, operation="list_for_manuscript")
        return rows

    def list_all(self) -> list[Publication]:
        def work(uow: UnitOfWorkPort) -> tuple[list[Publication], list[SchedulingError]]:
            return uow.publications.list_all(), []

        rows, _ = self.scheduling.transaction(work, operation="list_publications")
        return rows

    def status_for(self, manuscript_id: int, market: str) -> PublicationStatus:
        """Derived status of a manuscript x market pair; `pending` when no row exists."""

        def work(uow: UnitOfWorkPort) -> tuple[PublicationStatus, list[SchedulingError]]:
            publication = uow.publications.get_for_market(manuscript_id, market)
            return (publication.status if publication else "pending"), []

        status, _ = self.scheduling.transaction(work, operation="status_for")
        return status

    # --- Commands ---

    def create_pending(
        self,
        manuscript_id: int,
        market: str,
        notes: str | None = None,
    ) -> tuple[Publication | None, list[SchedulingError]]:
        """
        Materialize a pending row without dates.

        Returns:
            Tuple of (publication, errors).
        """
        if not self.scheduling.is_known_market(market):
            return None, [
                SchedulingError(
                    code="invalid_market",
                    message=f"Unknown market: {market}",
                    market=market,
                )
            ]

        def work(uow: UnitOfWorkPort) -> tuple[Publication | None, list[SchedulingError]]:
            if uow.manuscripts.get_by_id(manuscript_id) is None:
                return None, [
                    SchedulingError(
                        code="not_found",
                        message=f"Manuscript {manuscript_id} not found",
                    )
                ]

            existing = uow.publications.get_for_market(manuscript_id, market)
            if existing is not None:
                return None, [
                    SchedulingError(
                        code="invalid_transition",
                        message=(
                            f"Manuscript {manuscript_id} already has a {existing.status} "
                            f"publication on {market}"
                        ),
                        publication_id=existing.id,
                        market=market,
                    )
                ]

            saved = uow.publications.add(
                Publication(
                    manuscript_id=manuscript_id,
                    market=market,
                    status="pending",
                    notes=notes.strip() if notes else None,
                )
            )
            logger.info("Created pending publication %s (%s)", saved.id, market)
            return saved, []

        return self.scheduling.transaction(work, operation="create_pending")

    def reschedule(
        self,
        publication_id: int,
        new_date: date,
    ) -> tuple[Publication | None, list[SchedulingError]]:
        """
        Move a scheduled publication to a user-chosen date.

        Checks, in order: not_found, invalid_transition, past_date,
        same-date no-op, date_unavailable.
        """
        today = self.scheduling.clock.today()

        def work(uow: UnitOfWorkPort) -> tuple[Publication | None, list[SchedulingError]]:
            publication = uow.publications.get_by_id(publication_id)
            if publication is None:
                return None, [_not_found(publication_id)]

            if publication.status != "scheduled":
                return None, [
                    SchedulingError(
                        code="invalid_transition",
                        message=(
                            f"Publication {publication_id} is {publication.status}; "
                            "only scheduled publications can be rescheduled"
                        ),
                        publication_id=publication_id,
                    )
                ]

            moved, errors = self.scheduling.move_publication(uow, publication, new_date, today)
            if errors:
                return None, errors
            return moved, []

        return self.scheduling.transaction(work, operation="reschedule")

    def mark_published(
        self,
        publication_id: int,
        kdp_url: str | None = None,
    ) -> tuple[Publication | None, list[SchedulingError]]:
        """
        Mark a scheduled publication as published today.

        The scheduled date is kept; the publication stops counting
        against capacity.
        """
        today = self.scheduling.clock.today()

        def work(uow: UnitOfWorkPort) -> tuple[Publication | None, list[SchedulingError]]:
            publication = uow.publications.get_by_id(publication_id)
            # Unknown ids are not_found; rowless pairs go through mark_published_for_market
            if publication is None:
                return None, [_not_found(publication_id)]
            return self._publish(uow, publication, kdp_url, today)

        return self.scheduling.transaction(work, operation="mark_published")

    def mark_published_for_market(
        self,
        manuscript_id: int,
        market: str,
        kdp_url: str | None = None,
    ) -> tuple[Publication | None, list[SchedulingError]]:
        """
        Mark the publication of a (manuscript, market) pair as published.

        A pair without a row is pending, so publishing it is an
        invalid_transition like any other non-scheduled row.
        """
        if not self.scheduling.is_known_market(market):
            return None, [
                SchedulingError(
                    code="invalid_market", message=f"Unknown market: {market}", market=market
                )
            ]
        today = self.scheduling.clock.today()

        def work(uow: UnitOfWorkPort) -> tuple[Publication | None, list[SchedulingError]]:
            if uow.manuscripts.get_by_id(manuscript_id) is None:
                return None, [
                    SchedulingError(
                        code="not_found",
                        message=f"Manuscript {manuscript_id} not found",
                        market=market,
                    )
                ]

            publication = uow.publications.get_for_market(manuscript_id, market)
            if publication is None:
                return None, [
                    SchedulingError(
                        code="invalid_transition",
                        message=(
                            f"Manuscript {manuscript_id} is pending on {market}; "
                            "only scheduled publications can be marked published"
                        ),
                        market=market,
                    )
                ]
            return self._publish(uow, publication, kdp_url, today)

        return self.scheduling.transaction(work, operation="mark_published")

    def _publish(
        self,
        uow: UnitOfWorkPort,
        publication: Publication,
        kdp_url: str | None,
        today: date,
    ) -> tuple[Publication | None, list[SchedulingError]]:
        if publication.status != "scheduled":
            return None, [
                SchedulingError(
                    code="invalid_transition",
                    message=(
                        f"Publication {publication.id} is {publication.status}; "
                        "only scheduled publications can be marked published"
                    ),
                    publication_id=publication.id,
                    market=publication.market,
                )
            ]

        publication.status = "published"
        publication.published_date = today
        publication.kdp_url = kdp_url.strip() if kdp_url and kdp_url.strip() else None
        publication.updated_at = utc_now()
        uow.publications.update(publication)
        logger.info("Publication %d marked published on %s", publication.id, today)
        return publication, []

    def delete(self, publication_id: int) -> tuple[bool, list[SchedulingError]]:
        """Delete a publication regardless of status, freeing its slot."""

        def work(uow: UnitOfWorkPort) -> tuple[bool, list[SchedulingError]]:
            publication = uow.publications.get_by_id(publication_id)
            if publication is None:
                return False, [_not_found(publication_id)]

            uow.publications.delete(publication_id)
            logger.info(
                "Deleted %s publication %d (%s)",
                publication.status,
                publication_id,
                publication.market,
            )
            return True, []

        return self.scheduling.transaction(work, operation="delete_publication")
