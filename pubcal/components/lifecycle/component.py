"""
Lifecycle component - publication status transitions.

Invariants:
- published_date is set once, on the day of publication
- scheduled_date set iff scheduled or published; kdp_url only when published
- only scheduled publications can be rescheduled or published
"""

from __future__ import annotations

from pubcal.components.scheduling import (
    ClockPort,
    RulesPort,
    UnitOfWorkFactory,
    create_scheduling_service,
)

from ._impl import LifecycleService
from .models import (
    CreatePendingInput,
    DeletePublicationInput,
    DeletePublicationOutput,
    GetPublicationInput,
    ListPublicationsInput,
    MarkPublishedInput,
    PublicationListOutput,
    PublicationOutput,
    ReschedulePublicationInput,
)


def create_lifecycle_service(
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> LifecycleService:
    """Create lifecycle service from ports."""
    return LifecycleService(create_scheduling_service(uow_factory, clock, rules))


# --- Component Entry Points ---


def run_reschedule(
    inp: ReschedulePublicationInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationOutput:
    """
    Move a scheduled publication to a new date.

    Args:
        inp: Input containing publication_id and new_date.
        uow_factory: Unit of work factory.
        clock: Optional clock for "today".
        rules: Optional rules port for configuration.

    Returns:
        PublicationOutput with updated publication or errors.
    """
    service = create_lifecycle_service(uow_factory, clock, rules)

    publication, errors = service.reschedule(inp.publication_id, inp.new_date)

    return PublicationOutput(
        publication=publication,
        errors=errors,
        success=len(errors) == 0,
    )


def run_mark_published(
    inp: MarkPublishedInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationOutput:
    """Mark a scheduled publication as published."""
    service = create_lifecycle_service(uow_factory, clock, rules)

    publication, errors = service.mark_published(inp.publication_id, inp.kdp_url)

    return PublicationOutput(
        publication=publication,
        errors=errors,
        success=len(errors) == 0,
    )


def run_delete(
    inp: DeletePublicationInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> DeletePublicationOutput:
    """Delete a publication."""
    service = create_lifecycle_service(uow_factory, clock, rules)

    deleted, errors = service.delete(inp.publication_id)

    return DeletePublicationOutput(
        deleted=deleted,
        errors=errors,
        success=deleted,
    )


def run_create_pending(
    inp: CreatePendingInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationOutput:
    """Materialize a pending publication row."""
    service = create_lifecycle_service(uow_factory, clock, rules)

    publication, errors = service.create_pending(inp.manuscript_id, inp.market, inp.notes)

    return PublicationOutput(
        publication=publication,
        errors=errors,
        success=len(errors) == 0,
    )


def run_get(
    inp: GetPublicationInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationOutput:
    service = create_lifecycle_service(uow_factory, clock, rules)

    publication, errors = service.get(inp.publication_id)

    return PublicationOutput(
        publication=publication,
        errors=errors,
        success=len(errors) == 0,
    )


def run_list(
    inp: ListPublicationsInput,
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationListOutput:
    service = create_lifecycle_service(uow_factory, clock, rules)

    if inp.manuscript_id is None:
        rows = service.list_all()
    else:
        rows = service.list_for_manuscript(inp.manuscript_id)

    return PublicationListOutput(publications=rows, total=len(rows))


def run(
    inp: (
        ReschedulePublicationInput
        | MarkPublishedInput
        | DeletePublicationInput
        | CreatePendingInput
        | GetPublicationInput
        | ListPublicationsInput
    ),
    *,
    uow_factory: UnitOfWorkFactory,
    clock: ClockPort | None = None,
    rules: RulesPort | None = None,
) -> PublicationOutput | DeletePublicationOutput | PublicationListOutput:
    """
    Main entry point for the lifecycle component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ReschedulePublicationInput):
        return run_reschedule(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, MarkPublishedInput):
        return run_mark_published(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, DeletePublicationInput):
        return run_delete(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, CreatePendingInput):
        return run_create_pending(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, GetPublicationInput):
        return run_get(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    elif isinstance(inp, ListPublicationsInput):
        return run_list(inp, uow_factory=uow_factory, clock=clock, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
