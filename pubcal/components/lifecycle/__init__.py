"""
Lifecycle component - publication status state machine.
"""

from ._impl import LifecycleService
from .component import (
    create_lifecycle_service,
    run,
    run_create_pending,
    run_delete,
    run_get,
    run_list,
    run_mark_published,
    run_reschedule,
)
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

__all__ = [
    # Entry points
    "run",
    "run_create_pending",
    "run_delete",
    "run_get",
    "run_list",
    "run_mark_published",
    "run_reschedule",
    "create_lifecycle_service",
    # Input models
    "CreatePendingInput",
    "DeletePublicationInput",
    "GetPublicationInput",
    "ListPublicationsInput",
    "MarkPublishedInput",
    "ReschedulePublicationInput",
    # Output models
    "DeletePublicationOutput",
    "PublicationListOutput",
    "PublicationOutput",
    # Service
    "LifecycleService",
]
