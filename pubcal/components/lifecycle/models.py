"""
Lifecycle component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from pubcal.core.entities import Publication
from pubcal.core.errors import SchedulingError

# --- Input Models ---


@dataclass(frozen=True)
class ReschedulePublicationInput:
    """Input for moving a scheduled publication to another date."""

    publication_id: int
    new_date: date


@dataclass(frozen=True)
class MarkPublishedInput:
    """Input for marking a publication as published."""

    publication_id: int
    kdp_url: str | None = None


@dataclass(frozen=True)
class DeletePublicationInput:
    """Input for deleting a publication."""

    publication_id: int


@dataclass(frozen=True)
class CreatePendingInput:
    """Input for materializing a pending publication row."""

    manuscript_id: int
    market: str
    notes: str | None = None


@dataclass(frozen=True)
class GetPublicationInput:
    """Input for getting a publication."""

    publication_id: int


@dataclass(frozen=True)
class ListPublicationsInput:
    """Input for listing publications, optionally for one manuscript."""

    manuscript_id: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class PublicationOutput:
    """Output for single publication operations."""

    publication: Publication | None
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeletePublicationOutput:
    """Output for delete operation."""

    deleted: bool
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class PublicationListOutput:
    """Output for list operation."""

    publications: list[Publication]
    total: int
