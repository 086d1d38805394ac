"""
Transaction runner shared by the services.

One logical operation runs in exactly one unit of work. If the store cannot
serialize it, the whole operation is retried from scratch (fresh reads, fresh
capacity counts) up to `max_attempts` times.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from pubcal.core.errors import SchedulingError
from pubcal.core.ports.db import TransactionConflictError, UnitOfWorkFactory, UnitOfWorkPort

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_in_transaction(
    uow_factory: UnitOfWorkFactory,
    work: Callable[[UnitOfWorkPort], tuple[T, list[SchedulingError]]],
    *,
    max_attempts: int = 3,
    operation: str = "operation",
) -> tuple[T, list[SchedulingError]]:
    """
    Run `work` inside a unit of work.

    Commits when `work` reports no errors, rolls back otherwise, so a
    rejected request never leaves partial state behind.

    Raises:
        TransactionConflictError: still conflicting after `max_attempts`.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            with uow_factory() as uow:
                result, errors = work(uow)
                if errors:
                    uow.rollback()
                else:
                    uow.commit()
                return result, errors
        except TransactionConflictError:
            if attempt >= max_attempts:
                logger.error("%s: transaction conflict after %d attempts", operation, attempt)
                raise
            logger.warning(
                "%s: transaction conflict (attempt %d/%d), retrying",
                operation,
                attempt,
                max_attempts,
            )
