# pubcal - Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from pubcal.core.ports.db import (
    BlockedDateRepoPort,
    ManuscriptRepoPort,
    PublicationRepoPort,
    TransactionConflictError,
    UnitOfWorkFactory,
    UnitOfWorkPort,
)
from pubcal.core.ports.time import ClockPort

__all__ = [
    "BlockedDateRepoPort",
    "ClockPort",
    "ManuscriptRepoPort",
    "PublicationRepoPort",
    "TransactionConflictError",
    "UnitOfWorkFactory",
    "UnitOfWorkPort",
]
