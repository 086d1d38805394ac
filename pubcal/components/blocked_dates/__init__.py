"""
Blocked dates component - dates on which nothing may be scheduled.
"""

from .component import BlockedDateRegistry
from .ports import BlockedDateRepoPort

__all__ = [
    "BlockedDateRegistry",
    "BlockedDateRepoPort",
]
