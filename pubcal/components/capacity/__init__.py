"""
Capacity component - scheduled publications per calendar date.
"""

from .component import CapacityIndex
from .ports import ScheduledCountPort

__all__ = [
    "CapacityIndex",
    "ScheduledCountPort",
]
