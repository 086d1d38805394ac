"""
Slots component - next available publication date.
"""

from .component import SlotFinder

__all__ = [
    "SlotFinder",
]
