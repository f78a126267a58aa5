"""Resource filtering module."""

from .filter_engine import Filter, should_include

__all__ = [
    "Filter",
    "should_include",
]
