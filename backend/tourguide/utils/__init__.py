"""Shared utilities: bounded cache and background timer."""

from .cache import BoundedCache, CacheEntry
from .timer import SweepTimer

__all__ = ["BoundedCache", "CacheEntry", "SweepTimer"]
