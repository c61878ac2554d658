"""
Utilities module for the Marketing Intelligence API.
"""
from .logger import logger, init_logging, setup_logging
from .cache import CacheEntry, TTLCache, InMemoryTTLCache

__all__ = [
    "logger",
    "init_logging",
    "setup_logging",
    "CacheEntry",
    "TTLCache",
    "InMemoryTTLCache",
]
