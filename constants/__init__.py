"""
Constants package for the Marketing Intelligence API.
"""

from .audiences import (
    Audience,
    AUDIENCE_CONTEXT,
    DEFAULT_AUDIENCE,
    KNOWN_AUDIENCES,
    audience_context,
    normalize_audience,
)

__all__ = [
    "Audience",
    "AUDIENCE_CONTEXT",
    "DEFAULT_AUDIENCE",
    "KNOWN_AUDIENCES",
    "audience_context",
    "normalize_audience",
]
