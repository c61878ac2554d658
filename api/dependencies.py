"""
FastAPI dependencies - service and cache providers.

Tests swap these out with `app.dependency_overrides`.
"""
from config import settings
from processor import IntelligenceService
from utils.cache import InMemoryTTLCache


briefings_cache = InMemoryTTLCache(ttl=settings.cache_ttl_seconds, name="briefings")
trending_cache = InMemoryTTLCache(ttl=settings.cache_ttl_seconds, name="trending")


def get_service() -> IntelligenceService:
    return IntelligenceService()


def get_briefings_cache() -> InMemoryTTLCache:
    return briefings_cache


def get_trending_cache() -> InMemoryTTLCache:
    return trending_cache
