"""
API Routes - All endpoint definitions for the Marketing Intelligence API

Endpoints organized by:
- Health Check
- Intelligence brief (/chat-intel)
- Briefings (latest, generate)
- Trending topics
- Follow-up chat (/chat-simple)
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from loguru import logger

from config import settings
from constants import normalize_audience
from llm import ConfigurationError, UpstreamError, run_with_deadline
from processor import IntelligenceService
from utils.cache import TTLCache
from .dependencies import get_briefings_cache, get_service, get_trending_cache
from .schemas import BriefingsGenerateRequest, ChatSimpleRequest, IntelRequest

router = APIRouter()


INVALID_QUERY_MESSAGE = "Invalid request. Please provide a query string in the request body."
EMPTY_QUERY_MESSAGE = (
    "Query cannot be empty. Please enter a question about marketing strategy or market intelligence."
)
CONFIGURATION_ERROR_MESSAGE = "Service configuration error. Please contact support."
INTEL_FAILURE_MESSAGE = (
    "Unable to generate intelligence brief at this time. "
    "Please try again or contact support if the issue persists."
)
BRIEFINGS_FETCH_FAILURE_MESSAGE = (
    "Unable to fetch intelligence briefings at this time. "
    "Please try again or contact support if the issue persists."
)
BRIEFINGS_GENERATE_FAILURE_MESSAGE = (
    "Unable to generate intelligence briefings at this time. "
    "Please try again or contact support if the issue persists."
)
TRENDING_FAILURE_MESSAGE = (
    "Unable to fetch trending topics at this time. "
    "Please try again or contact support if the issue persists."
)
CHAT_SIMPLE_FAILURE_MESSAGE = "Unable to process your question. Please try again."


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _error_response(error: Exception, friendly_message: str, endpoint: str) -> JSONResponse:
    """Map a service failure onto the 500 contract."""
    if isinstance(error, ConfigurationError):
        logger.error(f"{endpoint}: configuration error: {error}")
        return JSONResponse(status_code=500, content={"error": CONFIGURATION_ERROR_MESSAGE})

    if isinstance(error, UpstreamError):
        logger.error(f"{endpoint}: upstream failure: {error}")
    else:
        logger.opt(exception=error).error(f"{endpoint}: unexpected failure: {error}")

    return JSONResponse(
        status_code=500,
        content={"error": friendly_message, "details": str(error) or error.__class__.__name__},
    )


def _validated_query(query: Optional[str]) -> tuple[Optional[str], Optional[JSONResponse]]:
    if query is None:
        return None, _bad_request(INVALID_QUERY_MESSAGE)
    query = query.strip()
    if not query:
        return None, _bad_request(EMPTY_QUERY_MESSAGE)
    return query, None


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": _now_iso(),
        "configured": bool(settings.PPLX_API_KEY),
    }


# ============================================================
# Intelligence brief
# ============================================================
@router.post("/chat-intel")
async def chat_intel(
    request: IntelRequest,
    service: IntelligenceService = Depends(get_service),
):
    """
    Full intelligence brief for a query.

    Returns signals, implications, actions, citations and, when found,
    frameworks and chart data.
    """
    query, error = _validated_query(request.query)
    if error:
        return error

    try:
        response = await run_with_deadline(
            service.fetch_intel(query, request.audience),
            settings.REQUEST_DEADLINE_SECONDS,
            description="chat-intel",
        )
    except Exception as e:
        return _error_response(e, INTEL_FAILURE_MESSAGE, "/chat-intel")

    return response.to_dict()


# ============================================================
# Briefings
# ============================================================
@router.get("/briefings/latest")
async def latest_briefings(
    audience: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=20),
    service: IntelligenceService = Depends(get_service),
    cache: TTLCache = Depends(get_briefings_cache),
):
    """
    Today's briefings for an audience, served from cache when fresh.
    """
    audience = normalize_audience(audience, settings.DEFAULT_AUDIENCE)
    limit = limit or settings.BRIEFINGS_LIMIT

    entry = cache.get(audience)
    if entry is not None:
        logger.info(f"Briefings cache hit for {audience}")
        return {
            "briefings": [b.to_dict() for b in entry.value[:limit]],
            "cached": True,
            "generatedAt": entry.stored_at_iso,
        }

    logger.info(f"Briefings cache miss for {audience}, generating")
    try:
        briefings = await run_with_deadline(
            service.generate_briefings(audience, limit),
            settings.REQUEST_DEADLINE_SECONDS,
            description="briefings",
        )
    except Exception as e:
        return _error_response(e, BRIEFINGS_FETCH_FAILURE_MESSAGE, "/briefings/latest")

    stored = cache.set(audience, briefings)
    return {
        "briefings": [b.to_dict() for b in briefings[:limit]],
        "cached": False,
        "generatedAt": stored.stored_at_iso,
    }


@router.post("/briefings/generate")
async def generate_briefings(
    request: Optional[BriefingsGenerateRequest] = None,
    service: IntelligenceService = Depends(get_service),
    cache: TTLCache = Depends(get_briefings_cache),
):
    """Regenerate briefings for an audience and overwrite the cache."""
    request = request or BriefingsGenerateRequest()
    audience = normalize_audience(request.audience, settings.DEFAULT_AUDIENCE)
    limit = request.limit or settings.BRIEFINGS_LIMIT

    try:
        briefings = await run_with_deadline(
            service.generate_briefings(audience, limit),
            settings.REQUEST_DEADLINE_SECONDS,
            description="briefings",
        )
    except Exception as e:
        return _error_response(e, BRIEFINGS_GENERATE_FAILURE_MESSAGE, "/briefings/generate")

    stored = cache.set(audience, briefings)
    logger.info(f"Briefings regenerated for {audience} ({len(briefings)} items)")
    return {
        "briefings": [b.to_dict() for b in briefings],
        "cached": False,
        "generatedAt": stored.stored_at_iso,
    }


# ============================================================
# Trending topics
# ============================================================
@router.get("/trending/topics")
async def trending_topics(
    audience: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1, le=20),
    service: IntelligenceService = Depends(get_service),
    cache: TTLCache = Depends(get_trending_cache),
):
    """Trending topic suggestions, cached per audience."""
    audience = normalize_audience(audience, settings.DEFAULT_AUDIENCE)
    limit = limit or settings.BRIEFINGS_LIMIT

    entry = cache.get(audience)
    if entry is not None:
        logger.info(f"Trending cache hit for {audience}")
        return {
            "topics": [t.to_dict() for t in entry.value[:limit]],
            "cached": True,
            "generatedAt": entry.stored_at_iso,
        }

    logger.info(f"Trending cache miss for {audience}, generating")
    try:
        topics = await run_with_deadline(
            service.generate_trending(audience, limit),
            settings.REQUEST_DEADLINE_SECONDS,
            description="trending",
        )
    except Exception as e:
        return _error_response(e, TRENDING_FAILURE_MESSAGE, "/trending/topics")

    stored = cache.set(audience, topics)
    return {
        "topics": [t.to_dict() for t in topics[:limit]],
        "cached": False,
        "generatedAt": stored.stored_at_iso,
    }


# ============================================================
# Follow-up chat
# ============================================================
@router.post("/chat-simple")
async def chat_simple(
    request: ChatSimpleRequest,
    service: IntelligenceService = Depends(get_service),
):
    """Short conversational answer for follow-up questions."""
    query, error = _validated_query(request.query)
    if error:
        return error

    try:
        return await run_with_deadline(
            service.chat_simple(query),
            settings.REQUEST_DEADLINE_SECONDS,
            description="chat-simple",
        )
    except Exception as e:
        return _error_response(e, CHAT_SIMPLE_FAILURE_MESSAGE, "/chat-simple")
