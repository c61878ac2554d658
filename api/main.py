"""
FastAPI Application - Marketing Intelligence API
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import settings, ensure_directories
from utils import init_logging
from .dependencies import briefings_cache, get_service
from .routes import INVALID_QUERY_MESSAGE, router

init_logging(app_name="api")

QUERY_ENDPOINTS = ("/chat-intel", "/chat-simple")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    ensure_directories()
    scheduler = None
    if settings.BRIEFINGS_REFRESH_ENABLED:
        from scheduler import BriefingsScheduler

        scheduler = BriefingsScheduler(service_factory=get_service, cache=briefings_cache)
        scheduler.start()
    logger.info(f"API started (briefings refresh {'on' if scheduler else 'off'})")
    yield
    # Shutdown
    if scheduler:
        scheduler.stop()


app = FastAPI(
    title="Marketing Intelligence API",
    description="Real-time marketing intelligence briefs for C-suite executives",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Request validation failures are 400 `{error}`, never 422."""
    if request.url.path in QUERY_ENDPOINTS:
        message = INVALID_QUERY_MESSAGE
    else:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"Invalid request: {field}: {first.get('msg', 'invalid value')}"
    logger.warning(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


# Routes keep their original paths, no prefix
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Marketing Intelligence API",
        "version": "1.0.0",
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)
