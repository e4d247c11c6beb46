#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for MathSnap.

Endpoints:
    POST /api/render - Render text with embedded LaTeX to HTML with formula images
    GET /api/health - Liveness and renderer info
    GET / - Demo page and rendered images (static public directory)

Usage:
    # Start server
    uvicorn api.main:app --host 0.0.0.0 --port 3000

    # Or run directly
    python -m api.main

Configuration:
    Environment variables (see config/settings.py):
    - MATH_RENDERER: katex | mathml (default: katex)
    - RATE_LIMIT: API rate limit (default: "60/minute")
    - SANITIZE_OUTPUT: Run the allow-list sanitizer (default: true)
    - IMAGE_DIR / IMAGE_URL_PREFIX: Where formula images go and how they are linked
"""

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from pathlib import Path
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.constants import NO_CACHE_HEADERS
from config.settings import settings
from mathsnap import __version__
from mathsnap.errors import InvalidInputError, MathSnapError, RequestTooLargeError
from mathsnap.pipeline import MathHtmlPipeline, build_pipeline

from config.logging_config import get_logger
logger = get_logger(__name__)


# =============================================================================
# Pydantic Models for API
# =============================================================================

class RenderRequest(BaseModel):
    """Request model for rendering"""
    # Any on purpose: a non-string text is answered with 400, not a schema error
    text: Any = Field(default=None, description="Text containing $...$, $$...$$, \\(...\\) or \\[...\\] math")
    options: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Style options: fontFamily, fontSize, color, background, padding, scale",
    )


class RenderResponse(BaseModel):
    """Response model for rendering"""
    html: str


class HealthResponse(BaseModel):
    status: str
    renderer: str
    version: str


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="MathSnap API",
    description="Renders LaTeX fragments embedded in text into images and returns HTML",
    version=__version__,
)

# Rate limiting (configurable via RATE_LIMIT env var)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit]
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def disable_html_cache(request: Request, call_next):
    """Never cache the demo page, so an old page without options support is not served"""
    response = await call_next(request)
    if request.method == "GET" and (request.url.path == "/" or request.url.path.endswith(".html")):
        for header, value in NO_CACHE_HEADERS.items():
            response.headers[header] = value
    return response


@app.middleware("http")
async def limit_request_size(request: Request, call_next):
    """Reject render bodies above settings.max_request_bytes before they are read"""
    if request.method == "POST" and request.url.path.startswith("/api/"):
        length = request.headers.get("content-length")
        if length is not None and length.isdigit() and int(length) > settings.max_request_bytes:
            logger.warning(f"Rejected {request.url.path} body of {length} bytes")
            return JSONResponse(
                status_code=413,
                content={"error": f"Request body exceeds {settings.max_request_bytes} bytes"},
            )
    return await call_next(request)


@app.exception_handler(RequestTooLargeError)
async def too_large_handler(request: Request, exc: RequestTooLargeError):
    return JSONResponse(status_code=413, content={"error": str(exc)})


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(MathSnapError)
async def render_error_handler(request: Request, exc: MathSnapError):
    logger.error(f"Render request failed: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Render failed"})


# =============================================================================
# Dependencies
# =============================================================================

_pipeline: Optional[MathHtmlPipeline] = None


def get_pipeline() -> MathHtmlPipeline:
    """Pipeline shared by requests; every render still opens its own raster session"""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(settings)
    return _pipeline


def _pick_options(options: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not options:
        return None
    keys = ("fontFamily", "fontSize", "color", "background", "padding", "scale")
    return {key: options.get(key) for key in keys}


# =============================================================================
# Routes
# =============================================================================

@app.post("/api/render", response_model=RenderResponse)
@limiter.limit(settings.rate_limit)
async def render(
    request: Request,
    body: RenderRequest,
    pipeline: MathHtmlPipeline = Depends(get_pipeline),
):
    """
    Render text with embedded math.

    Returns:
        {"html": "..."} where every formula is an <img> pointing at a PNG
    """
    if not isinstance(body.text, str):
        raise InvalidInputError("text must be a string")
    # Chunked bodies carry no Content-Length; bound the text itself
    if len(body.text.encode("utf-8")) > settings.max_request_bytes:
        raise RequestTooLargeError(f"text exceeds {settings.max_request_bytes} bytes")

    logger.info(f"[render] options: {_pick_options(body.options)}")
    result = await pipeline.render(body.text, body.options or {})
    return RenderResponse(html=result.html)


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", renderer=settings.math_renderer, version=__version__)


# Static files last so they never shadow the API routes
app.mount("/", StaticFiles(directory=str(settings.public_dir), html=True), name="public")


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    logger.info("Starting MathSnap API Server...")
    logger.info(f"API Documentation: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")
