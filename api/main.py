"""
api/main.py — FastAPI entry point.

Lifespan:
  - Opens one httpx.AsyncClient shared by every source/map fetch and report
  - Builds the stateless StackParser once
  - Closes the client on shutdown
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adapters.stack_parser.grammar_parser import GrammarStackParser
from api.routers import frames
from api.schemas import HealthResponse
from config import Settings
from errors import ParseError, ReportError

logger = logging.getLogger("sourcetrace.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    app.state.http_client = httpx.AsyncClient(
        timeout=settings.fetch_timeout_ms / 1000.0,
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
    )
    app.state.stack_parser = GrammarStackParser()

    logger.info("SourceTrace API ready (offline=%s).", settings.offline)
    yield

    logger.info("Shutting down, closing HTTP client.")
    await app.state.http_client.aclose()


def create_app() -> FastAPI:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(frames.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version, offline=settings.offline)

    # Error handlers
    @app.exception_handler(ParseError)
    async def parse_error_handler(request: Request, exc: ParseError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ReportError)
    async def report_error_handler(request: Request, exc: ReportError):
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "status": exc.status, "body": exc.body},
        )

    return app


app = create_app()
