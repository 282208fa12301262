"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, Response

from study_assistant import __version__
from study_assistant.config import Settings, get_settings
from study_assistant.logging import configure_logging
from study_assistant.models import WorkflowSnapshot
from study_assistant.views import page_response
from study_assistant.websocket_handlers import websocket_endpoint


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create application resources during startup and clean up on shutdown."""

    async with httpx.AsyncClient() as client:
        app.state.http_client = client
        yield
        del app.state.http_client


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="AI Study Assistant",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> Response:
        return page_response(request, WorkflowSnapshot())

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_settings)) -> dict[str, str]:
        return {"version": __version__, "environment": settings.environment}

    app.add_api_websocket_route("/ws", websocket_endpoint)

    return app


app = create_app()
