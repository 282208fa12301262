"""Dependency providers for the FastAPI application."""

from functools import partial
from typing import Callable

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from study_assistant.config import Settings, get_settings
from study_assistant.services.processing_service import ProcessingService
from study_assistant.workflow import Listener, SubmissionWorkflow


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


async def get_processing_service(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ProcessingService:
    """Dependency provider for ProcessingService."""

    return ProcessingService(client=client, settings=settings)


WorkflowFactory = Callable[[Listener], SubmissionWorkflow]


async def get_workflow_factory(
    processor: ProcessingService = Depends(get_processing_service),
) -> WorkflowFactory:
    """Build workflows bound to the processing service; one per WebSocket session."""

    return partial(SubmissionWorkflow, processor)
