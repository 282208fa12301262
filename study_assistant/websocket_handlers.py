"""WebSocket handlers for the application."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Annotated

from fastapi import Depends, WebSocket, WebSocketDisconnect, status
from starlette.websockets import WebSocketState

from study_assistant.config import Settings, get_settings
from study_assistant.dependencies import WorkflowFactory, get_workflow_factory
from study_assistant.models import (
    ErrorResponse,
    InputAction,
    SubmitAction,
    WorkflowFrame,
    WorkflowSnapshot,
    client_action_adapter,
)
from study_assistant.views import render_output

logger = logging.getLogger(__name__)


async def websocket_endpoint(
    websocket: WebSocket,
    workflow_factory: Annotated[WorkflowFactory, Depends(get_workflow_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """One submission workflow per connection: actions in, state frames out."""

    await websocket.accept()
    should_close = True
    client = _client_repr(websocket)
    logger.info("WebSocket connection accepted", extra={"client": client})

    answering_clear = False

    async def push(snapshot: WorkflowSnapshot, cleared: bool | None = None) -> None:
        if websocket.application_state != WebSocketState.CONNECTED:
            return
        frame = build_frame(snapshot, cleared=True if answering_clear else cleared)
        # The client may leave while a submission is still resolving.
        with suppress(OSError, RuntimeError, WebSocketDisconnect):
            await websocket.send_text(frame.model_dump_json())

    workflow = workflow_factory(push)
    submissions: set[asyncio.Task[object]] = set()

    def submission_done(task: asyncio.Task[object]) -> None:
        submissions.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Submission crashed",
                extra={"client": client},
                exc_info=task.exception(),
            )

    await push(workflow.snapshot)

    try:
        while True:
            try:
                message = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.ws_inactivity_timeout,
                )
            except asyncio.TimeoutError:
                logger.info("WebSocket inactive; closing", extra={"client": client})
                await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
                should_close = False
                break
            except WebSocketDisconnect:
                logger.info("WebSocket client disconnected", extra={"client": client})
                should_close = False
                break

            try:
                action = client_action_adapter.validate_json(message)
            except ValueError:
                await _send_error(
                    websocket,
                    ErrorResponse(error="invalid_payload", detail="Invalid action frame."),
                )
                continue

            if isinstance(action, InputAction):
                await workflow.set_input(action.text)
            elif isinstance(action, SubmitAction):
                task = asyncio.create_task(workflow.submit())
                submissions.add(task)
                task.add_done_callback(submission_done)
            else:
                answering_clear = True
                try:
                    applied = await workflow.clear()
                finally:
                    answering_clear = False
                if not applied:
                    await push(workflow.snapshot, cleared=False)
    finally:
        if submissions:
            await asyncio.wait(set(submissions))
        if should_close and websocket.application_state == WebSocketState.CONNECTED:
            with suppress(RuntimeError, WebSocketDisconnect):
                await websocket.close()
        logger.info("WebSocket connection closed", extra={"client": client})


def build_frame(snapshot: WorkflowSnapshot, cleared: bool | None = None) -> WorkflowFrame:
    """Describe ``snapshot`` for the browser.

    ``cleared`` is set only when the frame answers a clear action, so the page
    knows whether its locally emptied text box matches the session.
    """

    return WorkflowFrame(
        input_text=snapshot.input_text,
        state=snapshot.state,
        is_loading=snapshot.is_loading,
        can_submit=snapshot.can_submit,
        can_clear=snapshot.can_clear,
        output_html=render_output(snapshot),
        cleared=cleared,
    )


async def _send_error(websocket: WebSocket, error: ErrorResponse) -> None:
    """Send a structured error frame."""

    await websocket.send_text(error.model_dump_json())


def _client_repr(websocket: WebSocket) -> str:
    """Render the remote client for logging purposes."""

    client = websocket.client
    if client is None:
        return "unknown"
    return f"{client.host}:{client.port}"
