"""Submission workflow: input text in, summary or error out."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol

from study_assistant.exceptions import (
    TRANSPORT_MESSAGE,
    ServiceError,
    TransportError,
    ValidationError,
)
from study_assistant.models import (
    ErrorState,
    IdleState,
    LoadingState,
    ResultState,
    WorkflowSnapshot,
    WorkflowState,
)

logger = logging.getLogger(__name__)

Listener = Callable[[WorkflowSnapshot], Awaitable[None]]


class TextProcessor(Protocol):
    async def process(self, text: str) -> str:
        """Return the generated content for ``text``."""


def validate_input(text: str) -> str:
    """Return ``text`` unchanged, or raise if it is blank once trimmed."""

    if not text.strip():
        raise ValidationError()
    return text


class SubmissionWorkflow:
    """Owns the text box contents and the outcome of the last submission.

    The outcome is a single tagged state (idle, loading, result or error), so
    a result, an error and an in-flight request can never be shown together.
    An optional async ``listener`` is awaited with a fresh snapshot after every
    change.
    """

    def __init__(self, processor: TextProcessor, listener: Listener | None = None) -> None:
        self._processor = processor
        self._listener = listener
        self._input_text = ""
        self._state: WorkflowState = IdleState()

    @property
    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(input_text=self._input_text, state=self._state)

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def input_text(self) -> str:
        return self._input_text

    @property
    def output_text(self) -> str:
        return self.snapshot.output_text

    @property
    def error_message(self) -> str:
        return self.snapshot.error_message

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, LoadingState)

    async def set_input(self, text: str) -> None:
        self._input_text = text
        await self._notify()

    async def submit(self) -> WorkflowState:
        """Validate the input, call the processor once and record the outcome.

        The raw input is sent; trimming only decides whether it is blank.
        A submit while a request is in flight is ignored.
        """

        if self.is_loading:
            logger.info("Submit ignored; a request is already in flight")
            return self._state

        try:
            text = validate_input(self._input_text)
        except ValidationError as exc:
            logger.info("Submission rejected", extra={"code": exc.code})
            await self._transition(ErrorState(message=exc.message))
            return self._state

        await self._transition(LoadingState())

        outcome: WorkflowState = ErrorState(message=TRANSPORT_MESSAGE)
        try:
            result = await self._processor.process(text)
            if result:
                outcome = ResultState(text=result)
            else:
                logger.info("Submission returned no content")
                outcome = IdleState()
        except (ServiceError, TransportError) as exc:
            logger.info(
                "Submission failed",
                extra={"code": exc.code, "status_code": exc.status_code},
            )
            outcome = ErrorState(message=exc.message)
        finally:
            await self._transition(outcome)

        return self._state

    async def clear(self) -> bool:
        """Reset input and outcome; refused while a request is in flight."""

        if self.is_loading:
            logger.info("Clear ignored; a request is in flight")
            return False

        self._input_text = ""
        await self._transition(IdleState())
        return True

    async def _transition(self, state: WorkflowState) -> None:
        logger.debug(
            "Workflow transition",
            extra={"from_state": self._state.kind, "to_state": state.kind},
        )
        self._state = state
        await self._notify()

    async def _notify(self) -> None:
        if self._listener is not None:
            await self._listener(self.snapshot)
