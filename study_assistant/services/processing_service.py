"""Adapter for the remote text-processing endpoint."""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError as PayloadValidationError

from study_assistant.config import Settings
from study_assistant.exceptions import SERVICE_FALLBACK_MESSAGE, ServiceError, TransportError
from study_assistant.models import ProcessFailure, ProcessRequest, ProcessResult

logger = logging.getLogger(__name__)


class ProcessingService:
    """Wrapper around the summary-and-quiz endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._endpoint = settings.process_api_url

    async def process(self, text: str) -> str:
        """Send ``text`` for processing and return the generated content.

        Raises ``ServiceError`` when the endpoint answers with a non-success
        status and ``TransportError`` when no usable answer came back.
        """

        headers = {"Content-Type": "application/json"}

        try:
            response = await self._client.post(
                self._endpoint,
                headers=headers,
                json=ProcessRequest(text=text).model_dump(),
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Processing request failed",
                extra={"endpoint": self._endpoint, "error_type": type(exc).__name__},
            )
            raise TransportError() from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error(
                "Unparseable processing response",
                extra={
                    "status_code": response.status_code,
                    "response_text": response.text[:500],
                },
            )
            raise TransportError(status_code=response.status_code) from exc

        if not response.is_success:
            message = _failure_message(data)
            logger.error(
                "Processing service returned an error",
                extra={"status_code": response.status_code, "detail": message},
            )
            raise ServiceError(message, status_code=response.status_code)

        try:
            payload = ProcessResult.model_validate(data)
        except PayloadValidationError as exc:
            logger.error("Malformed processing response", extra={"raw_response": data})
            raise TransportError(status_code=response.status_code) from exc

        return payload.result


def _failure_message(data: object) -> str:
    """Pick the service-provided message out of a failure body, if any."""

    try:
        failure = ProcessFailure.model_validate(data)
    except PayloadValidationError:
        return SERVICE_FALLBACK_MESSAGE
    if not failure.error:
        return SERVICE_FALLBACK_MESSAGE
    if isinstance(failure.error, str):
        return failure.error
    return json.dumps(failure.error)
