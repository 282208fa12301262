"""Error taxonomy for the submission workflow."""

from dataclasses import dataclass

VALIDATION_MESSAGE = "Please enter some text to process"
SERVICE_FALLBACK_MESSAGE = "An error occurred while processing"
TRANSPORT_MESSAGE = "Failed to connect to the server. Please try again later."


@dataclass(eq=False)
class WorkflowError(Exception):
    """Base exception for anything that ends a submission in the error state."""

    message: str
    code: str = "workflow_error"
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ValidationError(WorkflowError):
    """Raised when the input is empty or whitespace-only."""

    message: str = VALIDATION_MESSAGE
    code: str = "validation_error"


@dataclass(eq=False)
class ServiceError(WorkflowError):
    """Raised when the processing endpoint answers with a non-success status."""

    message: str = SERVICE_FALLBACK_MESSAGE
    code: str = "service_error"


@dataclass(eq=False)
class TransportError(WorkflowError):
    """Raised when the request could not complete or the reply is unreadable."""

    message: str = TRANSPORT_MESSAGE
    code: str = "transport_error"
