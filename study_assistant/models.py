"""Pydantic models shared across application layers."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ProcessRequest(BaseModel):
    """Body posted to the remote text-processing endpoint."""

    text: str = Field(description="User supplied text, sent as typed.")


class ProcessResult(BaseModel):
    """Success body returned by the remote endpoint."""

    result: str


class ProcessFailure(BaseModel):
    """Failure body returned by the remote endpoint.

    ``error`` is whatever the service put there; any truthy value is shown.
    """

    error: Any = None


class _State(BaseModel):
    model_config = ConfigDict(frozen=True)


class IdleState(_State):
    """Nothing submitted yet, or cleared."""

    kind: Literal["idle"] = "idle"


class LoadingState(_State):
    """A request is in flight."""

    kind: Literal["loading"] = "loading"


class ResultState(_State):
    """The last submission succeeded."""

    kind: Literal["result"] = "result"
    text: str = Field(min_length=1)


class ErrorState(_State):
    """The last submission failed validation or failed remotely."""

    kind: Literal["error"] = "error"
    message: str = Field(min_length=1)


WorkflowState = Annotated[
    Union[IdleState, LoadingState, ResultState, ErrorState],
    Field(discriminator="kind"),
]


class WorkflowSnapshot(BaseModel):
    """Immutable view of a workflow at one moment."""

    model_config = ConfigDict(frozen=True)

    input_text: str = ""
    state: WorkflowState = Field(default_factory=IdleState)

    @property
    def is_loading(self) -> bool:
        """True while a request is in flight."""
        return isinstance(self.state, LoadingState)

    @property
    def output_text(self) -> str:
        """Text of the last successful response, or an empty string."""
        return self.state.text if isinstance(self.state, ResultState) else ""

    @property
    def error_message(self) -> str:
        """Message of the last failure, or an empty string."""
        return self.state.message if isinstance(self.state, ErrorState) else ""

    @property
    def can_submit(self) -> bool:
        """Whether the submit trigger is enabled."""
        return not self.is_loading and bool(self.input_text.strip())

    @property
    def can_clear(self) -> bool:
        """Whether the clear trigger is enabled."""
        return not self.is_loading


class InputAction(BaseModel):
    """Browser frame carrying the current contents of the text box."""

    action: Literal["input"]
    text: str


class SubmitAction(BaseModel):
    """Browser frame asking for the current input to be processed."""

    action: Literal["submit"]


class ClearAction(BaseModel):
    """Browser frame asking for input and outcome to be reset."""

    action: Literal["clear"]


ClientAction = Annotated[
    Union[InputAction, SubmitAction, ClearAction],
    Field(discriminator="action"),
]

client_action_adapter = TypeAdapter(ClientAction)


class WorkflowFrame(BaseModel):
    """State frame pushed to WebSocket clients after every transition."""

    type: Literal["state"] = "state"
    input_text: str
    state: WorkflowState
    is_loading: bool
    can_submit: bool
    can_clear: bool
    output_html: str
    cleared: bool | None = Field(
        default=None,
        description="Set only on the frame answering a clear action: whether it was applied.",
    )


class ErrorResponse(BaseModel):
    """Error frame returned to WebSocket clients."""

    error: str
    detail: str | None = None
