import asyncio
import json
from functools import partial

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect, WebSocketState

from study_assistant.config import Settings
from study_assistant.dependencies import get_processing_service
from study_assistant.exceptions import VALIDATION_MESSAGE
from study_assistant.websocket_handlers import websocket_endpoint
from study_assistant.workflow import SubmissionWorkflow


class DummyProcessor:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def process(self, text: str) -> str:
        self.calls.append(text)
        return f"Summary of: {text}"


def get_test_client(app, processor: DummyProcessor | None = None):
    processor = processor or DummyProcessor()
    app.dependency_overrides[get_processing_service] = lambda: processor
    return TestClient(app)


def test_websocket_happy_path(app) -> None:
    processor = DummyProcessor()
    client = get_test_client(app, processor)

    with client.websocket_connect("/ws") as websocket:
        initial = websocket.receive_json()
        websocket.send_text(json.dumps({"action": "input", "text": "cell biology"}))
        echoed = websocket.receive_json()
        websocket.send_text(json.dumps({"action": "submit"}))
        loading = websocket.receive_json()
        result = websocket.receive_json()

    assert initial["state"] == {"kind": "idle"}
    assert initial["cleared"] is None
    assert initial["can_submit"] is False
    assert echoed["input_text"] == "cell biology"
    assert echoed["can_submit"] is True
    assert loading["is_loading"] is True
    assert loading["can_submit"] is False
    assert loading["can_clear"] is False
    assert result["state"] == {"kind": "result", "text": "Summary of: cell biology"}
    assert "Summary of: cell biology" in result["output_html"]
    assert processor.calls == ["cell biology"]


def test_websocket_blank_submit_reports_validation(app) -> None:
    processor = DummyProcessor()
    client = get_test_client(app, processor)

    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "input", "text": "   "}))
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "submit"}))
        frame = websocket.receive_json()

    assert frame["state"] == {"kind": "error", "message": VALIDATION_MESSAGE}
    assert processor.calls == []


def test_websocket_clear_resets_state(app) -> None:
    client = get_test_client(app)

    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "input", "text": "notes"}))
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "submit"}))
        websocket.receive_json()
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "clear"}))
        frame = websocket.receive_json()

    assert frame["input_text"] == ""
    assert frame["state"] == {"kind": "idle"}
    assert frame["cleared"] is True


@pytest.mark.parametrize("message", ["not-json", json.dumps({"action": "explode"})])
def test_websocket_invalid_frame(app, message: str) -> None:
    client = get_test_client(app)

    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.send_text(message)
        data = websocket.receive_json()

    assert data["error"] == "invalid_payload"


class _ClientAddress:
    def __init__(self, host: str = "127.0.0.1", port: int = 12345) -> None:
        self.host = host
        self.port = port


class DummyWebSocket:
    """Minimal WebSocket stub to reproduce disconnect behaviour."""

    def __init__(self, messages: list[str]) -> None:
        self._messages = messages
        self.accepted = False
        self.sent_text: list[str] = []
        self.close_called = False
        self.client = _ClientAddress()
        self.application_state = WebSocketState.CONNECTED

    async def accept(self) -> None:
        self.accepted = True

    async def receive_text(self) -> str:
        if not self._messages:
            raise WebSocketDisconnect()
        item = self._messages.pop(0)
        if item == "__disconnect__":
            raise WebSocketDisconnect()
        return item

    async def send_text(self, data: str) -> None:
        self.sent_text.append(data)

    async def close(self, code: int = 1000) -> None:
        self.close_called = True
        raise AssertionError("close should not be invoked when client already disconnected")


@pytest.mark.asyncio
async def test_websocket_finishes_submission_after_client_disconnect() -> None:
    settings = Settings()
    processor = DummyProcessor()
    websocket = DummyWebSocket(
        [
            json.dumps({"action": "input", "text": "hello"}),
            json.dumps({"action": "submit"}),
            "__disconnect__",
        ]
    )

    await websocket_endpoint(websocket, partial(SubmissionWorkflow, processor), settings)

    assert websocket.accepted
    assert processor.calls == ["hello"]
    last = json.loads(websocket.sent_text[-1])
    assert last["state"] == {"kind": "result", "text": "Summary of: hello"}
    assert websocket.close_called is False


def test_websocket_input_right_after_clear_is_kept(app) -> None:
    client = get_test_client(app)

    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "input", "text": "notes"}))
        websocket.receive_json()
        websocket.send_text(json.dumps({"action": "clear"}))
        websocket.send_text(json.dumps({"action": "input", "text": "x"}))
        cleared = websocket.receive_json()
        typed = websocket.receive_json()

    assert cleared["cleared"] is True
    assert cleared["input_text"] == ""
    assert typed["cleared"] is None
    assert typed["input_text"] == "x"
    assert typed["can_submit"] is True


class SlowProcessor:
    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def process(self, text: str) -> str:
        self.started.set()
        await self.release.wait()
        return f"Summary of: {text}"


class GatedWebSocket(DummyWebSocket):
    """Holds back the clear frame until the submission is in flight."""

    def __init__(self, messages: list[str], processor: SlowProcessor) -> None:
        super().__init__(messages)
        self._processor = processor

    async def receive_text(self) -> str:
        if self._messages and "clear" in self._messages[0]:
            await self._processor.started.wait()
        elif not self._messages:
            self._processor.release.set()
        return await super().receive_text()


@pytest.mark.asyncio
async def test_websocket_refused_clear_is_reported() -> None:
    settings = Settings()
    processor = SlowProcessor()
    websocket = GatedWebSocket(
        [
            json.dumps({"action": "input", "text": "notes"}),
            json.dumps({"action": "submit"}),
            json.dumps({"action": "clear"}),
        ],
        processor,
    )

    await websocket_endpoint(websocket, partial(SubmissionWorkflow, processor), settings)

    frames = [json.loads(text) for text in websocket.sent_text]
    refused = [frame for frame in frames if frame["cleared"] is False]
    assert len(refused) == 1
    assert refused[0]["input_text"] == "notes"
    assert refused[0]["is_loading"] is True
    assert all(frame["cleared"] is not True for frame in frames)
    assert frames[-1]["state"] == {"kind": "result", "text": "Summary of: notes"}
