"""Command-line client for manual testing of the study assistant."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time

import websockets

DEFAULT_URL = "ws://127.0.0.1:8000/ws"


async def run_client(url: str, text: str, timeout: float) -> int:
    """Submit ``text`` over the WebSocket workflow and print the outcome."""

    logger = logging.getLogger("study_client")
    start = time.perf_counter()

    async with websockets.connect(url, ping_interval=None) as websocket:
        await websocket.send(json.dumps({"action": "input", "text": text}))
        await websocket.send(json.dumps({"action": "submit"}))
        logger.info("Submitted text payload (%d chars)", len(text))

        while True:
            frame = json.loads(await asyncio.wait_for(websocket.recv(), timeout=timeout))
            if frame.get("type") != "state":
                logger.error("Received error frame: %s", frame)
                return 1

            state = frame["state"]
            if state["kind"] == "result":
                elapsed = time.perf_counter() - start
                logger.info("Received result in %.2fs", elapsed)
                print(state["text"])
                return 0
            if state["kind"] == "error":
                logger.error("Submission failed: %s", state["message"])
                return 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the AI study assistant.")
    parser.add_argument("--url", default=DEFAULT_URL, help="WebSocket URL (default: %(default)s)")
    parser.add_argument("--text", required=True, help="Notes to summarise.")
    parser.add_argument(
        "--timeout", type=float, default=120.0, help="Seconds to wait for each frame."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        raise SystemExit(asyncio.run(run_client(args.url, args.text, args.timeout)))
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        pass


if __name__ == "__main__":  # pragma: no cover
    main()
