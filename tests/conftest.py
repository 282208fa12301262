"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PROCESS_API_URL", "http://processor.test/process")

from study_assistant.config import Settings  # noqa: E402
from study_assistant.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the environment the settings are read from during tests."""

    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("PROCESS_API_URL", "http://processor.test/process")


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app():
    return create_app()
