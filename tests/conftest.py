"""Pytest configuration and shared test doubles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from docutasks.core.config import settings


@dataclass
class FakeCompletion:
    """Inference double: records each call and replays a canned reply.

    Set ``error`` to make the call raise instead.
    """

    reply: str = '[{"task": "user registration", "description": "Sign up."}]'
    error: Exception | None = None
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    def __call__(self, system_prompt: str, user_prompt: str, model_id: str) -> str:
        self.calls.append((system_prompt, user_prompt, model_id))
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class FakeExtractor:
    text: str = "Users can sign up and post comments."
    error: Exception | None = None
    calls: list[tuple[bytes, str]] = field(default_factory=list)

    def __call__(self, data: bytes, mime_type: str) -> str:
        self.calls.append((data, mime_type))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch):
    """Give every test the default provider settings regardless of the environment."""
    defaults: dict[str, Any] = {
        "LLM_PROVIDER": "openai",
        "OPENAI_API_KEY": "",
        "OPENAI_BASE_URL": "https://api.openai.com/v1",
        "OLLAMA_HOST": "http://ollama:11434",
        "AI_MODEL": "gpt-4",
    }
    for name, value in defaults.items():
        monkeypatch.setattr(settings, name, value)
