"""Pytest configuration and fixtures for CalmCompanion tests."""

import json

import pytest
import requests

from calmcompanion.core.ai_interface import CompletionResult
from calmcompanion.core.chat_manager import ChatManager
from calmcompanion.core.errors import TransportError
from calmcompanion.utils.file_manager import LocalStore


class ScriptedClient:
    """Stands in for CompletionClient and records every call."""

    def __init__(self, reply="Thanks for sharing.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, history, system_prompt, settings):
        self.calls.append({
            "history": list(history),
            "system_prompt": system_prompt,
            "settings": settings,
        })
        if self.error is not None:
            return CompletionResult(mode=settings.mode_label, error=self.error)
        return CompletionResult(mode=settings.mode_label, content=self.reply)


@pytest.fixture
def store(tmp_path):
    """A LocalStore rooted in a throwaway directory."""
    return LocalStore(root_dir=tmp_path / "data", namespace="test_ns")


@pytest.fixture
def client():
    return ScriptedClient()


@pytest.fixture
def failing_client():
    return ScriptedClient(error=TransportError("Proxy error 503 upstream down", status=503))


@pytest.fixture
def manager(store, client):
    return ChatManager(store=store, client=client)


def make_response(status=200, payload=None, text=None):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    if text is None:
        text = json.dumps(payload if payload is not None else {})
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response
