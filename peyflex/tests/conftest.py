"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest


class RecordingHandler:
    """MockTransport handler that replays queued responses and records requests."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(200, json={"status": "success"})
        # Last response repeats once the queue is drained
        outcome = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(outcome, Exception):
            raise outcome
        # Fresh copy so a repeated response is never handed out already closed
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep retry backoff out of test wall time."""
    monkeypatch.setattr("time.sleep", lambda _: None)
