"""
conftest.py

Shared pytest fixtures for the API wrapper tests: a recording fake
transport that replays scripted httpx responses, and a fake sleep that
records delays instead of waiting.
"""

import pytest
import httpx

from api_wrapper.data_structure.models import APIInfo, Endpoint

# Test timeout constant - can be imported in tests
TEST_TIMEOUT = 30


class RecordingTransport:
    """
    Async transport double. Returns the scripted responses in order and
    repeats the last one once the script runs out.
    """

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses) or [httpx.Response(200, json={})]
        self.calls = []

    async def __call__(self, url, options):
        self.calls.append((url, options))
        idx = min(len(self.calls) - 1, len(self.responses) - 1)
        return self.responses[idx]


class FakeSleep:
    """Records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def make_transport():
    """Factory fixture: make_transport(resp1, resp2, ...) -> RecordingTransport."""
    return RecordingTransport


@pytest.fixture
def pages_info():
    """A small API with one GET and one POST endpoint plus defaults."""
    return APIInfo(
        api_base_url="https://api.example.com/",
        headers={"Authorization": "Bearer token"},
        endpoints=[
            Endpoint(name="getPage", path="pages/:pageId", method="GET"),
            Endpoint(name="createPage", path="spaces/:spaceId/pages", method="POST"),
        ],
        default_params={
            "createPage": {
                "params": {"spaceId": "main"},
                "body": {"title": "Untitled", "meta": {"draft": True}},
            },
        },
    )
