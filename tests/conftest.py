"""
Shared fixtures: a stand-in for requests.Session so the search client
never touches the network.
"""

import time

import pytest

from txtai_thinking.augment import AugmentationSession, ChatMessage
from txtai_thinking.search import SearchClient
from txtai_thinking.settings import ThinkingSettings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", bad_json=False):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self._bad_json = bad_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Records every post() and answers with a canned response or error."""

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response or FakeResponse(payload=[])
        self.error = error
        self.delay = delay
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        pass


@pytest.fixture
def make_client():
    """make_client(payload=..., status=200, error=None) -> (SearchClient, FakeSession)"""

    def _make(payload=None, status=200, reason="OK", error=None, bad_json=False, delay=0.0):
        session = FakeSession(
            response=FakeResponse(status_code=status, payload=payload, reason=reason, bad_json=bad_json),
            error=error,
            delay=delay,
        )
        return SearchClient(session=session), session

    return _make


@pytest.fixture
def enabled_settings():
    return ThinkingSettings(enabled=True, api_url="http://search.test/api/search")


@pytest.fixture
def session(enabled_settings):
    return AugmentationSession(session_id="test", settings=enabled_settings)


@pytest.fixture
def chat():
    return [
        ChatMessage(role="system", content="sys msg", is_system=True),
        ChatMessage(role="user", content="hi"),
        ChatMessage(role="assistant", content="reply"),
    ]
