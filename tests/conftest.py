import json
import sys
from pathlib import Path

import pytest
import requests
from dotenv import load_dotenv
from requests.structures import CaseInsensitiveDict

# Load local .env so integration tests can pick up tokens/URLs without exporting.
load_dotenv()

# Ensure local src/ is on sys.path so tests use the working tree, not installed package.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeResponse:
    def __init__(self, status_code=200, body=None, headers=None, text=None):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Stands in for requests.Session and records every outbound call."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(
            body={}, headers={"Content-Type": "application/json"}
        )
        self.error = error
        self.calls = []

    def _record(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._record("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._record("POST", url, **kwargs)

    @property
    def call_count(self):
        return len(self.calls)

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def json_response():
    def _make(status_code=200, body=None, headers=None):
        merged = {"Content-Type": "application/json; charset=utf-8", **(headers or {})}
        return FakeResponse(status_code=status_code, body=body, headers=merged)

    return _make
