"""Shared fixtures: a fake Gemini client and a fake HTTP layer for the catalogs.

Nothing here touches the network. The fake HTTP layer routes requests.get and
requests.head by URL and records every call so tests can assert which tiers ran.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient
from google.genai import errors


GOOGLE_BOOKS = "googleapis.com/books"
OL_SEARCH = "openlibrary.org/search.json"
OL_COVERS = "covers.openlibrary.org"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


def gemini_text(text):
    return SimpleNamespace(candidates=[SimpleNamespace()], text=text)


def gemini_book(title="Piranesi", author="Susanna Clarke", reason="A house of endless halls."):
    return gemini_text(json.dumps({"title": title, "author": author, "reason": reason}))


def gemini_error(code=429):
    return errors.ClientError(
        code, {"error": {"code": code, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
    )


def make_client(*outcomes):
    """A genai-like client whose generate_content returns or raises each outcome in turn."""
    client = SimpleNamespace(models=MagicMock())
    client.models.generate_content.side_effect = list(outcomes)
    return client


class FakeHttp:
    """Routes requests.get/requests.head to canned responses by URL fragment."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, fragment, response):
        self.routes[(method, fragment)] = response

    def calls_to(self, fragment):
        return [c for c in self.calls if fragment in c[1]]

    def _dispatch(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        for (route_method, fragment), response in self.routes.items():
            if route_method == method and fragment in url:
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404)

    def get(self, url, **kwargs):
        return self._dispatch("GET", url, **kwargs)

    def head(self, url, **kwargs):
        return self._dispatch("HEAD", url, **kwargs)


@pytest.fixture
def http():
    fake = FakeHttp()
    with patch("requests.get", side_effect=fake.get), patch("requests.head", side_effect=fake.head):
        yield fake


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-test-key")
    monkeypatch.setenv("GOOGLE_BOOKS_API_KEY", "books-test-key")
    monkeypatch.setenv("ARCHIVIST_MODELS", "model-a,model-b,model-c")


@pytest.fixture
def api():
    from main import app

    return TestClient(app)


@pytest.fixture
def gemini(monkeypatch):
    """Installs a fake genai client; call it with the outcomes to return."""

    def install(*outcomes):
        client = make_client(*outcomes)
        monkeypatch.setattr("routers.consult.get_client", lambda *args, **kwargs: client)
        return client

    return install
