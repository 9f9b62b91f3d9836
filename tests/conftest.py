"""
Pytest configuration and shared fixtures.

Fixtures:
---------
- cv_dir: isolated saved-CV directory (config.CVS_DIR)
- client: FastAPI TestClient for the app in main.py
- provider: fake chat-completion upstream (httpx.MockTransport)
- completion: builds a chat-completion JSON body around reply text
"""

import json
import os
import tempfile

# Must be set before cvgenius.core.config is imported anywhere
os.environ["CVGENIUS_DATA_DIR"] = tempfile.mkdtemp(prefix="cvgenius-test-")
os.environ.pop("GROQ_API_KEY", None)
os.environ.pop("AI_API_BASE_URL", None)

import httpx
import pytest
from fastapi.testclient import TestClient

from cvgenius.core import config, rewrite


def _completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "llama-3.1-8b-instant",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
    }


class FakeProvider:
    """Records upstream requests and answers with a canned response."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.reply = ""
        self.body = None

    def respond(self, reply=None, status_code=200, body=None):
        self.reply = reply
        self.status_code = status_code
        self.body = body

    def handler(self, request):
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json=self.body or {"error": {"message": "upstream failure"}})
        return httpx.Response(200, json=self.body if self.body is not None else _completion(self.reply))

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def completion():
    return _completion


@pytest.fixture
def provider(monkeypatch):
    fake = FakeProvider()
    monkeypatch.setattr(rewrite, "UPSTREAM_TRANSPORT", httpx.MockTransport(fake.handler))
    monkeypatch.setattr(config, "GROQ_API_KEY", "test-key")
    return fake


@pytest.fixture
def cv_dir(tmp_path, monkeypatch):
    path = tmp_path / "cvs"
    path.mkdir()
    monkeypatch.setattr(config, "CVS_DIR", path)
    return path


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as c:
        yield c
