"""Shared fixtures: a scripted stand-in for urllib.request.urlopen."""

import io
import json
import urllib.error

import pytest


class FakeResponse:
    """Successful response object as returned by urlopen."""

    def __init__(self, status: int, body: str, fail_read: bool = False):
        self.status = status
        self._body = body.encode('utf-8')
        self._fail_read = fail_read
        self.closed = False

    def read(self):
        if self._fail_read:
            raise OSError("connection reset by peer")
        return self._body

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class BrokenBody(io.BytesIO):
    """Error body whose read fails mid-stream."""

    def read(self, *args):
        raise OSError("connection reset by peer")


class FakeTransport:
    """Replays scripted replies and records every request.

    A reply is (status, body), an exception instance to raise, or a
    FakeResponse. Statuses >= 400 are raised as HTTPError, the way urlopen
    reports them.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []
        self.timeouts = []
        self.opened = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        self.timeouts.append(timeout)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, FakeResponse):
            self.opened.append(reply)
            return reply
        status, body = reply
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if status >= 400:
            fp = body if isinstance(body, io.IOBase) else io.BytesIO(body.encode('utf-8'))
            self.opened.append(fp)
            raise urllib.error.HTTPError(req.full_url, status, "error", {}, fp)
        response = FakeResponse(status, body)
        self.opened.append(response)
        return response

    def payloads(self) -> list[dict]:
        return [json.loads(r.data) for r in self.requests if r.data]

    def urls(self) -> list[str]:
        return [r.full_url for r in self.requests]


@pytest.fixture
def transport(monkeypatch):
    """Return a function that installs a FakeTransport with the given replies."""
    def _install(*replies):
        fake = FakeTransport(replies)
        monkeypatch.setattr("urllib.request.urlopen", fake)
        return fake
    return _install


def chat_body(*contents, finish_reason="stop"):
    """OpenAI-style chat completion body with one choice per content."""
    return {
        "choices": [
            {"index": i, "message": {"role": "assistant", "content": c}, "finish_reason": finish_reason}
            for i, c in enumerate(contents)
        ]
    }


def gemini_body(*texts, finish_reason="STOP"):
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": t}] if t else []}, "finishReason": finish_reason}
            for t in texts
        ]
    }
