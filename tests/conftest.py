"""
Shared test fixtures for the Canvas due date wizard.
Zero network calls: AI providers and Canvas HTTP are replaced with fakes.
"""
import json

import pytest

from canvas_wizard.config import config
from canvas_wizard.session_store import MemorySessionStore
from canvas_wizard.services import ai_gateway


SAMPLE_ASSIGNMENT_LIST = """Syllabus Quiz (Graded)
Discussion: Introduction
Assignment 1: Research Paper
Quiz 1: Chapter 1-3"""


SAMPLE_MATCHES = [
    {
        "assignment_name": "Syllabus Quiz",
        "matched_due_date": "2025-08-30T23:59:00-04:00",
        "confidence": "high",
        "reasoning": "Syllabus quiz is always week 1",
    },
    {
        "assignment_name": "Quiz 1",
        "matched_due_date": "2025-09-20T23:59:00-04:00",
        "confidence": "medium",
        "reasoning": "First numbered quiz",
    },
]


def match_reply(matches=None, fenced=False):
    """A model reply carrying the given matches."""
    text = json.dumps({"matches": SAMPLE_MATCHES if matches is None else matches})
    if fenced:
        text = "```json\n" + text + "\n```"
    return text


class FakeAI:
    """Stands in for both providers' generate(); replies may be text or exceptions."""

    def __init__(self):
        self.replies = {"gemini": match_reply(), "claude": match_reply()}
        self.calls = []

    def install(self, monkeypatch):
        fake = self

        def make(name):
            def generate(provider_self, prompt):
                fake.calls.append((name, prompt))
                reply = fake.replies[name]
                if isinstance(reply, Exception):
                    raise reply
                return reply
            return generate

        monkeypatch.setattr(ai_gateway.GeminiProvider, "generate", make("gemini"))
        monkeypatch.setattr(ai_gateway.ClaudeProvider, "generate", make("claude"))
        return self

    @property
    def providers_called(self):
        return [name for name, _ in self.calls]


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}

    def json(self):
        return self._payload


class FakeCanvas:
    """Minimal Canvas assignments API: GET list (optionally paged) and PUT."""

    def __init__(self, assignments, page_size=None):
        self.assignments = assignments
        self.page_size = page_size
        self.get_status = 200
        self.put_status = {}
        self.gets = []
        self.puts = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def get(self, url, headers=None, params=None, timeout=None):
        self.gets.append({"url": url, "headers": headers, "params": params})
        if self.get_status != 200:
            return FakeResponse(self.get_status, {"errors": []})
        if not self.page_size:
            return FakeResponse(200, list(self.assignments))

        page = 1
        if "page=" in url:
            page = int(url.rsplit("page=", 1)[1])
        start = (page - 1) * self.page_size
        chunk = self.assignments[start:start + self.page_size]
        headers_out = {}
        if start + self.page_size < len(self.assignments):
            base = url.split("?")[0]
            headers_out["Link"] = f'<{base}?per_page=100&page={page + 1}>; rel="next", <{base}?page=1>; rel="first"'
        return FakeResponse(200, chunk, headers_out)

    def put(self, url, headers=None, json=None, timeout=None):
        self.puts.append({"url": url, "headers": headers, "json": json})
        assignment_id = url.rstrip("/").rsplit("/", 1)[1]
        return FakeResponse(self.put_status.get(assignment_id, 200), {"id": assignment_id})


CANVAS_ASSIGNMENTS = [
    {"id": 101, "name": "Syllabus Quiz (Graded)", "due_at": None},
    {"id": 102, "name": "Discussion: Introduction", "due_at": None},
    {"id": 103, "name": "Quiz 1: Chapter 1-3", "due_at": None},
]


@pytest.fixture(autouse=True)
def audit_file(monkeypatch, tmp_path):
    """Keep the audit log out of the home directory."""
    path = str(tmp_path / "audit.log")
    monkeypatch.setattr(config, "audit_log_file", path)
    return path


@pytest.fixture
def fake_ai(monkeypatch):
    return FakeAI().install(monkeypatch)


@pytest.fixture
def fake_canvas():
    return FakeCanvas([dict(a) for a in CANVAS_ASSIGNMENTS])


@pytest.fixture
def store():
    return MemorySessionStore(ttl=3600)


@pytest.fixture
def app(store):
    from canvas_wizard.app import create_app
    app = create_app(store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def current_session(store):
    """Return the most recently saved session dict."""
    def _current():
        if not store.sessions:
            return None
        latest = max(store.sessions.values(), key=lambda entry: entry["last_active"])
        return latest["data"]
    return _current
