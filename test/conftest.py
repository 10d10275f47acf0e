"""
Pytest configuration and shared fixtures for all tests.

The reasoning service is replaced by ``FakeReasoningService`` which returns
canned structured/text responses and records every request it receives.
"""
import json
import os

os.environ["APP_ENV"] = "test"
os.environ["LANGSMITH_TRACING"] = "0"  # Disable tracing in tests

import pytest

from backend.app.models.schemas import ExtractedDocument, RawDocument


def payload_json(**overrides) -> str:
    data = {
        "sender": "Jane Doe",
        "recipient": "John Smith",
        "date": "2024-03-01",
        "summary": "Jane asks John to review the budget. She proposes a cut.",
        "content": "Dear John, please review the attached budget before Friday. Jane",
        "topics": ["budget", "review"],
        "confidence": 0.9,
    }
    data.update(overrides)
    return json.dumps(data)


class FakeReasoningService:
    """Test double for the reasoning service capability."""

    def __init__(self):
        # file_name -> str response or Exception to raise
        self.extract_responses = {}
        self.default_extract = payload_json()
        self.answer = "Jane asked John to review the budget."
        self.converse_error = None
        self.extract_calls = []
        self.converse_calls = []

    async def extract(self, document, schema, instruction, cancellation_token=None):
        self.extract_calls.append({"document": document, "schema": schema, "instruction": instruction})
        resp = self.extract_responses.get(document.file_name, self.default_extract)
        if isinstance(resp, BaseException):
            raise resp
        return resp

    async def converse(self, history, query, system_prompt, cancellation_token=None):
        self.converse_calls.append({"history": list(history), "query": query, "system_prompt": system_prompt})
        if self.converse_error is not None:
            raise self.converse_error
        return self.answer


@pytest.fixture
def fake_service():
    return FakeReasoningService()


@pytest.fixture
def make_payload():
    return payload_json


@pytest.fixture
def make_doc():
    """Factory for ExtractedDocument instances."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "id": f"doc-{counter['n']}",
            "file_name": f"letter_{counter['n']}.pdf",
            "sender": "Jane",
            "recipient": "John",
            "date": "2024-01-0" + str(counter["n"] % 9 + 1),
            "summary": f"Summary {counter['n']}.",
            "content": f"Content of letter {counter['n']}.",
            "topics": ["topic"],
            "confidence": 0.8,
        }
        data.update(overrides)
        return ExtractedDocument(**data)

    return _make


@pytest.fixture
def raw_docs():
    return [
        RawDocument(file_name="a.pdf", data=b"%PDF-1.4 a"),
        RawDocument(file_name="b.pdf", data=b"%PDF-1.4 b"),
        RawDocument(file_name="c.pdf", data=b"%PDF-1.4 c"),
    ]


@pytest.fixture
def fresh_session(monkeypatch):
    """Point the orchestrator at an empty session."""
    from storage.local_store import DocumentSession
    from backend.app.services import orchestrator

    s = DocumentSession()
    monkeypatch.setattr(orchestrator, "session", s)
    return s


@pytest.fixture
def wired_orchestrator(monkeypatch, fake_service, fresh_session):
    """Orchestrator workflows backed by the fake reasoning service."""
    from agents.workflows import DocumentExtractionWorkflow, InterrogationWorkflow
    from backend.app.services import orchestrator

    monkeypatch.setattr(orchestrator, "extraction_workflow", DocumentExtractionWorkflow(fake_service))
    monkeypatch.setattr(orchestrator, "interrogation_workflow", InterrogationWorkflow(fake_service, max_context_chars=0))
    return orchestrator


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
