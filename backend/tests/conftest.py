"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- Isolated data directory for history files
- Result payload factory
- Stub analysis client and httpx transports for the provider
- TestClient wired to a per-test session
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

# Set testing environment before importing app modules
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="myjellybean-tests-")
os.environ["GEMINI_API_KEY"] = "test-api-key"
os.environ["LOG_LEVEL"] = "WARNING"

from myjellybean.core.exceptions import ProviderError
from myjellybean.main import app as main_app
from myjellybean.schemas.analysis import AnalysisRequest, AnalysisResult
from myjellybean.services.analysis_client import AnalysisClient
from myjellybean.services.result_store import ResultStore
from myjellybean.services.sample_catalog import SampleCatalog
from myjellybean.services.session_service import AnalysisSession, get_analysis_session


MOM_SCAM_MESSAGE = "Hey it's mom, I lost my phone, send me $200 via gift card"


# =====================================
# Result Payloads
# =====================================

def build_result_data(**overrides: Any) -> dict[str, Any]:
    """Schema-valid provider payload; keyword overrides replace top-level keys."""
    data: dict[str, Any] = {
        "category": "scam_fraud",
        "risk_score": 88,
        "confidence": 0.92,
        "top_signals": ["Claims to be a family member from a new number", "Asks for gift cards"],
        "why_it_matters": "Gift card requests are a hallmark of impersonation scams.",
        "do_this_now": ["Do not send money", "Call your mom on her known number", "Block the sender"],
        "safer_reply": "I'll call you on your usual number before doing anything.",
        "report_summary": {
            "what_happened": "Someone texting from an unknown number claimed to be my mother and asked for $200 in gift cards.",
            "why_risky": ["Impersonation", "Untraceable payment"],
            "next_steps": ["Verify by phone", "Report the number"],
            "evidence_checklist": ["Screenshot of the conversation", "Sender number"],
        },
        "limitations": "Cannot verify the sender's identity.",
    }
    data.update(overrides)
    return data


@pytest.fixture
def result_data() -> dict[str, Any]:
    return build_result_data()


@pytest.fixture
def sample_result() -> AnalysisResult:
    return AnalysisResult.model_validate(build_result_data())


@pytest.fixture
def make_result_data() -> Callable[..., dict[str, Any]]:
    return build_result_data


@pytest.fixture
def make_result() -> Callable[..., AnalysisResult]:
    def _make(**overrides: Any) -> AnalysisResult:
        return AnalysisResult.model_validate(build_result_data(**overrides))
    return _make


# =====================================
# Provider Fakes
# =====================================

def gemini_envelope(payload: Any) -> dict[str, Any]:
    """Wrap a payload the way ``generateContent`` returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
        ]
    }


class RecordingTransport(httpx.AsyncBaseTransport):
    """Async transport that records requests and delegates to a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def envelope() -> Callable[[Any], dict[str, Any]]:
    return gemini_envelope


@pytest.fixture
def provider_transport() -> Callable[..., RecordingTransport]:
    """Factory for a transport answering with a JSON body and status."""
    def _make(body: Any = None, status_code: int = 200) -> RecordingTransport:
        if body is None:
            body = gemini_envelope(build_result_data())
        return RecordingTransport(lambda request: httpx.Response(status_code, json=body))
    return _make


class StubAnalysisClient:
    """Stand-in for AnalysisClient returning queued outcomes in order."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[AnalysisRequest] = []

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        self.requests.append(request)
        if not self.outcomes:
            raise ProviderError("no outcome queued")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


# =====================================
# Store and Session Fixtures
# =====================================

@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "safekit_history.json"


@pytest.fixture
def store(history_path: Path) -> ResultStore:
    return ResultStore(history_path=history_path, limit=10)


@pytest.fixture
def catalog() -> SampleCatalog:
    return SampleCatalog.from_file()


@pytest.fixture
def stub_client_cls() -> type[StubAnalysisClient]:
    return StubAnalysisClient


@pytest.fixture
def stub_client(sample_result: AnalysisResult) -> StubAnalysisClient:
    return StubAnalysisClient(sample_result)


@pytest.fixture
def session(stub_client: StubAnalysisClient, store: ResultStore, catalog: SampleCatalog) -> AnalysisSession:
    return AnalysisSession(client=stub_client, store=store, catalog=catalog)


@pytest.fixture
def unconfigured_client() -> AnalysisClient:
    return AnalysisClient(api_key=None)


@pytest.fixture
def client(session: AnalysisSession) -> Generator[TestClient, None, None]:
    """
    Create a TestClient bound to the per-test session.

    Yields:
        TestClient instance
    """
    main_app.dependency_overrides[get_analysis_session] = lambda: session

    with TestClient(main_app) as test_client:
        yield test_client

    main_app.dependency_overrides.clear()
