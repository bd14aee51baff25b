# conftest.py
import pytest
from fastapi.testclient import TestClient

from catchbook.ai.analysis_schema import FishAnalysis, ReceiptAnalysis
from catchbook.ai.groq_client import AIClient
from catchbook.core.exceptions import AnalysisFailed
from catchbook.main import create_app
from catchbook.services.sql_store import SqlRecordStore
from catchbook.services.store import MemoryRecordStore


class FakeAIClient(AIClient):
    """Records calls and returns canned results, or raises when `error` is set."""

    def __init__(self):
        self.error = None
        self.calls = []

    def _maybe_fail(self):
        if self.error:
            raise AnalysisFailed(self.error)

    def analyze_fish_image(self, image, mime_type="image/jpeg"):
        self.calls.append(("fish", image, mime_type))
        self._maybe_fail()
        return FishAnalysis(fish_species="マダイ", quantity="2.5kg", confidence=0.9)

    def analyze_receipt_image(self, image, mime_type="image/jpeg"):
        self.calls.append(("receipt", image, mime_type))
        self._maybe_fail()
        return ReceiptAnalysis(
            date="2026-10-01", amount="5000", vendor="篠島石油", category="燃料費", confidence=0.8
        )

    def get_business_advice(self, question, business_data):
        self.calls.append(("advice", question, business_data))
        self._maybe_fail()
        return "燃料費を見直しましょう。"


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each backend, fresh per test."""
    if request.param == "memory":
        return MemoryRecordStore()
    return SqlRecordStore("sqlite:///:memory:")


@pytest.fixture
def memory_store():
    return MemoryRecordStore()


@pytest.fixture
def fake_ai():
    return FakeAIClient()


@pytest.fixture
def client(memory_store, fake_ai):
    app = create_app(store=memory_store, ai_client=fake_ai)
    with TestClient(app) as c:
        yield c
