"""
Pytest Configuration and Fixtures
Shared fixtures for all test modules.
"""
import sys
import pytest
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lightrag_memory.adapter.client import AdapterError
from lightrag_memory.adapter.models import ContextItem, QueryResult
from lightrag_memory.config import MemoryConfig


class FakeAdapterClient:
    """In-memory stand-in for AdapterClient that records every call."""

    def __init__(self):
        self.ingested = []
        self.ingest_attempts = 0
        self.queries = []
        self.query_items = []
        self.gets = []
        self.inbox_filters = []
        self.inbox_actions = []
        self.feedback = []
        self.fail = False
        self.closed = False

    def _maybe_fail(self):
        if self.fail:
            raise AdapterError("request failed: 500 adapter down", status_code=500)

    async def ingest(self, request):
        self.ingest_attempts += 1
        self._maybe_fail()
        self.ingested.append(request)
        return {"ok": True}

    async def query(self, query, top_k, conversation_id=None, date=None):
        self.queries.append({"query": query, "top_k": top_k, "conversation_id": conversation_id})
        self._maybe_fail()
        return QueryResult(raw={}, context_items=list(self.query_items))

    async def get(self, doc_id):
        self.gets.append(doc_id)
        self._maybe_fail()
        return {"docId": doc_id, "text": f"full text of {doc_id}"}

    async def list_inbox(self, **filters):
        self.inbox_filters.append(filters)
        self._maybe_fail()
        return {"items": [{"id": 1, "status": "pending"}], "total": 1}

    async def inbox_action(self, payload):
        self.inbox_actions.append(payload)
        self._maybe_fail()
        return {"ok": True}

    async def retrieval_feedback(self, payload):
        self.feedback.append(payload)
        self._maybe_fail()
        return {"ok": True}

    async def aclose(self):
        self.closed = True


def make_items(*texts, doc_id=None):
    return [ContextItem(text=t, doc_id=doc_id) for t in texts]


@pytest.fixture
def memory_config():
    """Plugin config that captures even one-character texts."""
    return MemoryConfig(
        base_url="http://adapter.test",
        api_key="test-key",
        min_capture_length=1,
        max_recall_results=5,
    )


@pytest.fixture
def fake_client():
    return FakeAdapterClient()


@pytest.fixture
def state():
    from lightrag_memory.core.state import PipelineState
    return PipelineState()


@pytest.fixture
def capture_handler(memory_config, fake_client, state):
    from lightrag_memory.hooks.capture import CaptureHandler
    return CaptureHandler(memory_config, fake_client, state)


@pytest.fixture
def recall_handler(memory_config, fake_client, state):
    from lightrag_memory.hooks.recall import RecallHandler
    return RecallHandler(memory_config, fake_client, state)


@pytest.fixture
def other_client():
    """A second, independent fake adapter."""
    return FakeAdapterClient()
