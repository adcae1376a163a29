"""
Tests for the LightRAG Adapter Client
Uses httpx.MockTransport, no adapter process required.
"""
import json

import httpx
import pytest

from lightrag_memory.adapter.client import AdapterClient, AdapterError
from lightrag_memory.adapter.models import (
    IngestItem,
    IngestionRequest,
    InboxActionRequest,
    RetrievalFeedbackRequest,
)


class Recorder:
    """Mock transport handler that records requests and replays a response."""

    def __init__(self, status_code=200, payload=None, error=None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"ok": True}
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)


def make_client(recorder, base_url="http://adapter.test"):
    return AdapterClient(base_url, "secret", transport=httpx.MockTransport(recorder))


class TestQuery:

    @pytest.mark.asyncio
    async def test_posts_query_with_api_key(self):
        recorder = Recorder(payload={"contextItems": [{"text": "fact", "docId": "d1"}, {"text": "other"}]})
        client = make_client(recorder)

        result = await client.query("what?", 4, conversation_id="slack:C1")
        await client.aclose()

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/adapter/query"
        assert request.headers["x-api-key"] == "secret"
        assert recorder.last_body == {"query": "what?", "topK": 4, "conversationId": "slack:C1"}
        assert [(i.text, i.doc_id) for i in result.context_items] == [("fact", "d1"), ("other", None)]

    @pytest.mark.asyncio
    async def test_optional_fields_omitted(self):
        recorder = Recorder(payload={"contextItems": []})
        client = make_client(recorder)

        await client.query("what?", 4)
        await client.aclose()

        assert recorder.last_body == {"query": "what?", "topK": 4}

    @pytest.mark.asyncio
    async def test_contexts_fallback(self):
        client = make_client(Recorder(payload={"contexts": ["a", "b"]}))

        result = await client.query("q", 2)
        await client.aclose()

        assert [i.text for i in result.context_items] == ["a", "b"]
        assert result.raw == {"contexts": ["a", "b"]}

    @pytest.mark.asyncio
    async def test_no_items(self):
        client = make_client(Recorder(payload={"answer": "n/a"}))

        result = await client.query("q", 2)
        await client.aclose()

        assert result.context_items == []

    @pytest.mark.asyncio
    async def test_trailing_slash_in_base_url(self):
        recorder = Recorder(payload={})
        client = make_client(recorder, base_url="http://adapter.test/")

        await client.query("q", 1)
        await client.aclose()

        assert str(recorder.requests[0].url) == "http://adapter.test/adapter/query"


class TestErrors:

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = make_client(Recorder(status_code=500, payload={"detail": "boom"}))

        with pytest.raises(AdapterError) as exc_info:
            await client.query("q", 1)
        await client.aclose()

        assert exc_info.value.status_code == 500
        assert "request failed: 500" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        client = make_client(Recorder(error=httpx.ConnectError("connection refused")))

        with pytest.raises(AdapterError) as exc_info:
            await client.get("d1")
        await client.aclose()

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)


class TestWriteEndpoints:

    @pytest.mark.asyncio
    async def test_ingest_serializes_camel_case(self):
        recorder = Recorder()
        client = make_client(recorder)

        await client.ingest(IngestionRequest(
            conversation_id="slack:C1",
            channel="slack",
            date="2024-01-02",
            items=[IngestItem(role="user", content="hi", message_id="m1")],
        ))
        await client.aclose()

        assert recorder.requests[0].url.path == "/adapter/ingest"
        assert recorder.last_body == {
            "conversationId": "slack:C1",
            "channel": "slack",
            "date": "2024-01-02",
            "items": [{"role": "user", "content": "hi", "messageId": "m1"}],
        }

    @pytest.mark.asyncio
    async def test_get(self):
        recorder = Recorder(payload={"text": "full"})
        client = make_client(recorder)

        result = await client.get("d1")
        await client.aclose()

        assert recorder.requests[0].url.path == "/adapter/get"
        assert recorder.last_body == {"docId": "d1"}
        assert result == {"text": "full"}

    @pytest.mark.asyncio
    async def test_list_inbox_query_string(self):
        recorder = Recorder(payload={"items": []})
        client = make_client(recorder)

        await client.list_inbox(conversation_id="slack:C1", status="pending", limit=10, date="")
        await client.aclose()

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/adapter/memory/inbox"
        assert dict(request.url.params) == {"conversationId": "slack:C1", "status": "pending", "limit": "10"}

    @pytest.mark.asyncio
    async def test_list_inbox_without_filters(self):
        recorder = Recorder(payload={"items": []})
        client = make_client(recorder)

        await client.list_inbox()
        await client.aclose()

        assert str(recorder.requests[0].url) == "http://adapter.test/adapter/memory/inbox"

    @pytest.mark.asyncio
    async def test_inbox_action(self):
        recorder = Recorder()
        client = make_client(recorder)

        await client.inbox_action(InboxActionRequest(item_id=3, action="merge", merge_target_id=1))
        await client.aclose()

        assert recorder.requests[0].url.path == "/adapter/memory/inbox/action"
        assert recorder.last_body == {"itemId": 3, "action": "merge", "mergeTargetId": 1}

    @pytest.mark.asyncio
    async def test_retrieval_feedback(self):
        recorder = Recorder()
        client = make_client(recorder)

        await client.retrieval_feedback(RetrievalFeedbackRequest(query_id=9, helpful=False, comment="stale"))
        await client.aclose()

        assert recorder.requests[0].url.path == "/adapter/retrieval/feedback"
        assert recorder.last_body == {"queryId": 9, "helpful": False, "comment": "stale"}
