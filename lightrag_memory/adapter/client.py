"""
LightRAG Adapter Client
Async HTTP client for the local memory adapter.

Every call sends the API key in the ``x-api-key`` header. A non-success
response or a transport problem raises ``AdapterError``; nothing is retried,
callers decide whether to log or swallow the failure.
"""
from typing import Any, Dict, Optional

import httpx

from ..core.logging import adapter_logger
from .models import (
    ContextItem,
    IngestionRequest,
    InboxActionRequest,
    InboxStatus,
    QueryResult,
    RetrievalFeedbackRequest,
)

log = adapter_logger()


class AdapterError(Exception):
    """Adapter request failed (HTTP error status or transport failure)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AdapterClient:
    """Client for the adapter's query, ingest, inbox and feedback endpoints."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"x-api-key": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=body, params=params)
        except httpx.HTTPError as e:
            raise AdapterError(f"request failed: {e}") from e

        if not response.is_success:
            raise AdapterError(
                f"request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        log.debug(f"{method} {path} -> {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise AdapterError(f"invalid JSON from {path}: {e}", status_code=response.status_code) from e

    async def query(
        self,
        query: str,
        top_k: int,
        conversation_id: Optional[str] = None,
        date: Optional[str] = None,
    ) -> QueryResult:
        """Search memory. Accepts both ``contextItems`` and bare ``contexts`` responses."""
        body: Dict[str, Any] = {"query": query, "topK": top_k}
        if conversation_id:
            body["conversationId"] = conversation_id
        if date:
            body["date"] = date

        result = await self._request("POST", "/adapter/query", body)
        raw = result if isinstance(result, dict) else {}

        if raw.get("contextItems") is not None:
            items = [ContextItem.from_raw(item) for item in raw["contextItems"]]
        elif raw.get("contexts") is not None:
            items = [ContextItem(text=str(text or "")) for text in raw["contexts"]]
        else:
            items = []

        return QueryResult(raw=raw, context_items=items)

    async def get(self, doc_id: str) -> Dict[str, Any]:
        return await self._request("POST", "/adapter/get", {"docId": doc_id})

    async def ingest(self, request: IngestionRequest) -> Any:
        return await self._request("POST", "/adapter/ingest", request.to_wire())

    async def list_inbox(
        self,
        conversation_id: Optional[str] = None,
        date: Optional[str] = None,
        status: Optional[InboxStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Any:
        filters = {
            "conversationId": conversation_id,
            "date": date,
            "status": status,
            "limit": limit,
            "offset": offset,
        }
        params = {k: str(v) for k, v in filters.items() if v is not None and v != ""}
        return await self._request("GET", "/adapter/memory/inbox", params=params or None)

    async def inbox_action(self, payload: InboxActionRequest) -> Any:
        return await self._request("POST", "/adapter/memory/inbox/action", payload.to_wire())

    async def retrieval_feedback(self, payload: RetrievalFeedbackRequest) -> Any:
        return await self._request("POST", "/adapter/retrieval/feedback", payload.to_wire())

    async def aclose(self):
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed
