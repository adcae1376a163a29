"""
Memory Tools
Agent-facing tools backed by the LightRAG adapter: search, fetch, inbox review
and retrieval feedback.
"""
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..adapter.client import AdapterClient, AdapterError
from ..adapter.models import InboxActionRequest, RetrievalFeedbackRequest
from .base import BaseTool, ToolResult

DOC_PATH_PREFIX = "adapter:"
PROVIDER_NAME = "lightrag-local"
DEFAULT_MAX_RESULTS = 5


def _result_limit(value: Any) -> int:
    """maxResults as a positive int; missing or non-numeric values use the default."""
    try:
        return max(1, int(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MAX_RESULTS


class AdapterTool(BaseTool):
    """Base for tools that call the adapter."""

    def __init__(self, client: Optional[AdapterClient]):
        self.client = client

    def _failure(self, error: Exception, **fallback: Any) -> ToolResult:
        return ToolResult.from_payload({**fallback, "error": str(error)}, success=False)

    def _not_ready(self, **fallback: Any) -> Optional[ToolResult]:
        if self.client is None:
            return self._failure(AdapterError("memory adapter not initialized"), **fallback)
        return None


class MemorySearchTool(AdapterTool):
    @property
    def name(self) -> str:
        return "memory_search"

    @property
    def description(self) -> str:
        return "Mandatory recall step: searches local LightRAG adapter for relevant context."

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string"},
                "maxResults": {"type": "number"},
                "minScore": {"type": "number"},
            },
            "required": ["query"]
        }

    async def execute(self, query: str, maxResults: Any = DEFAULT_MAX_RESULTS, **kwargs) -> ToolResult:
        not_ready = self._not_ready(results=[], disabled=True)
        if not_ready:
            return not_ready

        try:
            result = await self.client.query(query, _result_limit(maxResults))
        except AdapterError as e:
            return self._failure(e, results=[], disabled=True)

        results = [
            {
                "id": f"{item.doc_id or 'doc'}-{idx}",
                "path": f"{DOC_PATH_PREFIX}{item.doc_id or 'unknown'}",
                "startLine": 1,
                "endLine": 1,
                "score": 1,
                "snippet": item.text,
                "source": "adapter",
            }
            for idx, item in enumerate(result.context_items)
        ]
        return ToolResult.from_payload({"results": results, "provider": PROVIDER_NAME})


class MemoryGetTool(AdapterTool):
    @property
    def name(self) -> str:
        return "memory_get"

    @property
    def description(self) -> str:
        return "Fetch full text for a memory doc from LightRAG adapter."

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {"type": "string"},
                "from": {"type": "number"},
                "lines": {"type": "number"},
            },
            "required": ["path"]
        }

    async def execute(self, path: str, **kwargs) -> ToolResult:
        not_ready = self._not_ready(path=path, text="", disabled=True)
        if not_ready:
            return not_ready

        doc_id = path[len(DOC_PATH_PREFIX):] if path.startswith(DOC_PATH_PREFIX) else path
        try:
            result = await self.client.get(doc_id)
        except AdapterError as e:
            return self._failure(e, path=path, text="", disabled=True)

        text = result.get("text", "") if isinstance(result, dict) else ""
        return ToolResult.from_payload({"path": path, "text": text})


class MemoryInboxListTool(AdapterTool):
    @property
    def name(self) -> str:
        return "memory_inbox_list"

    @property
    def description(self) -> str:
        return "List memory inbox review items from LightRAG adapter."

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "conversationId": {"type": "string"},
                "date": {"type": "string"},
                "status": {"type": "string", "enum": ["pending", "approved", "merged", "archived", "all"]},
                "limit": {"type": "number"},
                "offset": {"type": "number"},
            },
        }

    async def execute(
        self,
        conversationId: Optional[str] = None,
        date: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        **kwargs
    ) -> ToolResult:
        not_ready = self._not_ready(items=[], disabled=True)
        if not_ready:
            return not_ready

        try:
            result = await self.client.list_inbox(
                conversation_id=conversationId,
                date=date,
                status=status,
                limit=limit,
                offset=offset,
            )
        except AdapterError as e:
            return self._failure(e, items=[], disabled=True)

        return ToolResult.from_payload(result if isinstance(result, dict) else {"items": result})


class MemoryInboxActionTool(AdapterTool):
    @property
    def name(self) -> str:
        return "memory_inbox_action"

    @property
    def description(self) -> str:
        return "Apply review action (approve/merge/archive) to a memory inbox item."

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "itemId": {"type": "number"},
                "action": {"type": "string", "enum": ["approve", "merge", "archive"]},
                "mergeTargetId": {"type": "number"},
                "note": {"type": "string"},
            },
            "required": ["itemId", "action"]
        }

    async def execute(self, **kwargs) -> ToolResult:
        not_ready = self._not_ready(ok=False)
        if not_ready:
            return not_ready

        try:
            payload = InboxActionRequest.model_validate(kwargs)
            result = await self.client.inbox_action(payload)
        except (ValidationError, AdapterError) as e:
            return self._failure(e, ok=False)

        return ToolResult.from_payload(result if isinstance(result, dict) else {"ok": True, "result": result})


class MemoryFeedbackTool(AdapterTool):
    @property
    def name(self) -> str:
        return "memory_feedback"

    @property
    def label(self) -> str:
        return "Memory Retrieval Feedback"

    @property
    def description(self) -> str:
        return "Send helpful/not-helpful feedback for retrieval results."

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "queryId": {"type": "number"},
                "itemId": {"type": "string"},
                "helpful": {"type": "boolean"},
                "comment": {"type": "string"},
            },
            "required": ["queryId", "helpful"]
        }

    async def execute(self, **kwargs) -> ToolResult:
        not_ready = self._not_ready(ok=False)
        if not_ready:
            return not_ready

        try:
            payload = RetrievalFeedbackRequest.model_validate(kwargs)
            result = await self.client.retrieval_feedback(payload)
        except (ValidationError, AdapterError) as e:
            return self._failure(e, ok=False)

        return ToolResult.from_payload(result if isinstance(result, dict) else {"ok": True, "result": result})
