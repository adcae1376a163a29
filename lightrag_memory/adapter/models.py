"""
Adapter Wire Models
Request and response shapes of the LightRAG adapter API (camelCase on the wire).
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

InboxStatus = Literal["pending", "approved", "merged", "archived", "all"]
InboxActionName = Literal["approve", "merge", "archive"]


class WireModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes camelCase."""
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ContextItem(WireModel):
    """One recalled snippet"""
    text: str = ""
    doc_id: Optional[str] = Field(default=None, alias="docId")

    @classmethod
    def from_raw(cls, raw: Any) -> "ContextItem":
        if isinstance(raw, dict):
            doc_id = raw.get("docId")
            return cls(
                text=str(raw.get("text") or ""),
                doc_id=str(doc_id) if doc_id else None,
            )
        return cls(text=str(raw or ""))


class QueryResult(BaseModel):
    """Adapter query response with normalized context items"""
    raw: Dict[str, Any] = {}
    context_items: List[ContextItem] = []


class IngestItem(WireModel):
    role: Optional[str] = None
    content: str
    ts: Optional[str] = None
    sender: Optional[str] = None
    message_id: Optional[str] = Field(default=None, alias="messageId")


class IngestionRequest(WireModel):
    """Batch of sanitized messages for one conversation"""
    conversation_id: str = Field(alias="conversationId")
    channel: str
    date: str
    items: List[IngestItem]


class InboxActionRequest(WireModel):
    item_id: int = Field(alias="itemId")
    action: InboxActionName
    merge_target_id: Optional[int] = Field(default=None, alias="mergeTargetId")
    note: Optional[str] = None


class RetrievalFeedbackRequest(WireModel):
    query_id: int = Field(alias="queryId")
    item_id: Optional[str] = Field(default=None, alias="itemId")
    helpful: bool
    comment: Optional[str] = None
