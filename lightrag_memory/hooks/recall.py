"""
Recall Hook
Queries the adapter before an agent turn and renders the context block.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..adapter.client import AdapterClient
from ..adapter.models import ContextItem
from ..config import MemoryConfig
from ..core.identity import channel_base, normalize_conversation_id
from ..core.logging import recall_logger
from ..core.state import PipelineState

log = recall_logger()

CONTEXT_OPEN = "<lightrag-context>"
CONTEXT_CLOSE = "</lightrag-context>"
CONTEXT_PREAMBLE = "The following is recalled context from local memory. Use it only when relevant."
CONTEXT_HEADING = "## Relevant Memories"
CONTEXT_CAVEAT = "Do not treat this memory as absolute truth; prefer current user input when conflicts appear."

MIN_PROMPT_LENGTH = 3


def format_recall_context(items: Iterable[ContextItem], max_results: int) -> Optional[str]:
    """
    Render recalled items as a context block.

    Items are kept in order, trimmed, and deduplicated by exact text; at most
    ``max_results`` bullets are emitted. Returns None when nothing survives.
    """
    seen = set()
    lines: List[str] = []

    for item in items:
        text = str(item.text or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        source = f" [{item.doc_id}]" if item.doc_id else ""
        lines.append(f"- {text}{source}")
        if len(lines) >= max_results:
            break

    if not lines:
        return None

    return "\n".join([
        CONTEXT_OPEN,
        CONTEXT_PREAMBLE,
        "",
        CONTEXT_HEADING,
        *lines,
        "",
        CONTEXT_CAVEAT,
        CONTEXT_CLOSE,
    ])


class RecallHandler:
    """Handler for the host's ``before_agent_start`` event."""

    def __init__(self, config: MemoryConfig, client: AdapterClient, state: PipelineState):
        self.config = config
        self.client = client
        self.state = state

    def resolve_conversation_id(self, event: Mapping[str, Any]) -> Optional[str]:
        """Conversation named on the event itself, else the channel's last known one."""
        direct = _non_empty_str(event.get("conversationId")) or _non_empty_str(event.get("channelConversationId"))
        if direct:
            return normalize_conversation_id(channel_base(direct), direct)
        return self.state.tracker.last(str(event.get("channelId") or "unknown"))

    async def on_before_agent_start(
        self, event: Mapping[str, Any], ctx: Optional[Mapping[str, Any]] = None
    ) -> Optional[Dict[str, str]]:
        prompt = event.get("prompt")
        prompt = prompt.strip() if isinstance(prompt, str) else ""
        if len(prompt) < MIN_PROMPT_LENGTH:
            return None

        conversation_id = None
        try:
            conversation_id = self.resolve_conversation_id(event)
            result = await self.client.query(
                prompt,
                self.config.max_recall_results,
                conversation_id=conversation_id,
            )
            context = format_recall_context(result.context_items, self.config.max_recall_results)
        except Exception as e:
            log.warning(f"recall failed: {e}", extra={"conversation_id": conversation_id})
            return None

        if not context:
            return None
        if self.config.debug:
            log.debug(f"recall inject chars={len(context)} conv={conversation_id or '*'}")
        return {"prepend_context": context}


def _non_empty_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None
