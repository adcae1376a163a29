"""
Capture Hooks
Turns completed agent turns and inbound user messages into adapter ingests.
"""
from typing import Any, List, Mapping, Optional

from ..adapter.client import AdapterClient
from ..adapter.models import IngestItem, IngestionRequest
from ..config import MemoryConfig
from ..core.identity import channel_base, normalize_conversation_id, resolve_from_context
from ..core.logging import capture_logger
from ..core.payload import extract_text
from ..core.sanitize import clip_text, normalize_timestamp, sanitize_captured_text, to_date_string, to_iso_timestamp
from ..core.state import PipelineState
from ..core.turns import CapturedText, extract_turn_texts, select_turn

log = capture_logger()


class CaptureHandler:
    """
    Handlers for ``agent_end`` (full turn) and ``message_received`` (inbound
    user text).

    Completion events usually carry no conversation fields, so the turn is
    filed under the conversation last seen on the same channel.
    """

    def __init__(self, config: MemoryConfig, client: AdapterClient, state: PipelineState):
        self.config = config
        self.client = client
        self.state = state

    def _debug(self, message: str):
        if self.config.debug:
            log.debug(message)

    def eligible_texts(self, messages: List[Any]) -> List[CapturedText]:
        """Last-turn texts, clipped and filtered by the minimum capture length."""
        texts = extract_turn_texts(select_turn(messages), self.config.capture_mode)
        clipped = [CapturedText(role=t.role, text=clip_text(t.text)) for t in texts]
        return [t for t in clipped if len(t.text) >= self.config.min_capture_length]

    async def on_agent_end(self, event: Mapping[str, Any], ctx: Optional[Mapping[str, Any]] = None):
        messages = event.get("messages")
        if not event.get("success") or not isinstance(messages, list) or not messages:
            self._debug("capture skip (invalid/empty event)")
            return

        ctx = ctx or {}
        provider = channel_base(str(ctx.get("messageProvider") or ctx.get("channelId") or "unknown"))
        conversation_id = self.state.tracker.canonical_for(provider)

        texts = self.eligible_texts(messages)
        if not texts:
            self._debug("capture skip (no eligible text)")
            return

        assistant = next((t for t in reversed(texts) if t.role == "assistant"), None)
        if assistant is None:
            self._debug("capture skip (no assistant output in last turn)")
            return

        # Signature is kept even if the ingest below fails: a redelivered
        # event is never ingested twice.
        if not self.state.claim_signature(conversation_id, assistant.text):
            self._debug("capture dedupe skip")
            return

        now = normalize_timestamp()
        request = IngestionRequest(
            conversation_id=conversation_id,
            channel=provider,
            date=to_date_string(now),
            items=[
                IngestItem(
                    role=t.role,
                    content=t.text,
                    ts=to_iso_timestamp(now),
                    sender="assistant" if t.role == "assistant" else None,
                )
                for t in texts
            ],
        )

        try:
            await self.client.ingest(request)
        except Exception as e:
            log.warning(f"capture failed: {e}", extra={"conversation_id": conversation_id})
            return

        log.info(
            f"capture ok conv={conversation_id} provider={provider} items={len(texts)}",
            extra={"conversation_id": conversation_id},
        )

    async def on_message_received(self, event: Mapping[str, Any], ctx: Optional[Mapping[str, Any]] = None):
        try:
            await self._capture_inbound(event, ctx or {})
        except Exception as e:
            log.warning(f"message_received failed: {e}")

    async def _capture_inbound(self, event: Mapping[str, Any], ctx: Mapping[str, Any]):
        channel = channel_base(str(ctx.get("channelId") or "unknown"))
        sender = event.get("from") if isinstance(event.get("from"), str) else None
        conversation_id = normalize_conversation_id(channel, resolve_from_context(ctx, sender))
        self.state.tracker.remember(channel, conversation_id)

        text = sanitize_captured_text(extract_text(event.get("content")), self.config.capture_mode)
        if not text or len(text) < self.config.min_capture_length:
            self._debug(f"inbound skip (short text) conv={conversation_id}")
            return

        timestamp = event.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            timestamp = None

        metadata = event.get("metadata")
        message_id = metadata.get("messageId") if isinstance(metadata, Mapping) else None

        request = IngestionRequest(
            conversation_id=conversation_id,
            channel=channel,
            date=to_date_string(timestamp),
            items=[
                IngestItem(
                    role="user",
                    content=text,
                    ts=to_iso_timestamp(timestamp) if timestamp is not None else None,
                    sender=sender,
                    message_id=message_id if isinstance(message_id, str) else None,
                )
            ],
        )
        await self.client.ingest(request)
        self._debug(f"inbound ingest ok conv={conversation_id}")
