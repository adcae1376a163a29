"""
Conversation Identity
Canonical ``channel:localId`` keys for the memory adapter.

Events from different channels carry the conversation in different fields
(``conversationId``, the sender, the account) and sometimes already prefixed,
sometimes twice. Everything here reduces them to one stable key.
"""
import re
from typing import Any, Dict, Mapping, Optional

UNKNOWN = "unknown"

# A value that already carries some channel prefix, e.g. "telegram:12345"
_PREFIXED_ID = re.compile(r"^[a-z0-9_-]+:.+", re.IGNORECASE)


def channel_base(value: Optional[str] = None) -> str:
    """Lowercase channel token before the first ':' ("unknown" if empty)."""
    head = str(value or UNKNOWN).split(":", 1)[0].strip().lower()
    return head or UNKNOWN


def normalize_conversation_id(channel_hint: Optional[str], raw: Optional[str] = None) -> str:
    """
    Normalize a raw conversation id under a channel.

    Examples:
        normalize_conversation_id("slack", "C123")             -> "slack:C123"
        normalize_conversation_id("slack", "slack:slack:C123") -> "slack:C123"
        normalize_conversation_id("slack", "telegram:42")      -> "telegram:42"
    """
    channel = channel_base(channel_hint)
    value = str(raw or "").strip()
    if not value:
        return f"{channel}:{UNKNOWN}"

    escaped = re.escape(channel)
    repeated = re.compile(rf"^{escaped}:{escaped}:", re.IGNORECASE)
    single = re.compile(rf"^{escaped}:", re.IGNORECASE)
    while repeated.match(value):
        value = single.sub("", value, count=1)

    if value.startswith(f"{channel}:"):
        return value
    if _PREFIXED_ID.match(value):
        return value
    return f"{channel}:{value}"


def resolve_conversation_id(
    channel_hint: Optional[str],
    conversation_id: Optional[str] = None,
    fallback: Optional[str] = None,
    account_id: Optional[str] = None,
) -> str:
    """Resolve the canonical id from the first available identity hint."""
    channel = channel_base(channel_hint)
    for candidate in (conversation_id, fallback, account_id):
        if candidate:
            return normalize_conversation_id(channel, candidate)
    return f"{channel}:{UNKNOWN}"


def resolve_from_context(ctx: Optional[Mapping[str, Any]], fallback: Optional[str] = None) -> str:
    """Resolve from a host event context (channelId / conversationId / accountId)."""
    ctx = ctx or {}
    return resolve_conversation_id(
        _as_str(ctx.get("channelId")),
        conversation_id=_as_str(ctx.get("conversationId")),
        fallback=fallback,
        account_id=_as_str(ctx.get("accountId")),
    )


def _as_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


class ConversationTracker:
    """
    Most recently seen conversation per channel.

    Written when an inbound message arrives; read when an outbound event
    (agent completion, prompt build) has no conversation fields of its own.
    """

    def __init__(self):
        self._last_by_channel: Dict[str, str] = {}

    def remember(self, channel: str, conversation_id: str) -> str:
        key = channel_base(channel)
        self._last_by_channel[key] = conversation_id
        return conversation_id

    def last(self, channel: Optional[str]) -> Optional[str]:
        return self._last_by_channel.get(channel_base(channel))

    def canonical_for(self, channel: Optional[str]) -> str:
        """Cached id for the channel, normalized, or "<channel>:unknown"."""
        key = channel_base(channel)
        cached = self._last_by_channel.get(key) or f"{key}:{UNKNOWN}"
        return normalize_conversation_id(key, cached)

    def __len__(self) -> int:
        return len(self._last_by_channel)
