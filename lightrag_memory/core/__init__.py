"""Core module initialization"""
from .identity import ConversationTracker, channel_base, normalize_conversation_id, resolve_conversation_id
from .payload import extract_text
from .sanitize import sanitize_text, sanitize_captured_text, clip_text
from .state import PipelineState
from .turns import CapturedText, select_turn, extract_turn_texts

__all__ = [
    "ConversationTracker",
    "channel_base",
    "normalize_conversation_id",
    "resolve_conversation_id",
    "extract_text",
    "sanitize_text",
    "sanitize_captured_text",
    "clip_text",
    "PipelineState",
    "CapturedText",
    "select_turn",
    "extract_turn_texts",
]
