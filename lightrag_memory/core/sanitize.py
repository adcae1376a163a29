"""
Text Sanitization
Cleans captured text and strips recall blocks that were injected earlier.
"""
import re
import time
from datetime import datetime, timezone
from typing import Optional

CAPTURE_MODE_ALL = "all"
CAPTURE_MODE_EVERYTHING = "everything"

DEFAULT_CLIP_CHARS = 12000
CLIP_MARKER = "…"

# Current marker first, then legacy vocabularies
RECALL_MARKERS = ("lightrag-context", "supermemory-context")

_MARKER_PATTERNS = [
    re.compile(rf"<{tag}>.*?</{tag}>\s*", re.IGNORECASE | re.DOTALL)
    for tag in RECALL_MARKERS
]


def sanitize_text(raw: str) -> str:
    """Drop NUL bytes, normalize CRLF to LF and trim."""
    return raw.replace("\x00", "").replace("\r\n", "\n").strip()


def strip_recall_blocks(text: str) -> str:
    """Remove every well-formed recall block. Unmatched open markers stay."""
    for pattern in _MARKER_PATTERNS:
        text = pattern.sub("", text)
    return text


def sanitize_captured_text(raw: str, mode: str) -> str:
    """
    Clean text that is about to be ingested.

    Args:
        raw: Text as extracted from the message payload
        mode: "all" strips injected recall blocks so recalled memory is never
              captured as new content; "everything" keeps the text as-is.
    """
    text = sanitize_text(raw)
    if mode == CAPTURE_MODE_ALL:
        text = strip_recall_blocks(text)
    return text.strip()


def clip_text(text: str, max_chars: int = DEFAULT_CLIP_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return f"{text[:max_chars]}{CLIP_MARKER}"


def normalize_timestamp(ts: Optional[float] = None) -> int:
    """
    Normalize a timestamp to milliseconds since epoch.

    Missing or zero means "now". Values below 1e12 are taken as seconds.
    """
    if not ts:
        return int(time.time() * 1000)
    if ts < 1e12:
        return int(ts * 1000)
    return int(ts)


def _as_datetime(ts: Optional[float] = None) -> datetime:
    return datetime.fromtimestamp(normalize_timestamp(ts) / 1000, tz=timezone.utc)


def to_date_string(ts: Optional[float] = None) -> str:
    """UTC calendar date (YYYY-MM-DD) for a timestamp."""
    return _as_datetime(ts).strftime("%Y-%m-%d")


def to_iso_timestamp(ts: Optional[float] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return _as_datetime(ts).isoformat(timespec="milliseconds").replace("+00:00", "Z")
