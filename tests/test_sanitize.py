"""
Tests for Text Sanitization
"""
import re
import time

from lightrag_memory.core.sanitize import (
    clip_text,
    normalize_timestamp,
    sanitize_captured_text,
    sanitize_text,
    to_date_string,
    to_iso_timestamp,
)
from lightrag_memory.hooks.recall import format_recall_context
from lightrag_memory.adapter.models import ContextItem


class TestSanitizeText:

    def test_strips_nul_and_crlf(self):
        assert sanitize_text("\x00 line1\r\nline2\x00\r\n ") == "line1\nline2"

    def test_lone_cr_kept(self):
        assert sanitize_text("a\rb") == "a\rb"


class TestSanitizeCapturedText:
    """Removal of injected recall blocks."""

    def test_strips_lightrag_block(self):
        text = "before\n<lightrag-context>\nstuff\n</lightrag-context>\nafter"
        assert sanitize_captured_text(text, "all") == "before\nafter"

    def test_strips_case_insensitive(self):
        text = "<LightRAG-Context>x</LIGHTRAG-CONTEXT>   tail"
        assert sanitize_captured_text(text, "all") == "tail"

    def test_strips_legacy_block(self):
        text = "<supermemory-context>\nold memory\n</supermemory-context>\nquestion"
        assert sanitize_captured_text(text, "all") == "question"

    def test_non_greedy(self):
        text = "<lightrag-context>a</lightrag-context>keep<lightrag-context>b</lightrag-context>"
        assert sanitize_captured_text(text, "all") == "keep"

    def test_unmatched_marker_passes_through(self):
        assert sanitize_captured_text("<lightrag-context> dangling", "all") == "<lightrag-context> dangling"

    def test_everything_mode_keeps_blocks(self):
        text = "<lightrag-context>a</lightrag-context>\nq"
        assert sanitize_captured_text(text, "everything") == text

    def test_everything_mode_still_sanitizes(self):
        assert sanitize_captured_text(" a\r\nb\x00 ", "everything") == "a\nb"

    def test_rendered_recall_block_is_stripped(self):
        block = format_recall_context(
            [ContextItem(text="User prefers tea", doc_id="doc-1")], 5
        )
        prompt = f"{block}\n\nWhat should I drink?"
        assert sanitize_captured_text(prompt, "all") == "What should I drink?"

    def test_only_block_yields_empty(self):
        block = format_recall_context([ContextItem(text="x")], 5)
        assert sanitize_captured_text(block, "all") == ""


class TestClipText:

    def test_short_text_unchanged(self):
        text = "a" * 12000
        assert clip_text(text) == text

    def test_long_text_clipped_with_marker(self):
        clipped = clip_text("a" * 12001)
        assert clipped == "a" * 12000 + "…"

    def test_custom_limit(self):
        assert clip_text("abcdef", max_chars=3) == "abc…"


class TestTimestamps:

    def test_seconds_become_milliseconds(self):
        assert normalize_timestamp(1700000000) == 1700000000000

    def test_milliseconds_kept(self):
        assert normalize_timestamp(1700000000123) == 1700000000123

    def test_missing_means_now(self):
        before = int(time.time() * 1000)
        value = normalize_timestamp()
        after = int(time.time() * 1000)
        assert before <= value <= after
        assert before <= normalize_timestamp(0) <= after + 1000

    def test_date_string(self):
        assert to_date_string(1700000000) == "2023-11-14"
        assert to_date_string(1700000000000) == "2023-11-14"
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", to_date_string())

    def test_iso_timestamp(self):
        assert to_iso_timestamp(1700000000) == "2023-11-14T22:13:20.000Z"
