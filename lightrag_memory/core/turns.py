"""
Turn Selection
Isolates the last conversational turn of a message history.
"""
from enum import Enum
from typing import Any, List, Mapping, Sequence

from pydantic import BaseModel

from .payload import extract_text
from .sanitize import sanitize_captured_text

# Fields holding the message body, in lookup order
MESSAGE_BODY_FIELDS = ("content", "text", "output_text", "output")

CAPTURED_ROLES = ("user", "assistant")


class CapturedText(BaseModel):
    """Sanitized text of one user or assistant message."""
    role: str
    text: str


def _field(message: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute object."""
    if isinstance(message, Mapping):
        return message.get(name)
    return getattr(message, name, None)


def message_role(message: Any) -> str:
    role = _field(message, "role")
    if isinstance(role, Enum):
        role = role.value
    return str(role or "").lower()


def message_body(message: Any) -> Any:
    for name in MESSAGE_BODY_FIELDS:
        value = _field(message, name)
        if value is not None:
            return value
    return ""


def select_turn(messages: Sequence[Any]) -> List[Any]:
    """
    Return the last user message and everything after it.

    Without any user message the whole history is the turn.
    """
    for index in range(len(messages) - 1, -1, -1):
        if message_role(messages[index]) == "user":
            return list(messages[index:])
    return list(messages)


def extract_turn_texts(turn: Sequence[Any], capture_mode: str) -> List[CapturedText]:
    """Sanitized user/assistant texts of a turn; other roles and empty texts are skipped."""
    captured = []
    for message in turn:
        if message is None or isinstance(message, (str, int, float, bool)):
            continue
        role = message_role(message)
        if role not in CAPTURED_ROLES:
            continue

        text = sanitize_captured_text(extract_text(message_body(message)), capture_mode)
        if not text:
            continue

        captured.append(CapturedText(role=role, text=text))
    return captured
