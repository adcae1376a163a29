"""
Message Payload Extraction
Flattens the polymorphic content of chat messages into plain text.

Hosts hand over message content in several shapes: a plain string, a list of
content parts, or an object that wraps the text in ``text``, ``output_text``,
``content`` or ``output``. ``classify`` maps a raw value onto a closed set of
payload variants and ``extract_text`` renders nested ones with a work stack.
"""
from dataclasses import dataclass
from typing import Any, List, Mapping, Tuple, Union

from .sanitize import sanitize_text

# Keys tried, in order, on an object inside a list of parts
PART_TEXT_KEYS = ("text", "value", "output_text")


@dataclass(frozen=True)
class TextPayload:
    text: str


@dataclass(frozen=True)
class SequencePayload:
    parts: Tuple[Any, ...]


@dataclass(frozen=True)
class RecordPayload:
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class ScalarPayload:
    value: Any


Payload = Union[TextPayload, SequencePayload, RecordPayload, ScalarPayload]


def classify(value: Any) -> Payload:
    """Map a raw content value onto its payload variant."""
    if isinstance(value, str):
        return TextPayload(value)
    if isinstance(value, (list, tuple)):
        return SequencePayload(tuple(value))
    if isinstance(value, Mapping):
        return RecordPayload(value)
    return ScalarPayload(value)


def extract_text(value: Any) -> str:
    """
    Extract plain text from a message payload.

    Never raises for JSON-like input; unrecognized shapes yield "".
    """
    return render(classify(value))


@dataclass(frozen=True)
class _Join:
    """Pending combination of the rendered children of a sequence."""
    count: int


def render(payload: Payload) -> str:
    """
    Render a payload to text.

    Nested content is walked with an explicit work stack instead of Python
    recursion, so payload depth is bounded only by memory.
    """
    results: List[str] = []
    work: List[Any] = [payload]

    while work:
        item = work.pop()
        if isinstance(item, str):
            results.append(item)
        elif isinstance(item, _Join):
            split = len(results) - item.count
            joined = "\n".join(results[split:]).strip()
            del results[split:]
            results.append(joined)
        elif isinstance(item, SequencePayload):
            work.append(_Join(len(item.parts)))
            work.extend(_expand_part(part) for part in reversed(item.parts))
        else:
            work.append(_expand(item))

    return results[0]


def _expand(payload: Payload) -> Union[str, Payload]:
    """One step of rendering: final text, or the nested payload to render instead."""
    if isinstance(payload, TextPayload):
        return sanitize_text(payload.text)
    if isinstance(payload, RecordPayload):
        return _expand_record(payload.fields)
    return _render_scalar(payload.value)


def _expand_part(part: Any) -> Union[str, Payload]:
    """One element of a list of content parts."""
    if isinstance(part, str):
        return part
    if isinstance(part, Mapping):
        for key in PART_TEXT_KEYS:
            candidate = part.get(key)
            if candidate:
                return str(candidate)
        return classify(part.get("content"))
    return ""


def _expand_record(fields: Mapping[str, Any]) -> Union[str, Payload]:
    text = fields.get("text")
    if isinstance(text, str):
        return sanitize_text(text)
    output_text = fields.get("output_text")
    if isinstance(output_text, str):
        return sanitize_text(output_text)
    if "content" in fields:
        return classify(fields["content"])
    if "output" in fields:
        return classify(fields["output"])
    return ""


def _render_scalar(value: Any) -> str:
    if value is None:
        return ""
    return sanitize_text(str(value))
