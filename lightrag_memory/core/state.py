"""
Pipeline State
Mutable caches shared by the capture and recall hooks of one plugin instance.

Created when the plugin loads and kept until the process exits; nothing here
is persisted. Handlers run one at a time on the host's event loop, so the
caches are read and written without locks. Hosts must deliver the events of a
conversation in order and must not run overlapping handlers for it.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from .identity import ConversationTracker


def assistant_signature(conversation_id: str, assistant_text: str) -> str:
    return f"{conversation_id}|assistant|{assistant_text}"


@dataclass
class PipelineState:
    tracker: ConversationTracker = field(default_factory=ConversationTracker)
    assistant_signatures: Dict[str, str] = field(default_factory=dict)

    def last_signature(self, conversation_id: str) -> Optional[str]:
        return self.assistant_signatures.get(conversation_id)

    def claim_signature(self, conversation_id: str, assistant_text: str) -> bool:
        """
        Record the assistant text captured for a conversation.

        Returns False when the same text was already the last one captured,
        meaning the event is a duplicate delivery.
        """
        signature = assistant_signature(conversation_id, assistant_text)
        if self.assistant_signatures.get(conversation_id) == signature:
            return False
        self.assistant_signatures[conversation_id] = signature
        return True
