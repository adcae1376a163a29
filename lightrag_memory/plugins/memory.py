"""
Memory Plugin
Long-term conversational memory backed by a local LightRAG adapter.

Captures completed turns and inbound user messages, recalls relevant
snippets before each agent turn, and exposes the adapter as agent tools.
"""
import logging
from typing import Any, Dict, List, Optional

from ..adapter.client import AdapterClient
from ..config import PLUGIN_ID, MemoryConfig
from ..core.plugins import (
    EVENT_AGENT_END,
    EVENT_BEFORE_AGENT_START,
    EVENT_MESSAGE_RECEIVED,
    BasePlugin,
)
from ..core.state import PipelineState
from ..hooks.capture import CaptureHandler
from ..hooks.recall import RecallHandler
from ..tools.base import BaseTool
from ..tools.memory_tools import (
    MemoryFeedbackTool,
    MemoryGetTool,
    MemoryInboxActionTool,
    MemoryInboxListTool,
    MemorySearchTool,
)

logger = logging.getLogger(__name__)


class LightragMemoryPlugin(BasePlugin):
    def __init__(self, config: MemoryConfig, client: Optional[AdapterClient] = None):
        self.config = config
        self.client = client
        self.state = PipelineState()
        self.capture: Optional[CaptureHandler] = None
        self.recall: Optional[RecallHandler] = None

    @property
    def name(self) -> str:
        return PLUGIN_ID

    async def on_load(self):
        if self.client is None:
            self.client = AdapterClient(self.config.base_url, self.config.api_key)

        self.capture = CaptureHandler(self.config, self.client, self.state)
        self.recall = RecallHandler(self.config, self.client, self.state)

        logger.info(
            f"{PLUGIN_ID}: register autoIngest={self.config.auto_ingest} "
            f"autoRecall={self.config.auto_recall} captureMode={self.config.capture_mode}"
        )

    async def on_shutdown(self):
        if self.client is not None:
            await self.client.aclose()

    @property
    def hooks(self) -> Dict[str, Any]:
        hooks: Dict[str, Any] = {}
        if self.recall and self.config.auto_recall:
            hooks[EVENT_BEFORE_AGENT_START] = self.recall.on_before_agent_start
        if self.capture and self.config.auto_ingest:
            hooks[EVENT_MESSAGE_RECEIVED] = self.capture.on_message_received
            hooks[EVENT_AGENT_END] = self.capture.on_agent_end
        return hooks

    def get_tools(self) -> List[BaseTool]:
        return [
            MemorySearchTool(self.client),
            MemoryGetTool(self.client),
            MemoryInboxListTool(self.client),
            MemoryInboxActionTool(self.client),
            MemoryFeedbackTool(self.client),
        ]
