"""Tools module initialization"""
from .base import BaseTool, ToolResult
from .memory_tools import (
    MemorySearchTool,
    MemoryGetTool,
    MemoryInboxListTool,
    MemoryInboxActionTool,
    MemoryFeedbackTool,
)

__all__ = [
    "BaseTool",
    "ToolResult",
    "MemorySearchTool",
    "MemoryGetTool",
    "MemoryInboxListTool",
    "MemoryInboxActionTool",
    "MemoryFeedbackTool",
]
