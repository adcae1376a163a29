"""LightRAG conversational memory plugin"""

__version__ = "0.3.0"
