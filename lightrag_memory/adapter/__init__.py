"""Adapter module initialization"""
from .client import AdapterClient, AdapterError
from .models import ContextItem, QueryResult, IngestItem, IngestionRequest

__all__ = [
    "AdapterClient",
    "AdapterError",
    "ContextItem",
    "QueryResult",
    "IngestItem",
    "IngestionRequest",
]
