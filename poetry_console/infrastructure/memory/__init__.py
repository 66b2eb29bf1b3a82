"""In-memory document store"""
from .document_store import MemoryDocumentStore

__all__ = ["MemoryDocumentStore"]
