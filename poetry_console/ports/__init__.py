"""
Ports (interfaces) the analytics engine depends on.
Adapters live in infrastructure/.
"""
from .document_store_port import Collection, Document, DocumentStorePort

__all__ = ["Collection", "Document", "DocumentStorePort"]
