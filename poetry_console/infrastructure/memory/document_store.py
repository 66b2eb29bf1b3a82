"""
In-Memory Document Store Implementation
"""
import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import asyncio

import yaml

from ...ports.document_store_port import Collection, Document, DocumentStorePort

logger = logging.getLogger(__name__)


class MemoryDocumentStore(DocumentStorePort):
    """
    In-memory document store for development and testing.

    Reads return deep copies so callers never share state with the store.
    Writes are serialized with an asyncio lock.
    """

    def __init__(self, seed: Optional[Dict[Collection, List[Document]]] = None):
        self._storage: Dict[Collection, Dict[str, Document]] = {c: {} for c in Collection}
        self._lock = asyncio.Lock()
        self._id_counter = 0

        for collection, documents in (seed or {}).items():
            for document in documents:
                self._put(Collection(collection), dict(document))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MemoryDocumentStore":
        """
        Build a store from a YAML or JSON file.

        The file maps collection names (poems, users, comments,
        poemRequests) to lists of documents. Unknown collections are
        skipped with a warning.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Seed file {path} must map collection names to document lists")

        seed: Dict[Collection, List[Document]] = {}
        for name, documents in data.items():
            try:
                collection = Collection(name)
            except ValueError:
                logger.warning(f"Skipping unknown collection {name!r} in seed file {path}")
                continue
            seed[collection] = [d for d in (documents or []) if isinstance(d, dict)]

        logger.info(
            f"Loaded seed file {path}: "
            + ", ".join(f"{c.value}={len(docs)}" for c, docs in seed.items())
        )
        return cls(seed=seed)

    def _generate_id(self) -> str:
        """Generate a unique ID"""
        self._id_counter += 1
        return f"mem_{self._id_counter:08d}"

    def _put(self, collection: Collection, document: Document) -> Document:
        if not document.get("id"):
            document["id"] = self._generate_id()
        document["id"] = str(document["id"])
        self._storage[collection][document["id"]] = document
        return document

    async def list_all(self, collection: Collection) -> List[Document]:
        """Get every document in insertion order"""
        return [copy.deepcopy(d) for d in self._storage[Collection(collection)].values()]

    async def count(self, collection: Collection) -> int:
        """Count documents"""
        return len(self._storage[Collection(collection)])

    async def get(self, collection: Collection, document_id: str) -> Optional[Document]:
        """Get document by ID"""
        document = self._storage[Collection(collection)].get(str(document_id))
        return copy.deepcopy(document) if document is not None else None

    async def insert(self, collection: Collection, document: Document) -> Document:
        """Insert a document, generating an ID when it has none"""
        async with self._lock:
            stored = self._put(Collection(collection), copy.deepcopy(document))
            return copy.deepcopy(stored)

    async def update(
        self,
        collection: Collection,
        document_id: str,
        data: Dict[str, Any]
    ) -> Optional[Document]:
        """Merge fields into an existing document"""
        async with self._lock:
            document = self._storage[Collection(collection)].get(str(document_id))
            if document is None:
                return None
            document.update({k: v for k, v in data.items() if k != "id"})
            return copy.deepcopy(document)

    async def delete(self, collection: Collection, document_id: str) -> bool:
        """Delete a document"""
        async with self._lock:
            return self._storage[Collection(collection)].pop(str(document_id), None) is not None

    async def clear(self) -> None:
        """Clear all data (for testing)"""
        async with self._lock:
            for documents in self._storage.values():
                documents.clear()
            self._id_counter = 0
