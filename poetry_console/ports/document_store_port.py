"""
Document Store Port
Read contract the analytics engine consumes from the document database.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List


# A stored record: {"id": <opaque str>, ...fields}
Document = Dict[str, Any]


class Collection(str, Enum):
    """Logical collections of the poetry platform"""
    POEMS = "poems"
    USERS = "users"
    COMMENTS = "comments"
    POEM_REQUESTS = "poemRequests"


class DocumentStorePort(ABC):
    """
    Interface for document store read access.

    Implementations return fresh snapshots on every call; the engine never
    caches what it reads.
    """

    @abstractmethod
    async def list_all(self, collection: Collection) -> List[Document]:
        """
        Full scan of a collection.

        Args:
            collection: Collection to read

        Returns:
            Every document in the collection, each carrying its "id"

        Raises:
            StoreReadError: If the collection could not be read
        """
        pass

    @abstractmethod
    async def count(self, collection: Collection) -> int:
        """
        Fast cardinality of a collection.

        Args:
            collection: Collection to count

        Returns:
            Number of documents in the collection

        Raises:
            StoreReadError: If the collection could not be read
        """
        pass
