"""
PostgreSQL Document Store Implementation

Stores every collection in a single JSONB table:

    CREATE TABLE documents (
        seq        BIGSERIAL,
        collection TEXT NOT NULL,
        id         TEXT NOT NULL,
        data       JSONB NOT NULL,
        PRIMARY KEY (collection, id)
    );

Features:
- Async operations using asyncpg
- Connection pooling
- Scans return documents in insertion order
"""
import json
import logging
import re
from typing import List, Optional

import asyncpg
from asyncpg import Pool

from ...core.exceptions import StoreReadError
from ...ports.document_store_port import Collection, Document, DocumentStorePort

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PostgresDocumentStore(DocumentStorePort):
    """PostgreSQL (JSONB) implementation of the document store port."""

    def __init__(self, pool: Pool, *, table_name: str = "documents"):
        """
        Initialize PostgreSQL document store.

        Args:
            pool: asyncpg connection pool
            table_name: Name of the JSONB document table
        """
        if not _IDENTIFIER.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self._pool = pool
        self._table = table_name

    @classmethod
    async def create(
        cls,
        dsn: str,
        *,
        table_name: str = "documents",
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: Optional[float] = None,
        **kwargs
    ) -> "PostgresDocumentStore":
        """
        Factory method to create the store with a connection pool.

        Args:
            dsn: PostgreSQL connection string
            table_name: Name of the JSONB document table
            min_size: Minimum pool connections
            max_size: Maximum pool connections
            command_timeout: Per-statement timeout in seconds
        """
        pool = await asyncpg.create_pool(
            dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
            **kwargs
        )
        return cls(pool, table_name=table_name)

    async def close(self) -> None:
        """Close the connection pool."""
        await self._pool.close()

    @staticmethod
    def _row_to_document(row) -> Document:
        data = row["data"]
        if isinstance(data, str):
            data = json.loads(data)
        document = dict(data or {})
        document["id"] = row["id"]
        return document

    async def list_all(self, collection: Collection) -> List[Document]:
        name = Collection(collection).value
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT id, data FROM {self._table} WHERE collection = $1 ORDER BY seq",
                    name
                )
        except (asyncpg.PostgresError, OSError) as e:
            logger.warning(f"Scan of {name} failed: {e}")
            raise StoreReadError(name, str(e)) from e

        return [self._row_to_document(row) for row in rows]

    async def count(self, collection: Collection) -> int:
        name = Collection(collection).value
        try:
            async with self._pool.acquire() as conn:
                result = await conn.fetchval(
                    f"SELECT COUNT(*) FROM {self._table} WHERE collection = $1",
                    name
                )
        except (asyncpg.PostgresError, OSError) as e:
            logger.warning(f"Count of {name} failed: {e}")
            raise StoreReadError(name, str(e)) from e

        return int(result or 0)
