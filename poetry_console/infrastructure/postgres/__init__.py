"""PostgreSQL (asyncpg) document store"""
from .document_store import PostgresDocumentStore

__all__ = ["PostgresDocumentStore"]
