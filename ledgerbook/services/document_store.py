"""
Document Store Module
=====================
Whole-table document persistence for the accounting core.

STORAGE MODEL:
-------------
Each logical table (ledgers, vouchers, stock_items, audit_logs) is kept as
ONE JSON document per company scope. Every mutation reads the full table,
changes it in memory and writes the full table back.

CONCURRENCY:
-----------
Single-writer only. There is no version check: two interleaved
read-modify-write sequences on the same table lose one of the writes
(last write wins). A compare-and-swap variant would extend `write` with
an expected version; callers only depend on the DocumentStore interface.

BACKENDS:
--------
- SqliteDocumentStore: aiosqlite file (WAL mode), table `documents`
- MemoryDocumentStore: process-local dict, used by tests and previews
"""

import copy
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiosqlite

from ..config import config
from ..utils.logger import logger
from ..utils.decorators import timed
from ..utils.helpers import get_current_timestamp


class DocumentStore(ABC):
    """Read/write named record lists scoped by an optional company path"""

    backend = "abstract"

    async def connect(self) -> None:
        """Open underlying resources"""

    async def disconnect(self) -> None:
        """Release underlying resources"""

    @abstractmethod
    async def read(self, name: str, scope: Optional[str] = None) -> Optional[Any]:
        """Return the full deserialized document, or None if absent"""

    @abstractmethod
    async def write(self, name: str, records: Any, scope: Optional[str] = None) -> None:
        """Overwrite the full document"""

    @abstractmethod
    async def list_documents(self, scope: Optional[str] = None) -> List[str]:
        """Names of documents present in a scope"""


class MemoryDocumentStore(DocumentStore):
    """In-process document store"""

    backend = "memory"

    def __init__(self):
        self._documents: Dict[Tuple[str, str], Any] = {}

    async def read(self, name: str, scope: Optional[str] = None) -> Optional[Any]:
        records = self._documents.get((scope or "", name))
        # Callers get their own copy, same as a deserialized document
        return copy.deepcopy(records)

    async def write(self, name: str, records: Any, scope: Optional[str] = None) -> None:
        self._documents[(scope or "", name)] = copy.deepcopy(records)

    async def list_documents(self, scope: Optional[str] = None) -> List[str]:
        return sorted(name for doc_scope, name in self._documents if doc_scope == (scope or ""))


class SqliteDocumentStore(DocumentStore):
    """Document store backed by a SQLite file"""

    backend = "sqlite"

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or config.store.path
        self._connection: Optional[aiosqlite.Connection] = None
        self._initialized = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection"""
        if self._connection is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            self._connection = await aiosqlite.connect(self.db_path, timeout=30.0)
            self._connection.row_factory = aiosqlite.Row

            if not self._initialized:
                await self._connection.execute("PRAGMA journal_mode=WAL")
                await self._connection.execute("PRAGMA busy_timeout=30000")
                await self._connection.execute("PRAGMA synchronous=NORMAL")
                await self._connection.execute('''
                    CREATE TABLE IF NOT EXISTS documents (
                        scope TEXT NOT NULL DEFAULT '',
                        name TEXT NOT NULL,
                        body TEXT NOT NULL,
                        updated_at TEXT NOT NULL,
                        PRIMARY KEY (scope, name)
                    )
                ''')
                await self._connection.commit()
                self._initialized = True

            logger.info(f"Connected to document store: {self.db_path}")

        return self._connection

    async def connect(self) -> None:
        """Open database connection"""
        await self._get_connection()

    async def disconnect(self) -> None:
        """Close database connection"""
        if self._connection:
            await self._connection.close()
            self._connection = None
            self._initialized = False
            logger.info("Document store connection closed")

    async def read(self, name: str, scope: Optional[str] = None) -> Optional[Any]:
        conn = await self._get_connection()

        try:
            cursor = await conn.execute(
                "SELECT body FROM documents WHERE scope = ? AND name = ?",
                (scope or "", name)
            )
            row = await cursor.fetchone()
        except Exception as e:
            logger.error(f"Read failed for {name} (scope={scope or 'default'}): {e}")
            raise

        if row is None:
            return None
        return json.loads(row["body"])

    @timed
    async def write(self, name: str, records: Any, scope: Optional[str] = None) -> None:
        conn = await self._get_connection()
        body = json.dumps(records, ensure_ascii=False)

        try:
            await conn.execute('''
                INSERT INTO documents (scope, name, body, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(scope, name) DO UPDATE SET
                    body = excluded.body,
                    updated_at = excluded.updated_at
            ''', (scope or "", name, body, get_current_timestamp()))
            await conn.commit()
            logger.debug(f"Wrote {name} (scope={scope or 'default'}, {len(body)} bytes)")
        except Exception as e:
            logger.error(f"Write failed for {name} (scope={scope or 'default'}): {e}")
            raise

    async def list_documents(self, scope: Optional[str] = None) -> List[str]:
        conn = await self._get_connection()
        cursor = await conn.execute(
            "SELECT name FROM documents WHERE scope = ? ORDER BY name",
            (scope or "",)
        )
        rows = await cursor.fetchall()
        return [row["name"] for row in rows]

    async def get_database_size(self) -> int:
        """Get database file size in bytes"""
        try:
            return Path(self.db_path).stat().st_size
        except OSError:
            return 0


def create_document_store(backend: Optional[str] = None, path: Optional[str] = None) -> DocumentStore:
    """Build the configured store backend"""
    backend = backend or config.store.backend
    if backend == "memory":
        return MemoryDocumentStore()
    if backend == "sqlite":
        return SqliteDocumentStore(path)
    raise ValueError(f"Unknown document store backend: {backend}")


# Global store instance
document_store = create_document_store()
