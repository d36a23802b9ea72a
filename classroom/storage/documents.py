"""Document Store - path-addressed records with equality queries.

The store is schemaless: every shape invariant is enforced by the
application layer (pydantic models), never here.

Paths look like ``quizzes`` (a collection) or ``quizzes/abc123`` (a record).
"""

from __future__ import annotations

import copy
import time
import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..core.errors import StoreError
from ..core.logger import get_logger

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

logger = get_logger("documents")

Record = dict[str, Any]


def normalize_path(path: str) -> str:
    """``/quizzes//abc/`` -> ``quizzes/abc``."""
    return "/".join(part for part in path.split("/") if part)


def new_key() -> str:
    """Push key: millisecond timestamp prefix keeps keys in insertion order."""
    return f"{int(time.time() * 1000):013d}{uuid.uuid4().hex[:8]}"


class DocumentStore(ABC):
    """Interface of the realtime document database.

    No transactions: every write is a single, independent, last-writer-wins
    operation.
    """

    @abstractmethod
    async def get(self, path: str) -> Record | None:
        """Read one record."""

    @abstractmethod
    async def children(self, path: str) -> dict[str, Record]:
        """Read all direct children of a collection (key -> record)."""

    @abstractmethod
    async def set(self, path: str, record: Record) -> None:
        """Write a whole record, replacing any previous value."""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove a record (no-op when missing)."""

    async def query_equal(self, path: str, field: str, value: Any) -> dict[str, Record]:
        """Children whose ``field`` equals ``value``.

        Args:
            path: Collection path
            field: Name of the child field to compare
            value: Value to match

        Returns:
            Dict key -> record (insertion order)
        """
        return {
            key: record
            for key, record in (await self.children(path)).items()
            if record.get(field) == value
        }

    async def push(self, path: str, record: Record) -> str:
        """Write under a generated key and return the key."""
        key = new_key()
        await self.set(f"{normalize_path(path)}/{key}", record)
        return key

    async def update(self, path: str, fields: Record) -> None:
        """Shallow merge ``fields`` into the record (creates it when missing)."""
        current = await self.get(path) or {}
        current.update(fields)
        await self.set(path, current)

    async def close(self) -> None:
        """Release backend resources."""


class MemoryDocumentStore(DocumentStore):
    """In-process store; default backend and test double."""

    def __init__(self, initial: dict[str, Record] | None = None):
        self._records: dict[str, Record] = {}
        for path, record in (initial or {}).items():
            self._records[normalize_path(path)] = copy.deepcopy(record)

    async def get(self, path: str) -> Record | None:
        record = self._records.get(normalize_path(path))
        return copy.deepcopy(record) if record is not None else None

    async def children(self, path: str) -> dict[str, Record]:
        prefix = normalize_path(path) + "/"
        result = {}
        for full_path, record in self._records.items():
            if not full_path.startswith(prefix):
                continue
            key = full_path[len(prefix):]
            if "/" in key:
                continue
            result[key] = copy.deepcopy(record)
        return result

    async def set(self, path: str, record: Record) -> None:
        self._records[normalize_path(path)] = copy.deepcopy(record)

    async def delete(self, path: str) -> None:
        self._records.pop(normalize_path(path), None)

    def __len__(self) -> int:
        return len(self._records)


class AgentFSDocumentStore(DocumentStore):
    """Document store on top of the AgentFS KV store.

    Key layout:
        - doc:{collection}/{key} -> record (JSON)

    Example:
        >>> store = await AgentFSDocumentStore.open("classroom")
        >>> await store.set("quizzes/abc", {"title": "Intro"})
    """

    KEY_PREFIX = "doc"

    def __init__(self, agentfs: AgentFS):
        self.agentfs = agentfs

    @classmethod
    async def open(cls, agentfs_id: str) -> AgentFSDocumentStore:
        """Open (or create) the AgentFS database ``agentfs_id``."""
        from agentfs_sdk import AgentFS, AgentFSOptions

        agentfs = await AgentFS.open(AgentFSOptions(id=agentfs_id))
        logger.info("AgentFS document store opened", agentfs_id=agentfs_id)
        return cls(agentfs)

    def _key(self, path: str) -> str:
        return f"{self.KEY_PREFIX}:{normalize_path(path)}"

    async def get(self, path: str) -> Record | None:
        try:
            return await self.agentfs.kv.get(self._key(path))
        except Exception as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    async def children(self, path: str) -> dict[str, Record]:
        prefix = self._key(path) + "/"
        try:
            entries = await self.agentfs.kv.list(prefix=prefix)
        except Exception as e:
            raise StoreError(f"Failed to list {path}: {e}") from e

        result = {}
        for entry in entries:
            key = entry.get("key", "") if isinstance(entry, dict) else str(entry)
            child = key[len(prefix):]
            if not key.startswith(prefix) or not child or "/" in child:
                continue
            record = await self.agentfs.kv.get(key)
            if record is not None:
                result[child] = record
        return result

    async def set(self, path: str, record: Record) -> None:
        try:
            await self.agentfs.kv.set(self._key(path), record)
        except Exception as e:
            raise StoreError(f"Failed to write {path}: {e}") from e

    async def delete(self, path: str) -> None:
        try:
            await self.agentfs.kv.delete(self._key(path))
        except Exception as e:
            raise StoreError(f"Failed to delete {path}: {e}") from e

    async def close(self) -> None:
        await self.agentfs.close()
