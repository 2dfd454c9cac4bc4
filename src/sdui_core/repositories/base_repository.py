"""
Base Repository Pattern for Remote Config Documents.

This module provides the document store contract the config repository is
built on, the repository error hierarchy, and an in-memory store used by
tests and offline shells.

Features:
- Async key/document operations (get, set, merge, delete, list)
- Deep-merge semantics for partial updates
- Uniform error wrapping and logging
"""

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class ConfigNotFoundError(RepositoryError):
    """Raised when a config document is absent."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document not found: {path}")


class ConfigDecodeError(RepositoryError):
    """Raised when a config document is present but does not match its schema."""
    pass


class ConfigImportError(RepositoryError):
    """Raised when seeding the default configuration stops part-way."""

    def __init__(self, message: str, written: Optional[List[str]] = None, failed: Optional[str] = None):
        self.written = written or []
        self.failed = failed
        super().__init__(message)


class DocumentStoreError(RepositoryError):
    """Raised when the backing store cannot be reached or rejects a request."""
    pass


def merge_documents(base: Mapping[str, Any], updates: Mapping[str, Any]) -> Document:
    """
    Deep-merge `updates` into a copy of `base`.

    Nested mappings are merged key by key; any other value (lists included)
    replaces what was there.
    """
    merged: Document = copy.deepcopy(dict(base))
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class DocumentStore(ABC):
    """
    Contract for a key/document store holding one collection of documents.

    Implementations raise DocumentStoreError for transport failures and never
    retry; retry policy belongs to the caller.
    """

    def __init__(self, collection: str):
        self.collection = collection
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def path(self, key: str) -> str:
        return f"{self.collection}/{key}"

    @abstractmethod
    async def get(self, key: str) -> Optional[Document]:
        """
        Read one document.

        Returns:
            The document, or None if it does not exist
        """
        pass

    @abstractmethod
    async def put(self, key: str, document: Mapping[str, Any]) -> None:
        """Replace (or create) one document."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete one document.

        Returns:
            True if deleted, False if it did not exist
        """
        pass

    @abstractmethod
    async def list_keys(self) -> List[str]:
        """List the keys of every document in the collection."""
        pass

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def set(self, key: str, document: Mapping[str, Any], merge: bool = False) -> Document:
        """
        Write a document, optionally merging into the existing one.

        Args:
            key: Document key
            document: Full document, or the fields to merge
            merge: Merge into the stored document instead of replacing it

        Returns:
            The document as written
        """
        if merge:
            existing = await self.get(key) or {}
            written = merge_documents(existing, document)
        else:
            written = copy.deepcopy(dict(document))

        await self.put(key, written)
        self._logger.debug(f"Wrote {self.path(key)} (merge={merge})")
        return written


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store."""

    def __init__(self, collection: str = "config", documents: Optional[Mapping[str, Document]] = None):
        super().__init__(collection)
        self._documents: Dict[str, Document] = {
            key: copy.deepcopy(dict(doc)) for key, doc in (documents or {}).items()
        }
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Document]:
        async with self._lock:
            document = self._documents.get(key)
            return copy.deepcopy(document) if document is not None else None

    async def put(self, key: str, document: Mapping[str, Any]) -> None:
        async with self._lock:
            self._documents[key] = copy.deepcopy(dict(document))

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._documents.pop(key, None) is not None

    async def list_keys(self) -> List[str]:
        async with self._lock:
            return list(self._documents.keys())

    def snapshot(self) -> Dict[str, Document]:
        """Copy of every stored document."""
        return copy.deepcopy(self._documents)
