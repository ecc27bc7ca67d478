"""In-memory onboarding document store with TTL-based expiration."""

import copy
import threading
from typing import Any, Callable

from cachetools import TTLCache

from industry_interview.config import get_settings

Document = dict[str, Any]


class OnboardingDocumentStore:
    """Thread-safe per-tenant onboarding document store.

    Documents are copied on the way in and out, so callers never hold a
    reference to stored state. update() performs read-modify-write under the
    store lock, which gives one writer at a time per process.
    """

    def __init__(self, ttl_seconds: int | None = None, max_documents: int | None = None):
        """Initialize the document store.

        Args:
            ttl_seconds: Time-to-live for documents in seconds. Defaults to config value.
            max_documents: Maximum number of documents to store. Defaults to config value.
        """
        settings = get_settings()
        self._ttl = ttl_seconds or settings.document_ttl
        self._max_documents = max_documents or settings.max_documents
        self._cache: TTLCache[str, Document] = TTLCache(
            maxsize=self._max_documents,
            ttl=self._ttl,
        )
        self._lock = threading.Lock()

    def get(self, tenant_id: str) -> Document | None:
        """Get a tenant's document, returning None if not found or expired."""
        with self._lock:
            document = self._cache.get(tenant_id)
            return copy.deepcopy(document) if document is not None else None

    def set(self, tenant_id: str, document: Document) -> None:
        """Store or replace a tenant's document."""
        with self._lock:
            self._cache[tenant_id] = copy.deepcopy(document)

    def update(self, tenant_id: str, fn: Callable[[Document | None], Document]) -> Document:
        """Atomically transform a tenant's document.

        Args:
            tenant_id: Tenant whose document to update.
            fn: Receives a copy of the current document (None if absent) and
                returns the new document. If it raises, nothing is written.

        Returns:
            A copy of the stored result.
        """
        with self._lock:
            current = self._cache.get(tenant_id)
            updated = fn(copy.deepcopy(current) if current is not None else None)
            self._cache[tenant_id] = copy.deepcopy(updated)
            return copy.deepcopy(updated)

    def delete(self, tenant_id: str) -> bool:
        """Delete a tenant's document.

        Returns:
            True if the document was deleted, False if not found.
        """
        with self._lock:
            if tenant_id in self._cache:
                del self._cache[tenant_id]
                return True
            return False

    def count(self) -> int:
        """Get the number of stored documents."""
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        """Clear all documents."""
        with self._lock:
            self._cache.clear()

    def get_stats(self) -> dict:
        """Get statistics about the document store."""
        with self._lock:
            return {
                "active_documents": len(self._cache),
                "max_documents": self._max_documents,
                "ttl_seconds": self._ttl,
            }


# Global document store instance
_document_store: OnboardingDocumentStore | None = None


def get_document_store() -> OnboardingDocumentStore:
    """Get the global document store instance."""
    global _document_store
    if _document_store is None:
        _document_store = OnboardingDocumentStore()
    return _document_store


def reset_document_store() -> None:
    """Reset the global document store (useful for testing)."""
    global _document_store
    _document_store = None
