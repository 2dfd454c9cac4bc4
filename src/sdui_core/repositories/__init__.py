"""
Repository layer for remote screen documents and local preferences.
"""

from .base_repository import (
    ConfigDecodeError,
    ConfigImportError,
    ConfigNotFoundError,
    DocumentStore,
    DocumentStoreError,
    InMemoryDocumentStore,
    RepositoryError,
    merge_documents,
)
from .config_repository import ConfigRepository
from .default_configuration import default_documents
from .preferences_repository import PreferencesError, PreferencesRepository
from .supabase_document_store import SupabaseDocumentStore

__all__ = [
    "ConfigDecodeError",
    "ConfigImportError",
    "ConfigNotFoundError",
    "ConfigRepository",
    "DocumentStore",
    "DocumentStoreError",
    "InMemoryDocumentStore",
    "PreferencesError",
    "PreferencesRepository",
    "RepositoryError",
    "SupabaseDocumentStore",
    "default_documents",
    "merge_documents",
]
