"""
Supabase client utility.

This module owns the single Supabase client used by the document store and the
session gateway, created lazily from configuration.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client, ClientOptions, create_client

from ..config import AppConfig, get_config

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Raised when the Supabase client cannot be created."""
    pass


class SupabaseClient:
    """
    Supabase client wrapper with lazy initialisation and connection stats.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or get_config()
        self._client: Optional[Client] = None
        self._connection_stats: Dict[str, Any] = {
            "total_connections": 0,
            "failed_connections": 0,
            "last_connection_time": None,
            "last_failure_time": None,
        }

    @property
    def client(self) -> Client:
        """
        Get the Supabase client instance.

        Raises:
            DatabaseConnectionError: If client initialization fails.
        """
        if self._client is None:
            self._initialize_client()
        return self._client

    def _initialize_client(self) -> None:
        """Initialize the Supabase client with configuration."""
        try:
            options = ClientOptions(postgrest_client_timeout=self.config.supabase.timeout)
            self._client = create_client(
                self.config.supabase.url,
                self.config.supabase.key,
                options=options,
            )
            self._connection_stats["last_connection_time"] = datetime.now(timezone.utc)
            self._connection_stats["total_connections"] += 1
            logger.info("Supabase client initialized successfully")

        except Exception as e:
            self._connection_stats["failed_connections"] += 1
            self._connection_stats["last_failure_time"] = datetime.now(timezone.utc)
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise DatabaseConnectionError(f"Client initialization failed: {e}")

    @property
    def stats(self) -> Dict[str, Any]:
        return dict(self._connection_stats)


# Global client instance
_db_client: Optional[SupabaseClient] = None


def get_db_client() -> SupabaseClient:
    """
    Get the global Supabase client wrapper.

    Returns:
        SupabaseClient: The shared client wrapper.
    """
    global _db_client
    if _db_client is None:
        _db_client = SupabaseClient()
    return _db_client
