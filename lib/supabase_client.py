# =============================================================================
# lib/supabase_client.py - Supabase Client Singleton
# =============================================================================
# One shared supabase-py client for the whole process. It authenticates with
# the service_role key, which bypasses the database's own row level security:
# every row that leaves this service is filtered by core.access instead.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("products").select("*").execute()
# =============================================================================

from __future__ import annotations

import logging

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class SupabaseClientError(ApplicationError):
    """Raised when the Supabase client cannot be created."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "SUPABASE_ERROR")
        super().__init__(message, **kwargs)


class SupabaseClient:
    """
    Lazily created, process-wide Supabase client.

    All methods are class methods so callers never instantiate it.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY,
                )
                logger.info("Supabase client initialized")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
                ) from e
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used when settings change, e.g. in tests)."""
        cls._instance = None
