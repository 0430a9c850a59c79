# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small helpers shared by the store, services and API layers.
# =============================================================================

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any
from uuid import UUID


# =============================================================================
# Identifier / Timestamp Utilities
# =============================================================================

def normalize_id(value: str | int | UUID | None) -> str | None:
    """
    Normalize a row identifier to its string form.

    Profiles, modules, products and orders use UUID keys while order items
    and analytics events use integer identity keys; comparing everything as
    strings keeps ownership checks independent of the key type.

    Example:
        normalize_id(uuid_obj)  # "550e8400-..."
        normalize_id(42)        # "42"
        normalize_id(None)      # None
    """
    if value is None:
        return None
    return str(value)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the format PostgREST returns)."""
    return datetime.now(timezone.utc).isoformat()


def round_amount(value: Decimal | float | int | str) -> Decimal:
    """Round a money amount to 2 decimals, half up."""
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for library-level errors.

    Errors should tell HOW to fix, not just WHAT failed.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class StoreError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="STORE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result
