# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Supports both:
# - ES256/RS256 (Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret)
#
# Every data call takes a Requester, so routes depend on one of:
# - get_requester:     anonymous when there is no (valid) token
# - require_requester: 401 without a valid token
# - require_admin:     403 unless the caller's profile role is admin
#
# Usage:
#   @router.get("/orders")
#   async def list_orders(requester: Requester = Depends(require_requester)):
#       ...
# =============================================================================

import logging
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWKError

from app.auth.models import AuthUser
from app.config import settings
from app.dependencies import get_row_store
from app.exceptions import AdminRequiredError
from core.access import AdminCheck, Requester
from core.store import RowStore
from lib.cache import ReadThroughCache

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)

JWKS_CACHE_TTL = 3600  # 1 hour
TOKEN_AUDIENCE = "authenticated"

# Expired documents are still served if Supabase cannot be reached
_jwks_cache: ReadThroughCache[dict] = ReadThroughCache(
    ttl_seconds=JWKS_CACHE_TTL,
    serve_stale_on=(httpx.HTTPError,),
)


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip("/")
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _load_jwks() -> dict:
    jwks_url = _get_jwks_url()
    response = httpx.get(jwks_url, timeout=10)
    response.raise_for_status()
    logger.debug(f"Fetched JWKS from {jwks_url}")
    return response.json()


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    try:
        return _jwks_cache.get("jwks", _load_jwks)
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        return {"keys": []}


def _find_jwk(kid: str) -> dict | None:
    for key in _fetch_jwks().get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification

    Raises:
        JWTError: If the header is unreadable or no key matches
    """
    unverified_header = jwt.get_unverified_header(token)
    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        if not settings.SUPABASE_JWT_SECRET:
            raise JWTError("HS256 tokens are not accepted (SUPABASE_JWT_SECRET is not set)")
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid and settings.SUPABASE_URL:
        key = _find_jwk(kid)
        if key is None:
            # Keys may have been rotated since the cached fetch
            logger.info(f"Signing key {kid} not in cached JWKS, refetching")
            _jwks_cache.expire("jwks")
            key = _find_jwk(kid)
        if key is not None:
            return key, alg

    raise JWTError(f"No signing key found for alg={alg}, kid={kid}")


def verify_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience=TOKEN_AUDIENCE,
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except (JWTError, JWKError) as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from Supabase JWT token.

    Raises:
        HTTPException: 401 if token is missing, invalid or expired
    """
    return verify_token(credentials.credentials)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional)
) -> Optional[AuthUser]:
    """
    Optionally get the current user from JWT token.

    Returns None if no token is provided, or if it is invalid, instead of
    raising an error.
    """
    if credentials is None:
        return None

    try:
        return verify_token(credentials.credentials)
    except HTTPException:
        # If token is invalid, treat as no auth rather than error
        return None


async def get_requester(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
) -> Requester:
    """Requester for routes that also serve anonymous visitors."""
    if user is None:
        return Requester.anonymous()
    return Requester.for_user(user.id)


async def require_requester(user: AuthUser = Depends(get_current_user)) -> Requester:
    return Requester.for_user(user.id)


async def require_admin(
    requester: Requester = Depends(require_requester),
    store: RowStore = Depends(get_row_store),
) -> Requester:
    """
    Requester that must be an admin.

    Only for endpoints that are not row-scoped (uploads, dashboard); row
    access is left to the table policies.

    Raises:
        AdminRequiredError: 403 if the profile role is not admin
    """
    if not AdminCheck(store)(requester):
        raise AdminRequiredError()
    return requester
