"""FastAPI dependencies for the App Store VPP API.

Lifecycle:
- One FleetClient per process, opened in the app lifespan and closed on
  shutdown
- One QueryCache per process, so the freshness window spans requests
- A fresh repository per request, bound to the shared client

Auth:
- Every endpoint except the health checks needs the ``X-API-Key`` header
  matching ``API_KEY``
- ``DISABLE_AUTH=true`` skips the check (local development only)
"""

import logging
import os
import secrets
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ...api.client import FleetClient
from ...api.mdm_apple import MDMAppleAPI
from ...api.query_cache import QueryCache
from ..adapters import FleetVppRepository
from ..domain.ports import IVppRepository

logger = logging.getLogger(__name__)

# ========== API Key Authentication ==========

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
    api_key: Optional[str] = Security(api_key_header),
) -> bool:
    """Check ``X-API-Key`` against ``API_KEY``.

    Fails closed: without a configured ``API_KEY`` every request is refused
    with 500 unless ``DISABLE_AUTH=true``.

    Raises:
        HTTPException: 401 for a missing or wrong key, 500 when the server
            has no key configured
    """
    if os.getenv("DISABLE_AUTH", "").lower() == "true":
        logger.warning("DISABLE_AUTH=true, skipping API key check")
        return True

    expected = os.getenv("API_KEY", "")
    if not expected:
        logger.error("Refusing request: API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API_KEY is not configured on the server",
        )

    if not api_key:
        raise _unauthorized("X-API-Key header required")
    if not secrets.compare_digest(api_key, expected):
        raise _unauthorized("Invalid API key")
    return True


# ========== Global State ==========

_fleet_client: Optional[FleetClient] = None
_mdm_apple_api: Optional[MDMAppleAPI] = None
_query_cache: Optional[QueryCache] = None


async def init_fleet_client():
    """Initialize the Fleet client. Should be called on application startup."""
    global _fleet_client, _mdm_apple_api

    _fleet_client = FleetClient()
    await _fleet_client.__aenter__()
    _mdm_apple_api = MDMAppleAPI(_fleet_client)

    logger.info("Fleet client initialized")


async def close_fleet_client():
    """Close the Fleet client. Should be called on application shutdown."""
    global _fleet_client, _mdm_apple_api

    if _fleet_client:
        await _fleet_client.__aexit__(None, None, None)
        _fleet_client = None
    _mdm_apple_api = None

    logger.info("Fleet client closed")


def is_fleet_client_ready() -> bool:
    return _mdm_apple_api is not None


# ========== Dependency Functions ==========


def get_query_cache() -> QueryCache:
    """Get the process-wide query cache."""
    global _query_cache
    if _query_cache is None:
        _query_cache = QueryCache()
    return _query_cache


def get_vpp_repository() -> IVppRepository:
    """Get a VPP repository bound to the shared Fleet client."""
    if _mdm_apple_api is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Fleet client not initialized",
        )
    return FleetVppRepository(_mdm_apple_api)
