#!/usr/bin/env python3
"""Async HTTP Client for the device-management backend (Fleet-style REST API).

This module provides the HTTP layer the VPP workflow talks through:

    - Bearer API token authentication
    - Connection pooling via shared aiohttp session
    - Typed exceptions for every non-2xx status, carrying the backend's
      reason text so callers can classify failures
    - No built-in retry: reads are retried by the query layer according to
      RetryPolicy, and writes must never be silently repeated

Design Philosophy:
    This client knows HOW to talk to the backend, but not WHAT to fetch.
    Knowledge of VPP endpoints lives in MDMAppleAPI, which composes this client.

Usage:
    async with FleetClient() as client:
        info = await client.get("/api/latest/fleet/vpp")
        await client.post("/api/latest/fleet/software/app_store_apps", {...})
"""
import asyncio
import json
import logging
import os
from typing import Any, Optional

import aiohttp
from dotenv import load_dotenv

from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TimeoutError,
    ValidationError,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60


def extract_error_reason(response_body: Optional[str]) -> Optional[str]:
    """Pull the human-readable reason out of a backend error body.

    The backend answers errors with::

        {"message": "Bad request", "errors": [{"name": "base", "reason": "..."}]}

    The first ``errors[].reason`` wins, then ``message``. Bodies that are not
    JSON are returned stripped (or None when empty).
    """
    if not response_body:
        return None

    try:
        data = json.loads(response_body)
    except (TypeError, ValueError):
        text = response_body.strip()
        return text or None

    if not isinstance(data, dict):
        return None

    errors = data.get("errors")
    if isinstance(errors, list):
        for entry in errors:
            if isinstance(entry, dict) and isinstance(entry.get("reason"), str) and entry["reason"]:
                return entry["reason"]

    message = data.get("message")
    if isinstance(message, str) and message:
        return message
    return None


class FleetClient:
    """Async HTTP client for the device-management backend.

    Use as an async context manager so the session is always closed:

        async with FleetClient() as client:
            data = await client.get("/api/latest/fleet/vpp")

    Attributes:
        base_url: Backend base URL (e.g., "https://fleet.example.com")
        api_token: API token sent as a Bearer credential
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize the FleetClient.

        Args:
            base_url: API base URL. If not provided, reads FLEET_URL.
            api_token: API token. If not provided, reads FLEET_API_TOKEN.
            timeout_seconds: Total request timeout

        Raises:
            ConfigurationError: If base URL or token is missing.
        """
        self.base_url = (base_url or os.getenv("FLEET_URL", "")).rstrip("/")
        self.api_token = api_token or os.getenv("FLEET_API_TOKEN", "")
        self.timeout_seconds = timeout_seconds

        missing = []
        if not self.base_url:
            missing.append("FLEET_URL")
        if not self.api_token:
            missing.append("FLEET_API_TOKEN")
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                missing_keys=missing,
            )

        self._session: Optional[aiohttp.ClientSession] = None

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "FleetClient":
        """Enter async context: create the HTTP session."""
        self._session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=10, limit_per_host=10),
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds, connect=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context: close the HTTP session."""
        await self.close()

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    # ----------------------------------------
    # Low-Level Request Methods
    # ----------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API endpoint path (e.g., "/api/latest/fleet/vpp")
            params: Query parameters
            json_body: JSON request body (for POST)

        Returns:
            Parsed JSON response as dict (empty dict for empty bodies)

        Raises:
            APIError: If response status is not 2xx
            RuntimeError: If called outside of async context manager
            ConnectionError: If connection to server fails
            TimeoutError: If request times out
        """
        if not self._session:
            raise RuntimeError(
                "FleetClient must be used as async context manager: "
                "async with FleetClient(...) as client:"
            )

        url = f"{self.base_url}{endpoint}"

        try:
            async with self._session.request(
                method=method,
                url=url,
                headers=self._headers(),
                params=params,
                json=json_body,
            ) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    raise self._create_api_error(
                        status=response.status,
                        method=method,
                        endpoint=endpoint,
                        response_body=error_text,
                        retry_after=response.headers.get("Retry-After"),
                    )

                return self._decode_body(await response.text(), method, endpoint)

        except aiohttp.ClientConnectionError as e:
            raise ConnectionError(
                f"Failed to connect to {self.base_url}",
                host=self.base_url,
                cause=e,
            )

        except asyncio.TimeoutError as e:
            raise TimeoutError(
                f"Request to {endpoint} timed out",
                timeout_seconds=self.timeout_seconds,
                cause=e,
            )

        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Network error during {method} {endpoint}: {e}",
                cause=e,
            )

    @staticmethod
    def _decode_body(body: str, method: str, endpoint: str) -> dict[str, Any]:
        """Decode a 2xx body.

        Success does not depend on the payload: empty, non-JSON and
        non-object bodies all decode to ``{}``.
        """
        if not body or not body.strip():
            return {}
        try:
            data = json.loads(body)
        except ValueError:
            logger.debug(f"{method} {endpoint} returned a non-JSON body, ignoring it")
            return {}
        if not isinstance(data, dict):
            logger.debug(f"{method} {endpoint} returned {type(data).__name__}, expected an object")
            return {}
        return data

    def _create_api_error(
        self,
        status: int,
        method: str,
        endpoint: str,
        response_body: str,
        retry_after: Optional[str] = None,
    ) -> APIError:
        """Create appropriate APIError subclass based on status code."""
        reason = extract_error_reason(response_body)
        common = {
            "endpoint": endpoint,
            "method": method,
            "response_body": response_body,
            "reason": reason,
        }

        if status in (401, 403):
            return AuthenticationError(
                reason or "API token expired or invalid",
                details={"endpoint": endpoint, "status_code": status},
            )

        if status == 404:
            return NotFoundError(reason or f"{endpoint} not found", **common)

        if status == 429:
            try:
                wait = int(retry_after) if retry_after else None
            except ValueError:
                wait = None
            return RateLimitError(
                f"Rate limit exceeded for {endpoint}",
                retry_after=wait,
                **common,
            )

        if status in (400, 409, 422):
            return ValidationError(
                reason or f"Validation failed for {method} {endpoint}",
                status_code=status,
                **common,
            )

        if status >= 500:
            return ServerError(
                f"Server error ({status}) for {method} {endpoint}",
                status_code=status,
                **common,
            )

        return APIError(
            reason or f"{method} {endpoint} failed",
            status_code=status,
            **common,
        )

    # ----------------------------------------
    # High-Level Request Methods
    # ----------------------------------------

    async def get(
        self,
        endpoint: str,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a GET request."""
        return await self._request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json_body: dict,
        params: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Make a POST request.

        Args:
            endpoint: API endpoint path
            json_body: Request body as dict (will be JSON-encoded)
            params: Query parameters

        Returns:
            Parsed JSON response
        """
        return await self._request("POST", endpoint, params=params, json_body=json_body)
