"""
HTTP client for the session replay API.

All endpoints return an envelope ``{"success": bool, "data": ..., "message": str}``.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError as ModelValidationError

from .errors import FetchError
from .models import SessionListing, SessionRecord

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0


def unwrap_envelope(status: int, payload: Any) -> Any:
    """Return the ``data`` of an API response or raise FetchError."""
    message = payload.get("message") if isinstance(payload, dict) else None
    if status != 200:
        raise FetchError(f"API Error: {status} - {message or 'Unknown error'}", status=status)
    if not isinstance(payload, dict) or not payload.get("success") or payload.get("data") is None:
        raise FetchError(message or "Invalid response format", status=status)
    return payload["data"]


def replay_params(
    include_cache: bool = False,
    include_feedback: bool = False,
    include_policy_intervention: bool = False,
) -> Dict[str, str]:
    params = {}
    if include_cache:
        params["includeCache"] = "true"
    if include_feedback:
        params["includeFeedback"] = "true"
    if include_policy_intervention:
        params["includeGallm"] = "true"
    return params


class SessionClient:
    """Fetches recorded sessions from the cost API."""

    def __init__(self, base_url: str, api_key: str, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=self._headers()) as session:
                async with session.get(url, params=params or None) as resp:
                    try:
                        payload = await resp.json(content_type=None)
                    except ValueError:
                        payload = None
                    return unwrap_envelope(resp.status, payload)
        except aiohttp.ClientConnectorError as e:
            logger.debug("Connection to %s failed: %s", url, e)
            raise FetchError("No response received from API")
        except aiohttp.ClientError as e:
            raise FetchError(f"Request failed: {e}")
        except asyncio.TimeoutError:
            raise FetchError(f"Request timed out after {self.timeout:g}s")

    async def fetch_session(
        self,
        session_id: str,
        include_cache: bool = False,
        include_feedback: bool = False,
        include_policy_intervention: bool = False,
    ) -> SessionRecord:
        data = await self._get(
            f"/api/session/replay/{session_id}",
            replay_params(include_cache, include_feedback, include_policy_intervention),
        )
        return parse_session(data)

    async def fetch_workflow_sessions(self, workflow_id: str) -> List[SessionListing]:
        data = await self._get("/api/session/replay/workflow", {"workflowId": workflow_id})
        return parse_listings(data)

    async def fetch_recent_sessions(self, count: int = 10) -> List[SessionListing]:
        data = await self._get("/api/session/replay/recent", {"count": str(count)})
        return parse_listings(data)


def parse_session(data: Any) -> SessionRecord:
    try:
        return SessionRecord.model_validate(data)
    except ModelValidationError as e:
        raise FetchError(f"Invalid session record: {e.error_count()} validation error(s)")


def parse_listings(data: Any) -> List[SessionListing]:
    if not isinstance(data, list):
        raise FetchError("Invalid response format")
    try:
        return [SessionListing.model_validate(item) for item in data]
    except ModelValidationError as e:
        raise FetchError(f"Invalid session list: {e.error_count()} validation error(s)")
