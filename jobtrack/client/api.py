"""
JobTrack client - HTTP access to the JobTrack API.

Thin async wrapper around httpx: attaches the stored bearer token, turns
error responses into ApiError, and drops the token when the server says
it is no longer valid.
"""
from typing import Any, Dict, Optional
import logging

import httpx

from .errors import ApiError, UNEXPECTED_RESPONSE_MESSAGE
from .tokens import TokenStorage

logger = logging.getLogger("jobtrack.client")


class ApiClient:
    """
    Async client for the JobTrack REST API.

    Usage:
        async with ApiClient(base_url, TokenStorage(path)) as api:
            data = await api.list_jobs()
    """

    def __init__(
        self,
        base_url: str,
        tokens: TokenStorage,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.tokens = tokens
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        if self.tokens.is_valid():
            return {"Authorization": f"Bearer {self.tokens.get()}"}
        return {}

    async def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body (None when empty).

        Raises:
            ApiError: for non-2xx responses and non-JSON bodies, or status 0
                on network failure
        """
        headers = self._auth_headers()
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(0)

        if response.status_code >= 400:
            if response.status_code in (401, 403) and headers:
                # The server rejected our token: forget it so the user logs in again
                self.tokens.remove()
            body = self._decode(response)
            raise ApiError(response.status_code, body.get("msg") if isinstance(body, dict) else None)

        if not response.content:
            return None
        body = self._decode(response)
        if body is None:
            logger.warning(f"{method} {path} returned a non-JSON body")
            raise ApiError(response.status_code, UNEXPECTED_RESPONSE_MESSAGE)
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """The JSON body, or None when it is empty or not JSON (e.g. a proxy error page)."""
        try:
            return response.json()
        except ValueError:
            return None

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return await self.request("POST", "/auth/register", json={
            "name": name, "email": email, "password": password,
        })

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self.request("POST", "/auth/login", json={"email": email, "password": password})

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    async def list_jobs(self, status: Optional[str] = None, search: Optional[str] = None,
                        sort: Optional[str] = None) -> Dict[str, Any]:
        params = {k: v for k, v in {"status": status, "search": search, "sort": sort}.items() if v}
        return await self.request("GET", "/jobs", params=params)

    async def job_stats(self) -> Dict[str, Any]:
        return await self.request("GET", "/jobs/stats")

    async def get_job(self, job_id) -> Dict[str, Any]:
        return await self.request("GET", f"/jobs/{job_id}")

    async def create_job(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", "/jobs", json=data)

    async def update_job(self, job_id, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("PATCH", f"/jobs/{job_id}", json=data)

    async def delete_job(self, job_id) -> None:
        await self.request("DELETE", f"/jobs/{job_id}")
