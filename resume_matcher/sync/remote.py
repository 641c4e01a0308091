"""Client side of the remote resume store.

The contract mirrors the ``/api/resume`` endpoint:

- ``fetch()`` returns the stored resume and the server's ``updatedAt``; an
  unauthenticated session (HTTP 401) is reported as "no remote copy".
- ``save(resume)`` upserts the resume and returns the server's ``updatedAt``.

Neither call raises for network or server failures; both return typed
results instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

import httpx

from resume_matcher.documents.models import Resume
from resume_matcher.documents.validation import DocumentValidationError, validate_resume
from resume_matcher.sync.storage import parse_timestamp

logger = logging.getLogger(__name__)

RESUME_ENDPOINT = "/api/resume"
SESSION_COOKIE_NAME = "session"


@dataclass
class RemoteSnapshot:
    """Result of reading the remote store."""

    resume: Resume | None = None
    updated_at: datetime | None = None
    error: str | None = None
    unauthorized: bool = False


@dataclass
class SaveResult:
    """Result of writing to the remote store."""

    success: bool
    updated_at: datetime | None = None
    error: str | None = None


class RemoteResumeStore(Protocol):
    async def fetch(self) -> RemoteSnapshot: ...

    async def save(self, resume: Resume) -> SaveResult: ...


class RemoteStoreError(Exception):
    """A remote store request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class HttpResumeStore:
    """Remote resume store reached over HTTP."""

    def __init__(
        self,
        base_url: str,
        session_cookie: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session_cookie = session_cookie
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            cookies = {SESSION_COOKIE_NAME: self.session_cookie} if self.session_cookie else None
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                cookies=cookies,
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, json: Any = None) -> dict[str, Any]:
        client = self._get_client()
        try:
            response = await client.request(method, RESUME_ENDPOINT, json=json)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"Request to remote store failed: {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json().get("error")
            except ValueError:
                detail = None
            raise RemoteStoreError(
                detail or f"Remote store returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteStoreError("Remote store returned invalid JSON") from e
        if not isinstance(body, dict):
            raise RemoteStoreError("Remote store returned an unexpected payload")
        return body

    async def fetch(self) -> RemoteSnapshot:
        try:
            body = await self._request("GET")
        except RemoteStoreError as e:
            if e.status_code == 401:
                return RemoteSnapshot(unauthorized=True)
            logger.error("Error loading resume from remote store: %s", e)
            return RemoteSnapshot(error=str(e))

        raw = body.get("resume")
        if not raw:
            return RemoteSnapshot()
        try:
            resume = validate_resume(raw)
        except DocumentValidationError as e:
            logger.warning("Discarding invalid resume from remote store: %s", e)
            return RemoteSnapshot()
        return RemoteSnapshot(resume=resume, updated_at=parse_timestamp(body.get("updatedAt")))

    async def save(self, resume: Resume) -> SaveResult:
        try:
            body = await self._request("POST", json={"resume": resume.to_dict()})
        except RemoteStoreError as e:
            logger.error("Error saving resume to remote store: %s", e)
            return SaveResult(success=False, error=str(e))

        if not body.get("success"):
            return SaveResult(success=False, error=body.get("error") or "Save was not acknowledged")
        return SaveResult(success=True, updated_at=parse_timestamp(body.get("updatedAt")))
