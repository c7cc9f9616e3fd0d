from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import httpx

from notes_client.errors import (
    MalformedResponse,
    NetworkOrServerError,
    NotFound,
    Unauthorized,
)
from notes_client.session import SessionStore

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"


class ApiGateway:
    """Single entry point for backend requests.

    Classifies every response into a parsed JSON body, ``None`` for 204, or
    one of the ``ApiError`` subclasses. A 401 on an authenticated call drops
    the session and asks for a new login. Calls that overlap in time share
    a single prompt; the next call made after they settle may prompt again.
    """

    def __init__(
        self,
        base_url: str,
        session_store: SessionStore,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        on_reauth_required: Callable[[], None] | None = None,
    ) -> None:
        self._session_store = session_store
        self._on_reauth_required = on_reauth_required
        self._in_flight = 0
        self._reauth_prompted = False
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> ApiGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, auth: bool) -> dict[str, str]:
        token = self._session_store.token if auth else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _handle_unauthorized(self) -> None:
        logger.warning("Backend rejected the session token, logging out.")
        self._session_store.clear()
        if self._reauth_prompted:
            logger.debug("Login prompt already raised for the calls in flight.")
            return
        self._reauth_prompted = True
        if self._on_reauth_required is not None:
            self._on_reauth_required()

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        *,
        params: Mapping[str, Any] | None = None,
        auth: bool = True,
    ) -> Any:
        self._in_flight += 1
        try:
            return await self._send(endpoint, method, body, params=params, auth=auth)
        finally:
            self._in_flight -= 1
            if not self._in_flight:
                self._reauth_prompted = False

    async def _send(
        self,
        endpoint: str,
        method: str,
        body: Any,
        *,
        params: Mapping[str, Any] | None,
        auth: bool,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                endpoint,
                json=body,
                params=params,
                headers=self._headers(auth),
            )
        except httpx.RequestError as exc:
            logger.error("%s %s failed: %s", method, endpoint, exc)
            raise NetworkOrServerError(f"Network error: {exc}") from exc

        logger.debug("%s %s -> %s", method, endpoint, response.status_code)

        if response.status_code == 401 and auth:
            self._handle_unauthorized()
            raise Unauthorized()
        if response.status_code == 404:
            raise NotFound(_error_message(response))
        if response.is_error:
            message = _error_message(response)
            logger.error("%s %s failed: %s", method, endpoint, message)
            raise NetworkOrServerError(message, status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(
                f"Expected JSON from {endpoint}.", status_code=response.status_code
            ) from exc
