from __future__ import annotations

from pydantic import TypeAdapter

from notes_client.errors import ApiError, LoginFailed, MalformedResponse
from notes_client.gateway import ApiGateway
from notes_client.models import LoginRequest, LoginResult
from notes_client.utils import parse_payload

_login_adapter = TypeAdapter(LoginResult)


class AuthDataAccess:
    def __init__(self, gateway: ApiGateway) -> None:
        self._gateway = gateway

    async def login(self, credentials: LoginRequest) -> LoginResult:
        try:
            payload = await self._gateway.call(
                "/api/login", "POST", credentials.model_dump(), auth=False
            )
        except ApiError as exc:
            if exc.status_code in (400, 401, 403):
                raise LoginFailed(exc.detail) from exc
            raise
        if not isinstance(payload, dict) or not payload.get("token"):
            message = payload.get("message") if isinstance(payload, dict) else None
            raise LoginFailed(message or "Login failed.")
        try:
            return parse_payload(_login_adapter, payload, what="login")
        except MalformedResponse as exc:
            raise LoginFailed(exc.detail) from exc
