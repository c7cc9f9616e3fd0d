from __future__ import annotations


class NotesClientError(Exception):
    """Base class for every failure surfaced to the caller of an action."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(NotesClientError):
    """Rejected locally, before any request is sent."""


class PermissionDenied(NotesClientError):
    pass


class LoginFailed(NotesClientError):
    pass


class ApiError(NotesClientError):
    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.status_code = status_code


class Unauthorized(ApiError):
    def __init__(self, detail: str = "Session expired or unauthorized.") -> None:
        super().__init__(detail, status_code=401)


class NotFound(ApiError):
    def __init__(self, detail: str, status_code: int | None = 404) -> None:
        super().__init__(detail, status_code=status_code)


class NetworkOrServerError(ApiError):
    pass


class MalformedResponse(NetworkOrServerError):
    pass
