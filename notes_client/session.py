from __future__ import annotations

import logging
from typing import MutableMapping

from pydantic import ValidationError as PayloadValidationError

from notes_client.models import LoginResult, Session, User

logger = logging.getLogger(__name__)

TOKEN_KEY = "jwt"
USER_KEY = "user"


class SessionStore:
    """Current credential and user profile, kept in tab-scoped storage.

    ``storage`` is any string mapping; the session survives as long as the
    mapping does and is never written anywhere else.
    """

    def __init__(self, storage: MutableMapping[str, str] | None = None) -> None:
        self._storage: MutableMapping[str, str] = {} if storage is None else storage

    @property
    def current(self) -> Session | None:
        token = self._storage.get(TOKEN_KEY)
        user_json = self._storage.get(USER_KEY)
        if not token or not user_json:
            return None
        try:
            user = User.model_validate_json(user_json)
        except PayloadValidationError:
            logger.warning("Dropping unreadable stored session.")
            self._drop()
            return None
        return Session(token=token, user=user)

    @property
    def token(self) -> str | None:
        session = self.current
        return session.token if session is not None else None

    @property
    def user(self) -> User | None:
        session = self.current
        return session.user if session is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    @property
    def is_admin(self) -> bool:
        session = self.current
        return session is not None and session.is_admin

    def save(self, login_result: LoginResult) -> Session:
        self._storage[TOKEN_KEY] = login_result.token
        self._storage[USER_KEY] = login_result.user.model_dump_json()
        return Session(token=login_result.token, user=login_result.user)

    def clear(self) -> None:
        self._drop()

    def _drop(self) -> None:
        self._storage.pop(TOKEN_KEY, None)
        self._storage.pop(USER_KEY, None)
