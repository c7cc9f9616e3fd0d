from __future__ import annotations

import logging

from notes_client.data_access import AuthDataAccess
from notes_client.models import LoginRequest, Session, User
from notes_client.navigation import Navigator
from notes_client.session import SessionStore
from notes_client.utils import validate_input

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        auth_store: AuthDataAccess,
        session_store: SessionStore,
        navigator: Navigator,
    ) -> None:
        self._auth_store = auth_store
        self._session_store = session_store
        self._navigator = navigator

    @property
    def current_user(self) -> User | None:
        return self._session_store.user

    def restore(self) -> Session | None:
        return self._session_store.current

    async def login(self, email: str, password: str) -> Session:
        credentials = validate_input(LoginRequest, email=email.strip(), password=password)
        result = await self._auth_store.login(credentials)
        session = self._session_store.save(result)
        logger.info("Logged in as %s (%s).", session.user.email, session.user.role.value)
        if session.is_admin:
            self._navigator.show_admin_dashboard()
        else:
            self._navigator.navigate_home()
        return session

    def logout(self) -> None:
        self._session_store.clear()
        logger.info("Logged out.")
        self._navigator.reset()
