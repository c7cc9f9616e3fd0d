from __future__ import annotations

import logging
from typing import Callable, MutableMapping

import httpx

from notes_client.config import Settings, settings_from_env
from notes_client.data_access import (
    AdminDataAccess,
    AuthDataAccess,
    CategoriesDataAccess,
    NotesDataAccess,
)
from notes_client.errors import NotesClientError
from notes_client.gateway import ApiGateway
from notes_client.navigation import Navigator
from notes_client.services import (
    AdminService,
    AuthService,
    CategoriesService,
    NotesService,
    NoteSearch,
)
from notes_client.session import SessionStore
from notes_client.tree import CategoryTreeCache

logger = logging.getLogger(__name__)


class NotesApp:
    """Application context: every component, wired once, passed explicitly."""

    def __init__(
        self,
        settings: Settings,
        *,
        storage: MutableMapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        on_reauth_required: Callable[[], None] | None = None,
    ) -> None:
        self.settings = settings
        self.session_store = SessionStore(storage)
        self.gateway = ApiGateway(
            settings.api_base_url,
            self.session_store,
            timeout=settings.request_timeout,
            transport=transport,
            on_reauth_required=self._reauth_required,
        )
        self._on_reauth_required = on_reauth_required

        categories_store = CategoriesDataAccess(self.gateway)
        notes_store = NotesDataAccess(self.gateway)

        self.tree_cache = CategoryTreeCache(
            categories_store, separator=settings.path_separator
        )
        self.navigator = Navigator(self.tree_cache)
        self.auth = AuthService(AuthDataAccess(self.gateway), self.session_store, self.navigator)
        self.categories = CategoriesService(
            categories_store, notes_store, self.tree_cache, self.navigator
        )
        self.notes = NotesService(notes_store, self.navigator)
        self.admin = AdminService(AdminDataAccess(self.gateway), self.session_store, self.navigator)
        self.search = NoteSearch(
            notes_store,
            delay=settings.search_debounce,
            min_length=settings.search_min_length,
            max_results=settings.search_max_suggestions,
        )

    async def __aenter__(self) -> NotesApp:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _reauth_required(self) -> None:
        self.navigator.reset()
        if self._on_reauth_required is not None:
            self._on_reauth_required()

    async def start(self) -> None:
        session = self.auth.restore()
        if session is not None:
            logger.info("Restored session for %s.", session.user.email)
        try:
            await self.tree_cache.fetch_tree()
        except NotesClientError as exc:
            logger.warning("Starting without categories: %s", exc.detail)
        self.navigator.navigate_home()

    async def aclose(self) -> None:
        await self.search.aclose()
        await self.gateway.aclose()


def create_app(
    settings: Settings | None = None,
    *,
    storage: MutableMapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    on_reauth_required: Callable[[], None] | None = None,
) -> NotesApp:
    return NotesApp(
        settings or settings_from_env(),
        storage=storage,
        transport=transport,
        on_reauth_required=on_reauth_required,
    )
