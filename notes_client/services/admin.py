from __future__ import annotations

import asyncio
import logging

from notes_client.data_access import AdminDataAccess
from notes_client.errors import ApiError, PermissionDenied, Unauthorized
from notes_client.models import AdminDashboard, AdminStats, NoteViews
from notes_client.navigation import Navigator
from notes_client.session import SessionStore

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        admin_store: AdminDataAccess,
        session_store: SessionStore,
        navigator: Navigator,
    ) -> None:
        self._admin_store = admin_store
        self._session_store = session_store
        self._navigator = navigator

    def _require_admin(self) -> None:
        session = self._session_store.current
        if session is None:
            raise PermissionDenied("Login required.")
        if not session.is_admin:
            raise PermissionDenied("Admin only.")

    async def open_dashboard(self) -> AdminDashboard:
        """Switch to the admin page and load both panels.

        Each panel fails on its own: a failed stats load leaves ``stats`` as
        ``None`` and a failed top-notes load sets ``top_notes_failed``.
        Only an expired session aborts the whole dashboard.
        """
        self._require_admin()
        self._navigator.show_admin_dashboard()
        stats, top_notes = await asyncio.gather(self._load_stats(), self._load_top_notes())
        return AdminDashboard(
            stats=stats,
            top_notes=top_notes if top_notes is not None else [],
            top_notes_failed=top_notes is None,
        )

    async def get_stats(self) -> AdminStats:
        self._require_admin()
        return await self._admin_store.get_stats()

    async def get_top_notes(self) -> list[NoteViews]:
        self._require_admin()
        return await self._admin_store.list_top_notes()

    async def _load_stats(self) -> AdminStats | None:
        try:
            return await self._admin_store.get_stats()
        except Unauthorized:
            raise
        except ApiError as exc:
            logger.warning("Failed to load admin stats: %s", exc.detail)
            return None

    async def _load_top_notes(self) -> list[NoteViews] | None:
        try:
            return await self._admin_store.list_top_notes()
        except Unauthorized:
            raise
        except ApiError as exc:
            logger.warning("Failed to load top notes: %s", exc.detail)
            return None
