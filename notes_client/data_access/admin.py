from __future__ import annotations

import logging

from pydantic import TypeAdapter

from notes_client.errors import ApiError
from notes_client.gateway import ApiGateway
from notes_client.models import AdminStats, NoteViews
from notes_client.utils import parse_payload

logger = logging.getLogger(__name__)

_stats_adapter = TypeAdapter(AdminStats)
_top_notes_adapter = TypeAdapter(list[NoteViews])

UNSUPPORTED_STATUSES = frozenset({404, 405, 501})


class AdminDataAccess:
    def __init__(self, gateway: ApiGateway) -> None:
        self._gateway = gateway

    async def get_stats(self) -> AdminStats:
        payload = await self._gateway.call("/api/admin_stats")
        return parse_payload(_stats_adapter, payload or {}, what="admin stats")

    async def list_top_notes(self) -> list[NoteViews]:
        try:
            payload = await self._gateway.call("/api/note_views")
        except ApiError as exc:
            if exc.status_code not in UNSUPPORTED_STATUSES:
                raise
            logger.warning("Top notes are not available on this backend (HTTP %s).", exc.status_code)
            return []
        return parse_payload(_top_notes_adapter, payload or [], what="top notes")
