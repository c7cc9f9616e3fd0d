from __future__ import annotations

import logging

from pydantic import TypeAdapter

from notes_client.errors import MalformedResponse
from notes_client.gateway import ApiGateway
from notes_client.models import Note, NoteSearchHit, NoteSummary, NoteWrite
from notes_client.utils import parse_payload

logger = logging.getLogger(__name__)

_summaries_adapter = TypeAdapter(list[NoteSummary])
_hits_adapter = TypeAdapter(list[NoteSearchHit])
_note_adapter = TypeAdapter(Note)


class NotesDataAccess:
    def __init__(self, gateway: ApiGateway) -> None:
        self._gateway = gateway

    async def list_notes_by_category(self, category_id: int) -> list[NoteSummary]:
        payload = await self._gateway.call("/api/notes", params={"category": category_id})
        return parse_payload(_summaries_adapter, payload or [], what="note list")

    async def search_notes(self, query: str) -> list[NoteSearchHit]:
        payload = await self._gateway.call("/api/notes", params={"search": query})
        return parse_payload(_hits_adapter, payload or [], what="note search")

    async def get_note(self, note_id: int) -> Note:
        payload = await self._gateway.call(f"/api/note/{note_id}")
        return parse_payload(_note_adapter, payload, what="note")

    async def create_note(self, note: NoteWrite) -> Note | None:
        payload = await self._gateway.call(
            "/api/note", "POST", note.model_dump(by_alias=True)
        )
        return _to_note(payload)

    async def update_note(self, note_id: int, note: NoteWrite) -> Note | None:
        payload = await self._gateway.call(
            f"/api/note/{note_id}", "PUT", note.model_dump(by_alias=True)
        )
        return _to_note(payload)

    async def delete_note(self, note_id: int) -> None:
        await self._gateway.call(f"/api/note/{note_id}", "DELETE")


def _to_note(payload: object) -> Note | None:
    if not payload:
        return None
    try:
        return parse_payload(_note_adapter, payload, what="note")
    except MalformedResponse:
        logger.warning("Ignoring unexpected note mutation response: %r", payload)
        return None
