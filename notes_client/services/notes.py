from __future__ import annotations

from notes_client.data_access import NotesDataAccess
from notes_client.models import Note, NoteSummary, NoteWrite
from notes_client.navigation import Navigator, Page
from notes_client.utils import validate_input


class NotesService:
    def __init__(self, notes_store: NotesDataAccess, navigator: Navigator) -> None:
        self._notes_store = notes_store
        self._navigator = navigator

    async def list_notes(self, category_id: int) -> list[NoteSummary]:
        return await self._notes_store.list_notes_by_category(category_id)

    async def get_note(self, note_id: int) -> Note:
        return await self._notes_store.get_note(note_id)

    async def open_note(self, note_id: int) -> Note:
        note = await self._notes_store.get_note(note_id)
        self._navigator.show_note(note_id)
        return note

    async def create_note(
        self, title: str, content: str, category_id: int | None = None
    ) -> Note | None:
        payload = validate_input(
            NoteWrite, title=title, content=content, category_id=category_id
        )
        note = await self._notes_store.create_note(payload)
        self._refresh_view()
        return note

    async def update_note(
        self, note_id: int, title: str, content: str, category_id: int | None = None
    ) -> Note | None:
        payload = validate_input(
            NoteWrite, title=title, content=content, category_id=category_id
        )
        note = await self._notes_store.update_note(note_id, payload)
        self._refresh_view()
        return note

    async def begin_edit(self, note_id: int) -> Note:
        note = await self._notes_store.get_note(note_id)
        self._navigator.begin_note_edit(note_id)
        return note

    def cancel_edit(self) -> None:
        self._navigator.end_note_edit()

    async def submit(
        self, title: str, content: str, category_id: int | None = None
    ) -> Note | None:
        """Save the note form: update the note being edited, else create."""
        editing_note_id = self._navigator.state.editing_note_id
        if editing_note_id is None:
            return await self.create_note(title, content, category_id)
        note = await self.update_note(editing_note_id, title, content, category_id)
        self._navigator.end_note_edit()
        return note

    async def delete_note(self, note_id: int) -> None:
        await self._notes_store.delete_note(note_id)
        state = self._navigator.state
        if state.editing_note_id == note_id:
            self._navigator.end_note_edit()
        if state.current_page is Page.note_view and state.current_note_id == note_id:
            self._navigator.note_back()
        else:
            self._refresh_view()

    def _refresh_view(self) -> None:
        page = self._navigator.state.current_page
        if page is Page.note_view:
            self._navigator.refresh_current()
        elif page is Page.category:
            self._navigator.render_level()
        else:
            self._navigator.navigate_to_library()
