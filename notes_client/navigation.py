from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from notes_client.errors import NotFound
from notes_client.models import BreadcrumbEntry
from notes_client.tree import CategoryTreeCache

logger = logging.getLogger(__name__)


class Page(str, Enum):
    home = "home"
    library = "library"
    category = "category"
    note_view = "note_view"
    admin_dashboard = "admin_dashboard"


@dataclass(frozen=True, slots=True)
class ViewState:
    current_page: Page = Page.home
    current_category_id: int | None = None
    breadcrumb: tuple[BreadcrumbEntry, ...] = ()
    current_note_id: int | None = None
    editing_note_id: int | None = None


Listener = Callable[[ViewState], None]


class Navigator:
    """Owns the view state; reads the hierarchy from the tree cache only.

    Each transition replaces the state as a whole and then notifies the
    listeners, which is the re-render trigger for whatever draws the UI.
    """

    def __init__(self, tree_cache: CategoryTreeCache, state: ViewState | None = None) -> None:
        self._tree_cache = tree_cache
        self._state = state or ViewState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, state: ViewState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def navigate_home(self) -> None:
        self._set(ViewState(editing_note_id=self._state.editing_note_id))

    def reset(self) -> None:
        """Home with nothing open or being edited, for the end of a session."""
        self._set(ViewState())

    def navigate_to_library(self) -> None:
        self._set(
            ViewState(current_page=Page.library, editing_note_id=self._state.editing_note_id)
        )

    def navigate_to_category(self, category_id: int) -> None:
        breadcrumb = self._tree_cache.build_breadcrumb(category_id)
        if not breadcrumb:
            logger.warning("Category %s is not in the tree, showing the library.", category_id)
            self.navigate_to_library()
            raise NotFound(f"Category {category_id} not found.", status_code=None)
        self._set(
            replace(
                self._state,
                current_page=Page.category,
                current_category_id=category_id,
                breadcrumb=breadcrumb,
                current_note_id=None,
            )
        )

    def navigate_up(self) -> None:
        breadcrumb = self._state.breadcrumb
        if len(breadcrumb) > 1:
            self.navigate_to_category(breadcrumb[-2].id)
        else:
            self.navigate_to_library()

    def show_note(self, note_id: int) -> None:
        self._set(replace(self._state, current_page=Page.note_view, current_note_id=note_id))

    def note_back(self) -> None:
        self._go_to_level(self._surviving_level())

    def show_admin_dashboard(self) -> None:
        self._set(replace(self._state, current_page=Page.admin_dashboard, current_note_id=None))

    def begin_note_edit(self, note_id: int) -> None:
        self._set(replace(self._state, editing_note_id=note_id))

    def end_note_edit(self) -> None:
        if self._state.editing_note_id is not None:
            self._set(replace(self._state, editing_note_id=None))

    def render_level(self) -> None:
        """Show the current breadcrumb level, or the library at root."""
        self._go_to_level(self._surviving_level())

    def refresh_current(self) -> None:
        """Recompute references against a freshly fetched tree."""
        level = self._surviving_level()
        if self._state.current_page in (Page.category, Page.library):
            self._go_to_level(level)
            return
        self._set(
            replace(
                self._state,
                current_category_id=level,
                breadcrumb=self._tree_cache.build_breadcrumb(level),
            )
        )

    def after_category_deleted(self, category_id: int) -> None:
        trail = [entry.id for entry in self._state.breadcrumb]
        if category_id not in trail:
            self.refresh_current()
            return
        self._go_to_level(self._surviving_level(limit=trail.index(category_id)))

    def _surviving_level(self, limit: int | None = None) -> int | None:
        snapshot = self._tree_cache.snapshot
        for entry in reversed(self._state.breadcrumb[:limit]):
            if entry.id in snapshot:
                return entry.id
        return None

    def _go_to_level(self, category_id: int | None) -> None:
        if category_id is None:
            self.navigate_to_library()
        else:
            self.navigate_to_category(category_id)
