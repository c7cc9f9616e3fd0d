from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from notes_client.data_access import CategoriesDataAccess, NotesDataAccess
from notes_client.errors import ApiError, NotFound, Unauthorized, ValidationError
from notes_client.models import Category, CategoryCreate, CategoryNode, CategoryUpdate, NoteSummary
from notes_client.navigation import Navigator
from notes_client.tree import CategoryTreeCache
from notes_client.utils import extract_updates, validate_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CategoryCard:
    category: CategoryNode
    notes: list[NoteSummary]
    notes_failed: bool = False


class CategoriesService:
    def __init__(
        self,
        categories_store: CategoriesDataAccess,
        notes_store: NotesDataAccess,
        tree_cache: CategoryTreeCache,
        navigator: Navigator,
    ) -> None:
        self._categories_store = categories_store
        self._notes_store = notes_store
        self._tree_cache = tree_cache
        self._navigator = navigator

    def _validate_parent_id(
        self, parent_id: int | None, category_id: int | None = None
    ) -> None:
        if parent_id is None:
            return

        if category_id is not None and parent_id == category_id:
            raise ValidationError("Category cannot be its own parent.")

        snapshot = self._tree_cache.snapshot
        if parent_id not in snapshot:
            raise ValidationError("Parent category not found.")

        if category_id is not None and snapshot.is_descendant(parent_id, category_id):
            raise ValidationError("Category cannot be moved under its own subcategory.")

    async def create_category(
        self,
        name: str,
        description: str | None = None,
        parent_id: int | None = None,
    ) -> Category | None:
        payload = validate_input(
            CategoryCreate, name=name, description=description, parent_id=parent_id
        )
        self._validate_parent_id(payload.parent_id)

        category = await self._categories_store.create_category(
            name=payload.name,
            description=payload.description,
            parent_id=payload.parent_id,
        )
        await self._tree_cache.fetch_tree()
        self._navigator.render_level()
        return category

    async def update_category(self, category_id: int, **fields: object) -> Category | None:
        unknown = set(fields) - set(CategoryUpdate.model_fields)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        updates = extract_updates(validate_input(CategoryUpdate, **fields))
        if category_id not in self._tree_cache.snapshot:
            raise NotFound("Category not found.", status_code=None)
        if "parent_id" in updates:
            self._validate_parent_id(updates["parent_id"], category_id=category_id)

        category = await self._categories_store.update_category(category_id, updates)
        await self._tree_cache.fetch_tree()
        self._navigator.render_level()
        return category

    async def delete_category(self, category_id: int) -> None:
        await self._categories_store.delete_category(category_id)
        await self._tree_cache.fetch_tree()
        self._navigator.after_category_deleted(category_id)

    async def get_category(self, category_id: int) -> Category:
        for category in await self._categories_store.list_flat():
            if category.id == category_id:
                return category
        raise NotFound("Category not found.", status_code=None)

    async def list_categories(self) -> list[Category]:
        return await self._categories_store.list_flat()

    async def list_children(self, category_id: int | None = None) -> list[CategoryCard]:
        """Children of a level with the notes filed directly under each."""
        if not self._tree_cache.has_snapshot:
            await self._tree_cache.fetch_tree()
        if category_id is not None and self._tree_cache.find_by_id(category_id) is None:
            raise NotFound("Category not found.", status_code=None)
        children = self._tree_cache.children_of(category_id)
        return list(
            await asyncio.gather(*(self._load_card(child) for child in children))
        )

    async def _load_card(self, category: CategoryNode) -> CategoryCard:
        try:
            notes = await self._notes_store.list_notes_by_category(category.id)
        except Unauthorized:
            raise
        except ApiError as exc:
            logger.warning("Failed to load notes for category %s: %s", category.id, exc.detail)
            return CategoryCard(category=category, notes=[], notes_failed=True)
        return CategoryCard(category=category, notes=notes)
