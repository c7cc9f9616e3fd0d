from __future__ import annotations

import logging

from pydantic import TypeAdapter

from notes_client.errors import MalformedResponse
from notes_client.gateway import ApiGateway
from notes_client.models import Category, CategoryNode
from notes_client.utils import parse_payload

logger = logging.getLogger(__name__)

_tree_adapter = TypeAdapter(list[CategoryNode])
_flat_adapter = TypeAdapter(list[Category])
_category_adapter = TypeAdapter(Category)


class CategoriesDataAccess:
    def __init__(self, gateway: ApiGateway) -> None:
        self._gateway = gateway

    async def get_tree(self) -> list[CategoryNode]:
        payload = await self._gateway.call("/api/categories/tree")
        return parse_payload(_tree_adapter, payload or [], what="category tree")

    async def list_flat(self) -> list[Category]:
        payload = await self._gateway.call("/api/categories/flat")
        return parse_payload(_flat_adapter, payload or [], what="category list")

    async def create_category(
        self,
        *,
        name: str,
        description: str | None,
        parent_id: int | None,
    ) -> Category | None:
        payload = await self._gateway.call(
            "/api/category",
            "POST",
            {"name": name, "description": description, "parent_id": parent_id},
        )
        return _to_category(payload)

    async def update_category(
        self, category_id: int, updates: dict[str, object]
    ) -> Category | None:
        payload = await self._gateway.call(f"/api/category/{category_id}", "PUT", updates)
        return _to_category(payload)

    async def delete_category(self, category_id: int) -> None:
        await self._gateway.call(f"/api/category/{category_id}", "DELETE")


def _to_category(payload: object) -> Category | None:
    # Mutation bodies are informational; the tree is refetched regardless.
    if not payload:
        return None
    try:
        return parse_payload(_category_adapter, payload, what="category")
    except MalformedResponse:
        logger.warning("Ignoring unexpected category mutation response: %r", payload)
        return None
