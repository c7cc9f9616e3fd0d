from __future__ import annotations

import logging
from typing import Iterator, Protocol, Sequence

from notes_client.errors import MalformedResponse, NotesClientError
from notes_client.models import BreadcrumbEntry, CategoryNode, FlatCategoryEntry

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "::"


class CategoryTreeSource(Protocol):
    async def get_tree(self) -> list[CategoryNode]: ...


def _walk(
    nodes: Sequence[CategoryNode], parent_id: int | None, prefix: str, separator: str
) -> Iterator[tuple[CategoryNode, int | None, str]]:
    """Pre-order walk yielding ``(node, parent_id, path)`` without recursion."""
    stack = [(node, parent_id, prefix) for node in reversed(nodes)]
    while stack:
        node, node_parent_id, node_prefix = stack.pop()
        path = f"{node_prefix}{separator}{node.name}" if node_prefix else node.name
        yield node, node_parent_id, path
        stack.extend((child, node.id, path) for child in reversed(node.children))


def flatten_tree(
    nodes: Sequence[CategoryNode], separator: str = DEFAULT_SEPARATOR
) -> list[FlatCategoryEntry]:
    return [
        FlatCategoryEntry(id=node.id, name=node.name, parent_id=parent_id, path=path)
        for node, parent_id, path in _walk(nodes, None, "", separator)
    ]


class CategoryTree:
    """Immutable, indexed snapshot of the nested category tree.

    Parent links come from the nesting itself; a ``parent_id`` field that
    disagrees with the node's position is overridden. Ids must be unique.
    """

    def __init__(
        self, nodes: Sequence[CategoryNode] = (), separator: str = DEFAULT_SEPARATOR
    ) -> None:
        self._roots = tuple(nodes)
        self._separator = separator
        self._nodes: dict[int, CategoryNode] = {}
        self._parents: dict[int, int | None] = {}
        self._paths: dict[int, str] = {}
        entries = []
        for node, parent_id, path in _walk(self._roots, None, "", separator):
            if node.id in self._nodes:
                raise MalformedResponse(f"Duplicate category id {node.id} in tree.")
            if node.parent_id is not None and node.parent_id != parent_id:
                logger.warning(
                    "Category %s reports parent %s but is nested under %s.",
                    node.id,
                    node.parent_id,
                    parent_id,
                )
            self._nodes[node.id] = node
            self._parents[node.id] = parent_id
            self._paths[node.id] = path
            entries.append(
                FlatCategoryEntry(id=node.id, name=node.name, parent_id=parent_id, path=path)
            )
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._nodes

    @property
    def roots(self) -> tuple[CategoryNode, ...]:
        return self._roots

    @property
    def separator(self) -> str:
        return self._separator

    def flatten(self) -> list[FlatCategoryEntry]:
        return list(self._entries)

    def find_by_id(self, category_id: int | None) -> CategoryNode | None:
        if category_id is None:
            return None
        return self._nodes.get(category_id)

    def find_by_name(self, name: str) -> CategoryNode | None:
        target = name.strip().lower()
        for entry in self._entries:
            if entry.name.lower() == target:
                return self._nodes[entry.id]
        return None

    def parent_of(self, category_id: int) -> int | None:
        return self._parents.get(category_id)

    def path_of(self, category_id: int | None) -> str | None:
        if category_id is None:
            return None
        return self._paths.get(category_id)

    def build_breadcrumb(self, category_id: int | None) -> tuple[BreadcrumbEntry, ...]:
        if category_id is None or category_id not in self._nodes:
            return ()
        trail = []
        current: int | None = category_id
        while current is not None:
            trail.append(BreadcrumbEntry(id=current, name=self._nodes[current].name))
            current = self._parents[current]
        trail.reverse()
        return tuple(trail)

    def children_of(self, category_id: int | None) -> tuple[CategoryNode, ...]:
        if category_id is None:
            return self._roots
        node = self._nodes.get(category_id)
        if node is None:
            return ()
        return tuple(node.children)

    def descendants(self, category_id: int | None) -> list[FlatCategoryEntry]:
        """Entries below ``category_id`` in pre-order; every entry for ``None``."""
        if category_id is None:
            return self.flatten()
        node = self._nodes.get(category_id)
        if node is None:
            return []
        return [
            FlatCategoryEntry(id=child.id, name=child.name, parent_id=parent_id, path=path)
            for child, parent_id, path in _walk(
                node.children, node.id, self._paths[node.id], self._separator
            )
        ]

    def is_descendant(self, category_id: int, ancestor_id: int) -> bool:
        current = self._parents.get(category_id)
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._parents.get(current)
        return False

    def parent_choices(self, exclude_id: int | None = None) -> list[FlatCategoryEntry]:
        """Valid parents for a category: everything but itself and its subtree."""
        if exclude_id is None or exclude_id not in self._nodes:
            return self.flatten()
        return [
            entry
            for entry in self._entries
            if entry.id != exclude_id and not self.is_descendant(entry.id, exclude_id)
        ]


class CategoryTreeCache:
    """Owns the authoritative tree snapshot and replaces it only wholesale."""

    def __init__(
        self, categories_store: CategoryTreeSource, *, separator: str = DEFAULT_SEPARATOR
    ) -> None:
        self._categories_store = categories_store
        self._separator = separator
        self._snapshot = CategoryTree((), separator)
        self._has_snapshot = False
        self._last_requested = 0
        self._last_applied = 0

    @property
    def snapshot(self) -> CategoryTree:
        return self._snapshot

    @property
    def has_snapshot(self) -> bool:
        return self._has_snapshot

    async def fetch_tree(self) -> CategoryTree:
        self._last_requested += 1
        sequence = self._last_requested
        try:
            nodes = await self._categories_store.get_tree()
            snapshot = CategoryTree(nodes, self._separator)
        except NotesClientError as exc:
            logger.warning("Keeping previous category tree, refresh failed: %s", exc.detail)
            raise
        if sequence < self._last_applied:
            logger.warning(
                "Discarding stale category tree response %d (have %d).",
                sequence,
                self._last_applied,
            )
            return self._snapshot
        self._snapshot = snapshot
        self._last_applied = sequence
        self._has_snapshot = True
        logger.info("Category tree refreshed: %d categories.", len(snapshot))
        return snapshot

    def flatten(self) -> list[FlatCategoryEntry]:
        return self._snapshot.flatten()

    def find_by_id(self, category_id: int | None) -> CategoryNode | None:
        return self._snapshot.find_by_id(category_id)

    def build_breadcrumb(self, category_id: int | None) -> tuple[BreadcrumbEntry, ...]:
        return self._snapshot.build_breadcrumb(category_id)

    def children_of(self, category_id: int | None) -> tuple[CategoryNode, ...]:
        return self._snapshot.children_of(category_id)

    def descendants(self, category_id: int | None) -> list[FlatCategoryEntry]:
        return self._snapshot.descendants(category_id)
