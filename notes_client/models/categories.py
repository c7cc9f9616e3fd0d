from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class CategoryNode(BaseModel):
    id: int
    name: str
    description: str | None = None
    parent_id: int | None = None
    children: list[CategoryNode] = Field(default_factory=list)


class Category(BaseModel):
    id: int
    name: str
    description: str | None = None
    parent_id: int | None = None


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    parent_id: int | None = None


class CategoryUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = None
    parent_id: int | None = None


@dataclass(frozen=True, slots=True)
class FlatCategoryEntry:
    id: int
    name: str
    parent_id: int | None
    path: str


@dataclass(frozen=True, slots=True)
class BreadcrumbEntry:
    id: int
    name: str
