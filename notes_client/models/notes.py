from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NoteSummary(BaseModel):
    id: int
    title: str
    views: int = 0


class NoteSearchHit(BaseModel):
    id: int
    title: str


class Note(BaseModel):
    id: int
    title: str
    content: str = ""
    category_id: int | None = None
    category_path: str | None = None
    views: int = 0


class NoteWrite(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category_id: int | None = Field(None, serialization_alias="category")


class NoteViews(BaseModel):
    title: str
    views: int = 0
