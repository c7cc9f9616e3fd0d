from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel

from .notes import NoteViews


class AdminStats(BaseModel):
    total_notes: int = 0
    total_views: int = 0
    last_update: datetime | None = None


@dataclass(frozen=True, slots=True)
class AdminDashboard:
    stats: AdminStats | None
    top_notes: list[NoteViews]
    top_notes_failed: bool = False
