from .admin import AdminDashboard, AdminStats
from .categories import (
    BreadcrumbEntry,
    Category,
    CategoryCreate,
    CategoryNode,
    CategoryUpdate,
    FlatCategoryEntry,
)
from .notes import Note, NoteSearchHit, NoteSummary, NoteViews, NoteWrite
from .users import LoginRequest, LoginResult, Role, Session, User
