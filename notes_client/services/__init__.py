from .admin import AdminService
from .auth import AuthService
from .categories import CategoriesService, CategoryCard
from .notes import NotesService
from .search import NoteSearch
