from .admin import AdminDataAccess
from .auth import AuthDataAccess
from .categories import CategoriesDataAccess
from .notes import NotesDataAccess
