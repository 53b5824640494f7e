# Import all models so Base.metadata sees every table
from jotter.backend.models.base import Base
from jotter.backend.models.bookmark import Bookmark
from jotter.backend.models.category import Category
from jotter.backend.models.entry import Entry
from jotter.backend.models.user import User

__all__ = [
    "Base",
    "Bookmark",
    "Category",
    "Entry",
    "User",
]
