# Server package

from .db import Database
from .models import User, UserCreate, UserUpdate, UserFilters
from .server import CrudServer, create_app

__all__ = [
    "Database",
    "User",
    "UserCreate",
    "UserUpdate",
    "UserFilters",
    "CrudServer",
    "create_app",
]
