"""User entity package."""

from .entity import User, UserRole
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserRole", "UserRepository", "UserTable"]
