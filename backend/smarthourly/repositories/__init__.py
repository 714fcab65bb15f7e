# Repository Layer — Data Access (Repository Pattern, GoF)
from smarthourly.repositories.base import BaseRepository
from smarthourly.repositories.production_entry_repository import ProductionEntryRepository
from smarthourly.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ProductionEntryRepository",
    "UserRepository",
]
