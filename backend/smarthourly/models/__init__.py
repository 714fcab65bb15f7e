from smarthourly.models.user import User, UserRole, Profile
from smarthourly.models.production_entry import ProductionEntry

__all__ = [
    "User",
    "UserRole",
    "Profile",
    "ProductionEntry",
]
