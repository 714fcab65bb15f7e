# Routers package — Thin Controllers (SRP / DIP)
from smarthourly.routers import (
    auth,
    shifts,
    production_entries,
    review,
    reports,
    admin,
    factory,
)

__all__ = [
    "auth",
    "shifts",
    "production_entries",
    "review",
    "reports",
    "admin",
    "factory",
]
