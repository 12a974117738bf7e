"""Route group exports."""

from . import auth, dashboard, health, locations

__all__ = ["auth", "dashboard", "health", "locations"]
