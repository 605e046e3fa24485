"""API routers."""

from trainforge.routers import health, modules

__all__ = ["health", "modules"]
