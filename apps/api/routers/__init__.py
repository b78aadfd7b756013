"""API routers."""

from . import auth, health, investments, logs, products

__all__ = ["auth", "health", "investments", "logs", "products"]
