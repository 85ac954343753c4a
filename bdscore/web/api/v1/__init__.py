"""API v1."""

from bdscore.web.api.v1.router import router

__all__ = ["router"]
