"""HTTP dashboard."""

from .dashboard import create_app, serve

__all__ = ["create_app", "serve"]
