"""REST API for distilqa (install with the ``api`` extra)."""

from .app import create_app

__all__ = ["create_app"]
