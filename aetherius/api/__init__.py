"""HTTP API package."""

from aetherius.api.app import create_app

__all__ = ["create_app"]
