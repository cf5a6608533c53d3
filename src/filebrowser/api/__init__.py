"""HTTP API around the file tree service."""

from filebrowser.api.app import create_app

__all__ = ["create_app"]
