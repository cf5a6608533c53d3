"""uvicorn runner for the HTTP API."""

from __future__ import annotations

import logging

from filebrowser.config import Settings

logger = logging.getLogger(__name__)


def run_api_server(settings: Settings) -> None:
    """Start the HTTP API server and block until it stops."""
    import uvicorn

    from filebrowser.api.app import create_app

    app = create_app(settings)
    logger.info(f"[SERVER] listening on http://{settings.host}:{settings.port} (root: {settings.root_dir})")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.request_timeout,
        log_config=None,
    )
