"""FastAPI server receiving Linear webhooks."""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from .common import setup_logging, log_server_message, log_error
from .config import RelayConfig
from .handler import SIGNATURE_HEADER, WebhookHandler
from .notes import NotesClient

logger = logging.getLogger(__name__)


def create_app(config: RelayConfig, notes_client: Optional[NotesClient] = None) -> FastAPI:
    """Build the relay application around an already loaded configuration."""
    app = FastAPI(title="Linear Reflect Relay", version="1.0.0")
    handler = WebhookHandler(config, notes_client)
    app.state.config = config
    app.state.handler = handler

    @app.on_event("startup")
    async def startup_event():
        """Handle application startup."""
        log_server_message("Server starting up")
        log_server_message(f"Webhook endpoint: {config.webhook_endpoint}")
        log_server_message(f"Notes endpoint: {config.notes_url}")
        log_server_message("Health check: /health")
        log_server_message("Server ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Handle application shutdown."""
        log_server_message("Server shutting down")

    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "linear_reflect"}

    @app.post(config.webhook_endpoint)
    async def linear_webhook(request: Request) -> JSONResponse:
        """Handle Linear webhook requests with HMAC signature validation."""
        # The signature covers the exact bytes Linear sent
        body = await request.body()
        response = await handler.handle(body, request.headers.get(SIGNATURE_HEADER))
        return JSONResponse(status_code=response.status_code, content=response.body)

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: HTTPException):
        """Handle 404 errors."""
        log_server_message(f"404 Not Found: {request.url}")
        return JSONResponse(
            status_code=404,
            content={"error": "Not found", "path": str(request.url.path)}
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception):
        """Handle 500 errors."""
        log_error(f"500 Internal Server Error on {request.url.path}: {exc!r}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    return app


def app_from_env() -> FastAPI:
    """Application factory for ``uvicorn --factory``; fails fast on bad config."""
    config = RelayConfig.from_env()
    setup_logging(config.log_dir)
    return create_app(config)
