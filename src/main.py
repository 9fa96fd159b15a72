"""Main application entry point for the cardápio admin front-end.

This module provides the FastAPI application factory and configuration
for running the dashboard locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from cardapio_admin.handlers.web_handler import create_app
from cardapio_admin.observability import configure_logging, setup_observability
from cardapio_admin.services.cardapio_api_client import CardapioApiClient
from cardapio_admin.services.dashboard_service import DashboardService
from cardapio_admin.services.dish_form import DishCreationForm

logger = logging.getLogger(__name__)


def get_api_timeout() -> float | None:
    """Read the optional API request timeout.

    Returns:
        Timeout in seconds, or None when unset (requests wait indefinitely)

    Raises:
        ValueError: If the value is not a positive number
    """
    raw = os.getenv("CARDAPIO_API_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return None

    timeout = float(raw)
    if timeout <= 0:
        raise ValueError("CARDAPIO_API_TIMEOUT_SECONDS must be positive")
    return timeout


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the cardápio API client from the configured base URL
    3. Creates the dashboard service and the dish creation form
    4. Creates the FastAPI app
    5. Sets up observability when enabled

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If CARDAPIO_API_BASE_URL is not set
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing cardápio admin...")

    base_url = os.getenv("CARDAPIO_API_BASE_URL")
    if not base_url:
        raise ValueError("CARDAPIO_API_BASE_URL must be set in environment")

    client = CardapioApiClient(base_url=base_url, timeout=get_api_timeout())
    logger.info(f"Cardápio API client configured - URL: {base_url}")

    dashboard = DashboardService(client=client)
    dish_form = DishCreationForm(client=client, on_success=dashboard.fetch_admin_pratos)

    app = create_app(dashboard=dashboard, dish_form=dish_form)

    if os.getenv("OTEL_ENABLED", "false").lower() == "true":
        setup_observability(app)

    logger.info("Cardápio admin initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
