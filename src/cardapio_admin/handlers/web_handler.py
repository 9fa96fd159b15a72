"""FastAPI application rendering the cardápio dashboard."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from cardapio_admin.services.dashboard_service import DashboardService
from cardapio_admin.services.dish_form import DishCreationForm, FormStateError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# Endpoints listed on the "Testes de API" tab
API_ENDPOINTS: list[tuple[str, str, str]] = [
    ("GET", "/health", "Health check simples"),
    ("GET", "/api/status", "Status completo da API"),
    ("GET", "/api/cardapio", "Cardápio público"),
    ("GET", "/api/categorias", "Lista de categorias"),
]

FORM_FIELDS = ("nome_prato", "descricao", "preco", "id_categoria", "tipo_item")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def format_price(value: Decimal | float | None) -> str:
    if value is None:
        return "-"
    return f"R$ {Decimal(str(value)):.2f}"


def format_time(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%H:%M:%S")


def form_to_raw(form: Any) -> dict[str, Any]:
    """Turn submitted HTML form fields into raw dish values.

    An unchecked checkbox is not submitted, so availability is true only when
    the field is present.
    """
    raw: dict[str, Any] = {name: form.get(name) for name in FORM_FIELDS if form.get(name) is not None}
    raw["disponivel"] = form.get("disponivel") is not None
    return raw


def create_app(
    dashboard: DashboardService,
    dish_form: DishCreationForm,
    load_on_startup: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        dashboard: Service holding the view state
        dish_form: Form backing the "Novo prato" modal
        load_on_startup: Whether to dispatch all fetches when the app starts

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if load_on_startup:
            # Startup does not wait for the API; pages render the loading state meanwhile
            app.state.initial_load = asyncio.create_task(app.state.dashboard.load_all())
        yield

        task: asyncio.Task[None] | None = app.state.initial_load
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Initial dashboard load cancelled at shutdown")
        except Exception:
            logger.exception("Initial dashboard load failed")

    app = FastAPI(
        title="Manda Café - Cardápio Admin",
        description="Painel de gerenciamento do cardápio",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.dashboard = dashboard
    app.state.dish_form = dish_form
    app.state.initial_load = None

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["price"] = format_price
    templates.env.filters["clock"] = format_time

    def render(request: Request, status_code: int = 200) -> HTMLResponse:
        service: DashboardService = app.state.dashboard
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "dashboard": service,
                "form": app.state.dish_form,
                "api_base_url": service.client.base_url,
                "endpoints": API_ENDPOINTS,
            },
            status_code=status_code,
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.get("/", response_class=HTMLResponse, tags=["Dashboard"])
    async def index(request: Request) -> HTMLResponse:
        """Render the dashboard from the current view state."""
        return render(request)

    @app.get("/state", tags=["Dashboard"])
    async def view_state() -> dict[str, Any]:
        """Current view state as JSON."""
        state: dict[str, Any] = app.state.dashboard.to_dict()
        state["form"] = app.state.dish_form.to_dict()
        return state

    @app.post("/status/refresh", tags=["Dashboard"])
    async def refresh_status() -> RedirectResponse:
        """Test the connection to the API again ("Testar Conexão")."""
        await app.state.dashboard.test_api_status()
        return RedirectResponse("/", status_code=303)

    @app.post("/cardapio/refresh", tags=["Dashboard"])
    async def refresh_cardapio() -> RedirectResponse:
        """Reload the public menu ("Atualizar Cardápio")."""
        await app.state.dashboard.fetch_cardapio()
        return RedirectResponse("/#cardapio", status_code=303)

    @app.post("/admin/pratos/refresh", tags=["Admin"])
    async def refresh_admin_pratos() -> RedirectResponse:
        """Reload the admin dish table."""
        await app.state.dashboard.fetch_admin_pratos()
        return RedirectResponse("/#admin", status_code=303)

    @app.post("/admin/categorias/refresh", tags=["Admin"])
    async def refresh_admin_categorias() -> RedirectResponse:
        """Reload the admin category list."""
        await app.state.dashboard.fetch_admin_categorias()
        return RedirectResponse("/#admin", status_code=303)

    @app.get("/admin/pratos/novo", response_class=HTMLResponse, tags=["Admin"])
    async def open_dish_modal(request: Request) -> HTMLResponse:
        """Open the "Novo prato" modal."""
        app.state.dish_form.open()
        return render(request)

    @app.post("/admin/pratos/novo/cancelar", tags=["Admin"])
    async def close_dish_modal() -> RedirectResponse:
        """Close the modal and discard what was typed."""
        try:
            app.state.dish_form.close()
        except FormStateError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        return RedirectResponse("/#admin", status_code=303)

    @app.post("/admin/pratos", tags=["Admin"])
    async def submit_dish(request: Request) -> Response:
        """Submit the "Novo prato" form.

        Redirects back to the admin tab when the dish is created, re-renders
        the open modal otherwise.
        """
        form: DishCreationForm = app.state.dish_form
        raw = form_to_raw(await request.form())

        try:
            created = await form.submit(raw)
        except FormStateError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        if created:
            return RedirectResponse("/#admin", status_code=303)

        return render(request, status_code=422 if form.errors else 200)

    return app
