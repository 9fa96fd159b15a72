"""Dashboard service holding the in-memory view state of the admin front-end."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cardapio_admin.models.menu_models import AdminDish, ApiStatusSnapshot, Cardapio, Category
from cardapio_admin.services.cardapio_api_client import CardapioApiClient, MenuApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_CONNECTED = "Conectado"
STATUS_ERROR = "Erro"


@dataclass
class ViewSlice(Generic[T]):
    """One independently fetched piece of view state.

    Attributes:
        data: Last accepted payload, replaced wholesale on success
        loading: True while the most recently dispatched request is pending
        error: Human-readable message of the last failure, None otherwise
        generation: Number of the most recently dispatched request
    """

    data: T | None = None
    loading: bool = False
    error: str | None = None
    generation: int = 0

    def begin(self) -> int:
        """Mark a new request as dispatched and return its generation."""
        self.generation += 1
        self.loading = True
        self.error = None
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def succeed(self, generation: int, data: T) -> bool:
        """Apply a successful result if it belongs to the latest dispatch."""
        if not self.is_current(generation):
            return False
        self.data = data
        self.loading = False
        return True

    def fail(self, generation: int, error: str | None) -> bool:
        """Apply a failure if it belongs to the latest dispatch."""
        if not self.is_current(generation):
            return False
        self.error = error
        self.loading = False
        return True

    def settle(self, generation: int) -> None:
        """Clear loading once the latest dispatch is over, whatever its outcome."""
        if self.is_current(generation):
            self.loading = False

    def to_dict(self) -> dict[str, Any]:
        return {"loading": self.loading, "error": self.error}


def flatten_admin_pratos(cardapio: Cardapio) -> list[AdminDish]:
    """Flatten the public menu into one dish list tagged with category ids.

    Dishes keep category-then-dish order. This is a pure transform.
    """
    return [
        AdminDish(**prato.model_dump(), id_categoria=categoria.id_categoria)
        for categoria in cardapio.cardapio
        for prato in categoria.pratos
    ]


class DashboardService:
    """Fetches API status, public menu and admin lists into view state slices.

    Each operation follows the same pattern: set loading, clear the slice's
    error, issue one request, replace the slice's data on success or record a
    message on failure, clear loading. Only the most recently dispatched
    request of a slice may write to it; late completions of older requests are
    dropped.
    """

    def __init__(self, client: CardapioApiClient) -> None:
        """Initialize the DashboardService.

        Args:
            client: Client for the remote cardápio API
        """
        self.client = client
        self.status: ViewSlice[ApiStatusSnapshot] = ViewSlice()
        self.menu: ViewSlice[Cardapio] = ViewSlice()
        self.admin_pratos: ViewSlice[list[AdminDish]] = ViewSlice(data=[])
        self.admin_categorias: ViewSlice[list[Category]] = ViewSlice(data=[])

    async def test_api_status(self) -> None:
        """Refresh the API status snapshot."""
        generation = self.status.begin()
        try:
            snapshot = await self.client.get_status()
        except MenuApiError as e:
            self._apply(self.status.fail(generation, f"Erro ao conectar com a API: {e}"), "status")
        else:
            self._apply(self.status.succeed(generation, snapshot), "status")
        finally:
            self.status.settle(generation)

    async def fetch_cardapio(self) -> None:
        """Refresh the public menu."""
        generation = self.menu.begin()
        try:
            cardapio = await self.client.get_cardapio()
        except MenuApiError as e:
            self._apply(self.menu.fail(generation, f"Erro ao buscar cardápio: {e}"), "cardapio")
        else:
            self._apply(self.menu.succeed(generation, cardapio), "cardapio")
        finally:
            self.menu.settle(generation)

    async def fetch_admin_categorias(self) -> None:
        """Refresh the admin category list. Failures are logged only."""
        generation = self.admin_categorias.begin()
        try:
            categorias = await self.client.get_categorias()
        except MenuApiError as e:
            logger.error(f"Failed to fetch admin categories: {e}")
            self._apply(self.admin_categorias.fail(generation, None), "categorias")
        else:
            self._apply(self.admin_categorias.succeed(generation, categorias), "categorias")
        finally:
            self.admin_categorias.settle(generation)

    async def fetch_admin_pratos(self) -> None:
        """Refresh the admin dish list from the public menu endpoint."""
        generation = self.admin_pratos.begin()
        try:
            cardapio = await self.client.get_cardapio()
        except MenuApiError as e:
            self._apply(self.admin_pratos.fail(generation, f"Erro ao buscar pratos: {e}"), "pratos")
        else:
            self._apply(self.admin_pratos.succeed(generation, flatten_admin_pratos(cardapio)), "pratos")
        finally:
            self.admin_pratos.settle(generation)

    async def load_all(self) -> None:
        """Dispatch the four fetches concurrently, with no ordering between them."""
        await asyncio.gather(
            self.test_api_status(),
            self.fetch_cardapio(),
            self.fetch_admin_categorias(),
            self.fetch_admin_pratos(),
        )

    def _apply(self, applied: bool, slice_name: str) -> None:
        if not applied:
            logger.debug(f"Discarded stale {slice_name} response")

    @property
    def status_badge(self) -> str | None:
        """Badge shown next to the connection test button."""
        if self.status.error is not None:
            return STATUS_ERROR
        if self.status.data is None:
            return None
        return STATUS_CONNECTED if self.status.data.is_ok else STATUS_ERROR

    @property
    def pratos(self) -> list[AdminDish]:
        return self.admin_pratos.data or []

    @property
    def categorias(self) -> list[Category]:
        return self.admin_categorias.data or []

    def category_name(self, id_categoria: int) -> str:
        """Name of a category for the admin table, falling back to its id."""
        for categoria in self.categorias:
            if categoria.id == id_categoria:
                return categoria.nome
        return str(id_categoria)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable snapshot of the whole view state."""
        return {
            "status": {
                **self.status.to_dict(),
                "badge": self.status_badge,
                "data": self.status.data.model_dump(mode="json") if self.status.data else None,
            },
            "cardapio": {
                **self.menu.to_dict(),
                "data": self.menu.data.model_dump(mode="json") if self.menu.data else None,
            },
            "admin": {
                **self.admin_pratos.to_dict(),
                "pratos": [prato.model_dump(mode="json") for prato in self.pratos],
                "categorias": [categoria.model_dump() for categoria in self.categorias],
            },
        }
