"""Client for interacting with the cardápio REST API."""

import logging
import time
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from cardapio_admin.models.dish_models import NewDish
from cardapio_admin.models.menu_models import ApiStatusSnapshot, Cardapio, Category
from cardapio_admin.observability.decorators import traced
from cardapio_admin.observability.metrics import record_api_call

logger = logging.getLogger(__name__)

STATUS_PATH = "/api/status"
CARDAPIO_PATH = "/api/cardapio"
CATEGORIAS_PATH = "/api/categorias"
CREATE_PRATO_PATH = "/api/cardapio/prato"

_categories_adapter = TypeAdapter(list[Category])


class MenuApiError(Exception):
    """A call to the cardápio API failed.

    The message is the human-readable reason: ``HTTP <status>`` for non-2xx
    responses, the transport error text for network failures, or
    ``resposta inválida`` when the payload does not match the expected shape.
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class CardapioApiClient:
    """HTTP client for the remote cardápio API.

    Every call issues exactly one request. There are no retries; a timeout is
    only applied when one is configured.
    """

    def __init__(self, base_url: str, timeout: float | None = None) -> None:
        """Initialize the cardápio API client.

        Args:
            base_url: Base URL of the API (e.g., "https://api.example.com")
            timeout: Request timeout in seconds, None to wait indefinitely
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> httpx.Response:
        """Issue one request and raise MenuApiError on any non-2xx or transport failure."""
        url = self.url_for(path)
        started = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "GET":
                    response = await client.get(url)
                else:
                    response = await client.post(url, json=json)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            record_api_call(path, "http_error", time.perf_counter() - started)
            logger.error(f"{method} {url} failed with HTTP {status_code}")
            raise MenuApiError(f"HTTP {status_code}", status_code=status_code) from e

        except httpx.RequestError as e:
            record_api_call(path, "network_error", time.perf_counter() - started)
            logger.error(f"{method} {url} failed: {e}")
            raise MenuApiError(str(e) or type(e).__name__) from e

        record_api_call(path, "success", time.perf_counter() - started)
        return response

    def _parse(self, path: str, parse: Any, response: httpx.Response) -> Any:
        try:
            return parse(response.json())
        # Deeply nested bodies make the JSON decoder hit the recursion limit
        except (ValueError, ValidationError, RecursionError) as e:
            record_api_call(path, "invalid_response", 0.0)
            logger.error(f"Unexpected response shape from {path}: {e}")
            raise MenuApiError("resposta inválida") from e

    @traced("cardapio_api.get_status")
    async def get_status(self) -> ApiStatusSnapshot:
        """Fetch the API status snapshot.

        Returns:
            Parsed status snapshot

        Raises:
            MenuApiError: If the request fails or the payload is malformed
        """
        response = await self._request("GET", STATUS_PATH)
        return self._parse(STATUS_PATH, ApiStatusSnapshot.model_validate, response)

    @traced("cardapio_api.get_cardapio")
    async def get_cardapio(self) -> Cardapio:
        """Fetch the public menu, grouped by category.

        Raises:
            MenuApiError: If the request fails or the payload is malformed
        """
        response = await self._request("GET", CARDAPIO_PATH)
        return self._parse(CARDAPIO_PATH, Cardapio.model_validate, response)

    @traced("cardapio_api.get_categorias")
    async def get_categorias(self) -> list[Category]:
        """Fetch the admin category list.

        Raises:
            MenuApiError: If the request fails or the payload is malformed
        """
        response = await self._request("GET", CATEGORIAS_PATH)
        categories: list[Category] = self._parse(
            CATEGORIAS_PATH, _categories_adapter.validate_python, response
        )
        return categories

    @traced("cardapio_api.create_prato")
    async def create_prato(self, dish: NewDish) -> None:
        """Create a dish. Any 2xx response is success; the body is not inspected.

        Args:
            dish: Validated create request

        Raises:
            MenuApiError: If the API answers non-2xx or is unreachable
        """
        await self._request("POST", CREATE_PRATO_PATH, json=dish.to_request_body())
        logger.info(f"Dish '{dish.nome_prato}' created in category {dish.id_categoria}")
