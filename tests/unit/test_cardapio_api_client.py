"""Unit tests for CardapioApiClient."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cardapio_admin.models.dish_models import NewDish
from cardapio_admin.models.menu_models import ApiStatusSnapshot, Cardapio, Category
from cardapio_admin.services.cardapio_api_client import CardapioApiClient, MenuApiError


def json_response(payload: object, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def error_response(status_code: int) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "Server error", request=MagicMock(), response=response
    )
    return response


@pytest.mark.unit
class TestCardapioApiClient:
    """Test suite for CardapioApiClient."""

    @pytest.fixture
    def client(self, mock_base_url: str) -> CardapioApiClient:
        """Create a CardapioApiClient with test configuration."""
        return CardapioApiClient(base_url=mock_base_url)

    def test_client_initialization(self) -> None:
        """Test that trailing slashes are dropped and no timeout is set by default."""
        client = CardapioApiClient(base_url="https://api.test.com/")

        assert client.base_url == "https://api.test.com"
        assert client.timeout is None
        assert client.url_for("/api/status") == "https://api.test.com/api/status"

    @pytest.mark.asyncio
    async def test_get_status_success(
        self, client: CardapioApiClient, mock_status_payload: dict
    ) -> None:
        """Test fetching and parsing the API status."""
        mock_get = AsyncMock(return_value=json_response(mock_status_payload))

        with patch("httpx.AsyncClient.get", mock_get):
            snapshot = await client.get_status()

        assert isinstance(snapshot, ApiStatusSnapshot)
        assert snapshot.is_ok
        assert snapshot.version == "1.2.0"
        mock_get.assert_called_once_with("https://api.test.com/api/status")

    @pytest.mark.asyncio
    async def test_get_status_http_error(self, client: CardapioApiClient) -> None:
        """Test that a 500 response raises MenuApiError with the status code."""
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=error_response(500)):
            with pytest.raises(MenuApiError) as exc_info:
                await client.get_status()

        assert str(exc_info.value) == "HTTP 500"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_get_status_network_error(self, client: CardapioApiClient) -> None:
        """Test that transport failures raise MenuApiError without a status code."""
        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            side_effect=httpx.ConnectError("Connection refused", request=MagicMock()),
        ):
            with pytest.raises(MenuApiError) as exc_info:
                await client.get_status()

        assert str(exc_info.value) == "Connection refused"
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_get_status_malformed_payload(self, client: CardapioApiClient) -> None:
        """Test that a payload of the wrong shape fails loudly."""
        with patch(
            "httpx.AsyncClient.get", new_callable=AsyncMock, return_value=json_response({"ok": True})
        ):
            with pytest.raises(MenuApiError, match="resposta inválida"):
                await client.get_status()

    @pytest.mark.asyncio
    async def test_get_cardapio_success(
        self, client: CardapioApiClient, mock_cardapio_payload: dict
    ) -> None:
        """Test fetching the public menu."""
        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            return_value=json_response(mock_cardapio_payload),
        ):
            cardapio = await client.get_cardapio()

        assert isinstance(cardapio, Cardapio)
        assert cardapio.cardapio[0].pratos[0].preco == Decimal("5.5")
        assert cardapio.cardapio[1].pratos[0].tipo_item == "prato"

    @pytest.mark.asyncio
    async def test_get_cardapio_not_json(self, client: CardapioApiClient) -> None:
        """Test that a non-JSON body is reported as an invalid response."""
        response = MagicMock()
        response.json.side_effect = ValueError("Expecting value")

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=response):
            with pytest.raises(MenuApiError, match="resposta inválida"):
                await client.get_cardapio()

    @pytest.mark.asyncio
    async def test_get_status_deeply_nested_body(self, client: CardapioApiClient) -> None:
        """Test that a body too deep for the JSON decoder is reported as an invalid response."""
        response = MagicMock()
        response.json.side_effect = RecursionError("maximum recursion depth exceeded")

        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=response):
            with pytest.raises(MenuApiError, match="resposta inválida"):
                await client.get_status()

    @pytest.mark.asyncio
    async def test_get_categorias_success(
        self, client: CardapioApiClient, mock_categorias_payload: list[dict]
    ) -> None:
        """Test fetching categories with either key spelling."""
        with patch(
            "httpx.AsyncClient.get",
            new_callable=AsyncMock,
            return_value=json_response(mock_categorias_payload),
        ):
            categorias = await client.get_categorias()

        assert categorias == [Category(id=1, nome="Bebidas"), Category(id=2, nome="Pratos principais")]

    @pytest.mark.asyncio
    async def test_get_categorias_empty(self, client: CardapioApiClient) -> None:
        """Test that an empty category list is returned as-is."""
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=json_response([])):
            assert await client.get_categorias() == []

    @pytest.mark.asyncio
    async def test_get_categorias_http_error(self, client: CardapioApiClient) -> None:
        """Test that a 404 raises MenuApiError."""
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=error_response(404)):
            with pytest.raises(MenuApiError, match="HTTP 404"):
                await client.get_categorias()

    @pytest.mark.asyncio
    async def test_create_prato_posts_body(self, client: CardapioApiClient) -> None:
        """Test that dish creation posts the validated body once."""
        dish = NewDish.model_validate({"nome_prato": "Café", "preco": 5.5, "id_categoria": 1})
        mock_post = AsyncMock(return_value=json_response({}, status_code=201))

        with patch("httpx.AsyncClient.post", mock_post):
            await client.create_prato(dish)

        mock_post.assert_called_once_with(
            "https://api.test.com/api/cardapio/prato",
            json={"nome_prato": "Café", "preco": 5.5, "id_categoria": 1, "disponivel": True},
        )

    @pytest.mark.asyncio
    async def test_create_prato_failure(self, client: CardapioApiClient) -> None:
        """Test that a non-2xx creation response raises MenuApiError."""
        dish = NewDish.model_validate({"nome_prato": "Café", "preco": 5.5, "id_categoria": 1})

        with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=error_response(400)):
            with pytest.raises(MenuApiError, match="HTTP 400"):
                await client.create_prato(dish)
