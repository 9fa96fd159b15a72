"""Shared pytest fixtures and configuration for all tests."""

import os

import pytest

# main.py skips building the real app when imported in test mode
os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture
def mock_base_url() -> str:
    """Fixture providing a standard test API base URL."""
    return "https://api.test.com"


@pytest.fixture
def mock_status_payload() -> dict:
    """Fixture providing a sample GET /api/status response."""
    return {
        "status": "OK",
        "version": "1.2.0",
        "environment": "production",
        "database": {"database": "PostgreSQL", "orm": "SQLAlchemy"},
        "timestamp": "2024-01-15T10:30:00Z",
    }


@pytest.fixture
def mock_cardapio_payload() -> dict:
    """Fixture providing a sample GET /api/cardapio response with 2 categories and 3 dishes."""
    return {
        "cardapio": [
            {
                "id_categoria": 1,
                "nome_categoria": "Bebidas",
                "pratos": [
                    {
                        "id_prato": 5,
                        "nome_prato": "Café",
                        "descricao": "Espresso curto",
                        "preco": 5.5,
                        "disponivel": True,
                    },
                    {
                        "id_prato": 6,
                        "nome_prato": "Suco de laranja",
                        "descricao": None,
                        "preco": 8,
                        "disponivel": False,
                    },
                ],
            },
            {
                "id_categoria": 2,
                "nome_categoria": "Pratos principais",
                "pratos": [
                    {
                        "id_prato": 10,
                        "nome_prato": "Feijoada",
                        "descricao": "Feijoada completa",
                        "preco": "42.90",
                        "disponivel": True,
                        "tipo_item": "prato",
                    }
                ],
            },
        ],
        "metadata": {
            "total_categorias": 2,
            "total_pratos": 3,
            "ultima_atualizacao": "2024-01-15T10:30:00Z",
        },
    }


@pytest.fixture
def mock_categorias_payload() -> list[dict]:
    """Fixture providing a sample GET /api/categorias response using both key spellings."""
    return [
        {"id_categoria": 1, "nome_categoria": "Bebidas"},
        {"id": 2, "nome": "Pratos principais"},
    ]


@pytest.fixture
def valid_dish_input() -> dict:
    """Fixture providing raw form values for a valid new dish."""
    return {
        "nome_prato": "Pão de queijo",
        "descricao": "Porção com 6 unidades",
        "preco": "12.50",
        "id_categoria": "1",
        "disponivel": True,
        "tipo_item": "lanche",
    }
