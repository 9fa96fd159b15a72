"""Menu data models.

These models represent the payloads of the remote cardápio API. Parsing an
API response through them is the single place where the external shape is
interpreted; a payload that does not match raises a ValidationError instead of
being defaulted.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _to_decimal(value: Any) -> Any:
    """Convert JSON numbers to Decimal through their string form."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Decimal(str(value))
    return value


class Dish(BaseModel):
    """Dish (prato) as returned inside the public menu."""

    model_config = ConfigDict(json_encoders={Decimal: str})

    id_prato: int = Field(..., description="Unique identifier for the dish")
    nome_prato: str = Field(..., description="Dish name")
    descricao: str | None = Field(None, description="Dish description")
    preco: Decimal = Field(..., description="Dish price")
    disponivel: bool = Field(..., description="Whether the dish is currently available")
    tipo_item: str | None = Field(None, description="Free-text item type")

    @field_validator("preco", mode="before")
    @classmethod
    def convert_preco(cls, v: Any) -> Any:
        """Convert float prices without binary rounding noise."""
        return _to_decimal(v)


class MenuCategory(BaseModel):
    """Category of the public menu with its ordered dishes."""

    id_categoria: int = Field(..., description="Unique identifier for the category")
    nome_categoria: str = Field(..., description="Category name")
    pratos: list[Dish] = Field(..., description="Dishes in display order")


class MenuMetadata(BaseModel):
    """Summary block of the public menu response."""

    total_categorias: int = Field(..., ge=0)
    total_pratos: int = Field(..., ge=0)
    ultima_atualizacao: datetime | None = Field(None, description="Last menu update")


class Cardapio(BaseModel):
    """Public menu response (GET /api/cardapio)."""

    cardapio: list[MenuCategory]
    metadata: MenuMetadata


class Category(BaseModel):
    """Admin category list entry (GET /api/categorias).

    The API spells the fields either ``id_categoria``/``nome_categoria`` or
    ``id``/``nome``; both are accepted, nothing else is.
    """

    id: int = Field(..., validation_alias=AliasChoices("id_categoria", "id"))
    nome: str = Field(..., validation_alias=AliasChoices("nome_categoria", "nome"))


class DatabaseDescriptor(BaseModel):
    """Database block of the API status response."""

    database: str
    orm: str


class ApiStatusSnapshot(BaseModel):
    """API status response (GET /api/status)."""

    status: str
    version: str
    environment: str
    database: DatabaseDescriptor
    timestamp: datetime

    @property
    def is_ok(self) -> bool:
        return self.status == "OK"


class AdminDish(Dish):
    """Dish flattened out of the public menu and stamped with its category."""

    id_categoria: int = Field(..., description="Category this dish belongs to")
