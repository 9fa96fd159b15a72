"""Dish creation schema.

Validates the raw values entered in the "Novo prato" form. Raw values may come
from an HTML form (strings) or from JSON (numbers); both are accepted. Every
rule reports a field-scoped message meant to be shown next to the input.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

PRICE_REQUIRED = "Preço é obrigatório"
PRICE_NOT_POSITIVE = "Preço deve ser maior que zero"
PRICE_OUT_OF_RANGE = "Preço inválido"
CATEGORY_REQUIRED = "Categoria é obrigatória"
CATEGORY_INVALID = "Categoria inválida"
NAME_REQUIRED = "Nome do prato é obrigatório"


def _parse_number(value: Any) -> Decimal | None:
    """Return value as a finite Decimal, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class NewDish(BaseModel):
    """Create request for POST /api/cardapio/prato."""

    nome_prato: str = Field(..., description="Dish name")
    descricao: str | None = Field(None, description="Dish description")
    preco: Decimal = Field(..., description="Dish price, strictly positive")
    id_categoria: int = Field(..., description="Category the dish belongs to")
    disponivel: bool = Field(default=True, description="Whether the dish is available")
    tipo_item: str | None = Field(None, description="Free-text item type")

    @field_validator("nome_prato", mode="before")
    @classmethod
    def validate_nome_prato(cls, v: Any) -> str:
        if not isinstance(v, str) or len(v) < 1:
            raise PydanticCustomError("nome_obrigatorio", NAME_REQUIRED)
        return v

    @field_validator("descricao", "tipo_item", mode="before")
    @classmethod
    def drop_blank_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("preco", mode="before")
    @classmethod
    def validate_preco(cls, v: Any) -> Decimal:
        number = _parse_number(v)
        if number is None:
            raise PydanticCustomError("preco_obrigatorio", PRICE_REQUIRED)
        if number <= 0:
            raise PydanticCustomError("preco_positivo", PRICE_NOT_POSITIVE)
        # The price is sent as a JSON number, so it must survive float conversion
        as_float = float(number)
        if not math.isfinite(as_float):
            raise PydanticCustomError("preco_fora_do_intervalo", PRICE_OUT_OF_RANGE)
        if as_float <= 0:
            raise PydanticCustomError("preco_positivo", PRICE_NOT_POSITIVE)
        return number

    @field_validator("id_categoria", mode="before")
    @classmethod
    def validate_id_categoria(cls, v: Any) -> int:
        number = _parse_number(v)
        if number is None:
            raise PydanticCustomError("categoria_obrigatoria", CATEGORY_REQUIRED)
        if number != number.to_integral_value():
            raise PydanticCustomError("categoria_invalida", CATEGORY_INVALID)
        return int(number)

    def to_request_body(self) -> dict[str, Any]:
        """Build the JSON body sent to the API.

        Absent optional fields are omitted and the price is sent as a number.
        """
        body: dict[str, Any] = {
            "nome_prato": self.nome_prato,
            "preco": float(self.preco),
            "id_categoria": self.id_categoria,
            "disponivel": self.disponivel,
        }

        if self.descricao is not None:
            body["descricao"] = self.descricao

        if self.tipo_item is not None:
            body["tipo_item"] = self.tipo_item

        return body


def field_errors(error: ValidationError) -> dict[str, str]:
    """Map a ValidationError to the first message reported for each field."""
    errors: dict[str, str] = {}
    for detail in error.errors():
        field = str(detail["loc"][0]) if detail["loc"] else "__root__"
        if detail["type"] == "missing":
            message = {
                "nome_prato": NAME_REQUIRED,
                "preco": PRICE_REQUIRED,
                "id_categoria": CATEGORY_REQUIRED,
            }.get(field, detail["msg"])
        else:
            message = detail["msg"]
        errors.setdefault(field, message)
    return errors
