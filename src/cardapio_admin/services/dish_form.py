"""Dish creation form backing the "Novo prato" modal."""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from pydantic import ValidationError

from cardapio_admin.models.dish_models import NewDish, field_errors
from cardapio_admin.observability.metrics import record_dish_submission
from cardapio_admin.services.cardapio_api_client import CardapioApiClient, MenuApiError

logger = logging.getLogger(__name__)

DEFAULT_VALUES: dict[str, Any] = {"disponivel": True}


class FormStateEnum(str, Enum):
    """States of the dish creation modal."""

    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class FormStateError(Exception):
    """Raised when an operation is not allowed in the current form state."""


class DishCreationForm:
    """Validates and submits new dishes.

    Transitions:
        closed --open()--> open --submit()--> submitting
        submitting --> closed (created) | open (field errors or failed request)
        open --close()--> closed

    A failed request is logged only: the modal stays open without field errors.
    """

    def __init__(
        self,
        client: CardapioApiClient,
        on_success: Callable[[], Awaitable[Any]] | None = None,
    ) -> None:
        """Initialize the form.

        Args:
            client: Client used to issue the create request
            on_success: Awaited once after each successful creation
        """
        self.client = client
        self.on_success = on_success
        self.state = FormStateEnum.CLOSED
        self.values: dict[str, Any] = dict(DEFAULT_VALUES)
        self.errors: dict[str, str] = {}

    @property
    def is_open(self) -> bool:
        return self.state != FormStateEnum.CLOSED

    @property
    def is_submitting(self) -> bool:
        return self.state == FormStateEnum.SUBMITTING

    def open(self) -> None:
        if self.state == FormStateEnum.CLOSED:
            self.state = FormStateEnum.OPEN

    def close(self) -> None:
        if self.state == FormStateEnum.SUBMITTING:
            raise FormStateError("Cannot close the form while a submission is in progress")
        self.reset()
        self.state = FormStateEnum.CLOSED

    def reset(self) -> None:
        self.values = dict(DEFAULT_VALUES)
        self.errors = {}

    async def submit(self, raw: dict[str, Any]) -> bool:
        """Validate raw input and, when valid, create the dish.

        Args:
            raw: Field values as entered in the form

        Returns:
            True if the dish was created, False otherwise

        Raises:
            FormStateError: If the form is not open
        """
        if self.state != FormStateEnum.OPEN:
            raise FormStateError(f"Cannot submit a form that is {self.state.value}")

        self.values = {**DEFAULT_VALUES, **raw}

        try:
            dish = NewDish.model_validate(self.values)
        except ValidationError as e:
            self.errors = field_errors(e)
            record_dish_submission("rejected")
            logger.info(f"Dish form rejected: {sorted(self.errors)}")
            return False

        self.errors = {}
        self.state = FormStateEnum.SUBMITTING

        try:
            await self.client.create_prato(dish)
        except MenuApiError as e:
            logger.error(f"Falha ao adicionar prato: {e}")
            record_dish_submission("failed")
            self.state = FormStateEnum.OPEN
            return False
        except Exception:
            self.state = FormStateEnum.OPEN
            raise

        record_dish_submission("created")
        self.reset()
        self.state = FormStateEnum.CLOSED

        if self.on_success is not None:
            await self.on_success()

        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "errors": dict(self.errors),
        }
