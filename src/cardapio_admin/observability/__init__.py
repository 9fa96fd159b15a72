"""OpenTelemetry instrumentation and observability utilities."""

from cardapio_admin.observability.config import configure_logging, setup_observability
from cardapio_admin.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
