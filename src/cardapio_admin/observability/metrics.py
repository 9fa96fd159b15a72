"""Custom metrics for the cardápio admin front-end."""

from opentelemetry import metrics

meter = metrics.get_meter("cardapio-admin")

api_call_counter = meter.create_counter(
    name="cardapio_api_calls_total",
    description="Total number of calls to the cardápio API by endpoint and outcome",
    unit="1",
)

api_response_time = meter.create_histogram(
    name="cardapio_api_response_time_seconds",
    description="Response time for cardápio API calls",
    unit="s",
)

dish_form_counter = meter.create_counter(
    name="dish_form_submissions_total",
    description="Dish creation form submissions by outcome",
    unit="1",
)


def record_api_call(endpoint: str, outcome: str, duration_seconds: float) -> None:
    """Record a call to the cardápio API.

    Args:
        endpoint: API path that was called (e.g., "/api/cardapio")
        outcome: "success", "http_error", "network_error" or "invalid_response"
        duration_seconds: Duration in seconds
    """
    attributes = {"endpoint": endpoint, "outcome": outcome}
    api_call_counter.add(1, attributes)
    api_response_time.record(duration_seconds, attributes)


def record_dish_submission(outcome: str) -> None:
    """Record a dish form submission.

    Args:
        outcome: "created", "rejected" (validation) or "failed" (API)
    """
    dish_form_counter.add(1, {"outcome": outcome})
