"""Order service factory.

Provides get_order_service() / set_order_service() to swap implementations:
- FakeOrderService for development and testing (default)
- HttpOrderService against the marketplace backend

Selected through the ORDER_SERVICE_ADAPTER environment variable ("fake" or
"http"); the HTTP adapter reads ORDER_SERVICE_URL, ORDER_SERVICE_TOKEN and
ORDER_SERVICE_TIMEOUT.
"""

import os

from orderdesk.service.port import OrderServicePort

_current_service: OrderServicePort | None = None


def _build_from_env() -> OrderServicePort:
    adapter = os.environ.get("ORDER_SERVICE_ADAPTER", "fake")
    if adapter == "fake":
        from orderdesk.service.fake_adapter import FakeOrderService

        return FakeOrderService()
    if adapter == "http":
        from orderdesk.service.http_adapter import HttpOrderService

        base_url = os.environ.get("ORDER_SERVICE_URL")
        if not base_url:
            raise ValueError("ORDER_SERVICE_URL must be set for the http order service adapter")
        return HttpOrderService(
            base_url=base_url,
            token=os.environ.get("ORDER_SERVICE_TOKEN"),
            timeout=float(os.environ.get("ORDER_SERVICE_TIMEOUT", "10")),
        )
    raise ValueError(f"Unknown order service adapter: {adapter}")


def get_order_service() -> OrderServicePort:
    """Return the configured order service adapter (singleton)."""
    global _current_service
    if _current_service is None:
        _current_service = _build_from_env()
    return _current_service


def set_order_service(service: OrderServicePort) -> None:
    """Override the active order service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_order_service() -> None:
    """Reset the order service singleton."""
    global _current_service
    _current_service = None
