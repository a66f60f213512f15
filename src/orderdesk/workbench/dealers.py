"""Dealer directory — read-through cache of dealer display names.

A directory lives for exactly one workbench load. Every refetch builds a new
one, so nothing needs invalidating.
"""

import structlog

from orderdesk.model.snapshot import UNKNOWN_DEALER, Dealer
from orderdesk.service.port import OrderServicePort, OrderServiceUnavailable

logger = structlog.get_logger(__name__)


class DealerDirectory:
    def __init__(self, service: OrderServicePort) -> None:
        self._service = service
        self._dealers: dict[str, Dealer | None] = {}

    def get(self, dealer_id: str) -> Dealer | None:
        if not dealer_id:
            return None
        if dealer_id not in self._dealers:
            try:
                self._dealers[dealer_id] = self._service.get_dealer(dealer_id)
            except OrderServiceUnavailable as exc:
                logger.warning("Dealer lookup failed", dealer_id=dealer_id, error=str(exc))
                self._dealers[dealer_id] = None
        return self._dealers[dealer_id]

    def display_name(self, dealer_id: str) -> str:
        dealer = self.get(dealer_id)
        return dealer.display_name if dealer else UNKNOWN_DEALER

    def names_for(self, dealer_ids) -> dict[str, str]:
        return {dealer_id: self.display_name(dealer_id) for dealer_id in dealer_ids}
