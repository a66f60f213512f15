"""Order service port (abstract interface).

Defines the contract for the external order, picklist, dealer and employee
services. OrderDesk holds no authoritative state: reads return snapshots,
writes ask the backend to change flags and the caller refetches afterwards.

Adapters parse replies through ``parse_snapshot`` and ``parse_picklists`` so
a malformed document surfaces as ``OrderServiceUnavailable`` (or, for one bad
picklist in a list, a skipped entry) instead of a pydantic error.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TypeVar

import pydantic
import structlog

from orderdesk.model.snapshot import Dealer, Employee, Order, Picklist

logger = structlog.get_logger(__name__)

S = TypeVar("S", bound=pydantic.BaseModel)


class OrderServiceUnavailable(Exception):
    """A read could not reach the order service or got an unusable reply."""


def parse_snapshot(model: type[S], raw) -> S | None:
    """Validate one service document, ``None`` for an empty reply."""
    if not raw:
        return None
    try:
        return model.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise OrderServiceUnavailable(f"Malformed {model.__name__} document: {exc}") from exc


def parse_picklists(raw) -> list[Picklist]:
    """Validate a list of picklist documents, skipping the ones that do not parse."""
    if not raw:
        return []
    if not isinstance(raw, list):
        raise OrderServiceUnavailable(f"Expected a list of picklists, got {type(raw).__name__}")
    picklists = []
    for entry in raw:
        try:
            picklists.append(Picklist.model_validate(entry))
        except pydantic.ValidationError as exc:
            logger.warning("Skipping malformed picklist", error_count=exc.error_count(), errors=str(exc))
    return picklists


@dataclass(frozen=True)
class ServiceResult:
    """Result of a write call to the order service."""

    success: bool
    message: str = ""
    data: dict = field(default_factory=dict)


class OrderServicePort(ABC):
    """Abstract order service interface."""

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @abstractmethod
    def get_order(self, order_id: str) -> Order | None:
        """Fetch an order with its line items."""
        ...

    @abstractmethod
    def get_picklists(self, order_id: str, employee_id: str | None = None) -> list[Picklist]:
        """Fetch an order's picklists, or only those assigned to ``employee_id``."""
        ...

    @abstractmethod
    def get_dealer(self, dealer_id: str) -> Dealer | None:
        ...

    @abstractmethod
    def get_employee_by_user(self, user_id: str) -> Employee | None:
        """Resolve the employee record behind an authenticated user."""
        ...

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    @abstractmethod
    def assign_dealers(self, order_id: str, assignments: list[dict]) -> ServiceResult:
        """Assign dealers per SKU. ``assignments`` is ``[{"sku", "dealerId"}]``."""
        ...

    @abstractmethod
    def create_picklist(
        self,
        order_id: str,
        dealer_id: str,
        fulfilment_staff: str | None,
        sku_list: list[dict],
    ) -> ServiceResult:
        ...

    @abstractmethod
    def assign_picklist_to_staff(self, picklist_id: str, staff_id: str) -> ServiceResult:
        """Hand an existing picklist to a fulfilment staff member."""
        ...

    @abstractmethod
    def mark_order_as_packed(
        self,
        order_id: str,
        dealer_id: str,
        picklist_id: str | None = None,
        sku: str | None = None,
        weights: dict | None = None,
        secure_package_amount: float = 0,
        force_packing: bool = False,
    ) -> ServiceResult:
        """Mark a picklist (or a single SKU) packed.

        ``force_packing`` asks the backend to skip its own precondition checks.
        """
        ...

    @abstractmethod
    def inspect_picklist(self, picklist_id: str, employee_id: str, sku: str) -> ServiceResult:
        ...

    @abstractmethod
    def stop_picklist_inspection(self, picklist_id: str, employee_id: str, sku: str) -> ServiceResult:
        ...
