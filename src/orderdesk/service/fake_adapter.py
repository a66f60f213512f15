"""Fake order service — in-memory backend for testing and development.

Keeps raw service-shaped documents and applies the same flag mutations the
real backend does, so refetching after an action shows the new state.
Configurable failure behavior for exercising degraded paths.
"""

import copy
from uuid import uuid4

from orderdesk.model.snapshot import Dealer, Employee, Order, Picklist
from orderdesk.service.port import (
    OrderServicePort,
    OrderServiceUnavailable,
    ServiceResult,
    parse_picklists,
    parse_snapshot,
)


class FakeOrderService(OrderServicePort):
    """Fake order service that always succeeds by default."""

    def __init__(self):
        self.orders: dict[str, dict] = {}
        self.picklists: dict[str, dict] = {}
        self.dealers: dict[str, dict] = {}
        self.employees: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.should_succeed = True
        self.failure_reason = "Order service rejected the request"
        self.reads_available = True
        self.on_write = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Order service rejected the request",
        reads_available: bool = True,
    ):
        """Configure the fake service behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.reads_available = reads_available

    # -------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------
    def add_order(self, order_id: str, items: list[dict], status: str = "Confirmed", **extra) -> None:
        self.orders[order_id] = {"_id": order_id, "status": status, "skus": copy.deepcopy(items), **extra}

    def add_dealer(self, dealer_id: str, trade_name: str = "", legal_name: str = "") -> None:
        self.dealers[dealer_id] = {"_id": dealer_id, "trade_name": trade_name, "legal_name": legal_name}

    def add_employee(self, employee_id: str, user_id: str, role: str = "Fulfillment-Staff", name: str = "") -> None:
        self.employees[user_id] = {"_id": employee_id, "user_id": user_id, "role": role, "name": name}

    def add_picklist(
        self,
        order_id: str,
        dealer_id: str,
        sku_list: list[dict],
        fulfilment_staff: str | None = None,
        scan_status: str = "Pending",
        picklist_id: str | None = None,
    ) -> str:
        picklist_id = picklist_id or f"PL-{uuid4().hex[:8].upper()}"
        self.picklists[picklist_id] = {
            "picklistId": picklist_id,
            "linkedOrderId": order_id,
            "dealerId": dealer_id,
            "fulfilmentStaff": fulfilment_staff,
            "skuList": copy.deepcopy(sku_list),
            "scanStatus": scan_status,
        }
        return picklist_id

    def set_scan_status(self, picklist_id: str, scan_status: str) -> None:
        self.picklists[picklist_id]["scanStatus"] = scan_status

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def _check_reads(self) -> None:
        if not self.reads_available:
            raise OrderServiceUnavailable(self.failure_reason)

    def get_order(self, order_id: str) -> Order | None:
        self._check_reads()
        raw = self.orders.get(order_id)
        return parse_snapshot(Order, raw)

    def get_picklists(self, order_id: str, employee_id: str | None = None) -> list[Picklist]:
        self._check_reads()
        return parse_picklists(
            [
                raw
                for raw in self.picklists.values()
                if raw.get("linkedOrderId") == order_id
                and (employee_id is None or raw.get("fulfilmentStaff") == employee_id)
            ]
        )

    def get_dealer(self, dealer_id: str) -> Dealer | None:
        self._check_reads()
        raw = self.dealers.get(dealer_id)
        return parse_snapshot(Dealer, raw)

    def get_employee_by_user(self, user_id: str) -> Employee | None:
        self._check_reads()
        raw = self.employees.get(user_id)
        return parse_snapshot(Employee, raw)

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def _write(self, name: str, payload: dict) -> ServiceResult | None:
        self.calls.append((name, payload))
        if self.on_write is not None:
            self.on_write(name, payload)
        if not self.should_succeed:
            return ServiceResult(success=False, message=self.failure_reason)
        return None

    def _items(self, order_id: str) -> list[dict]:
        return self.orders.get(order_id, {}).get("skus", [])

    def _items_for(self, order_id: str, skus) -> list[dict]:
        wanted = set(skus)
        return [item for item in self._items(order_id) if item.get("sku") in wanted]

    def assign_dealers(self, order_id: str, assignments: list[dict]) -> ServiceResult:
        failure = self._write("assign_dealers", {"orderId": order_id, "assignments": assignments})
        if failure:
            return failure
        for assignment in assignments:
            for item in self._items_for(order_id, [assignment["sku"]]):
                item["dealerMapped"] = [{"dealerId": assignment["dealerId"]}]
        return ServiceResult(success=True, message="Dealers assigned")

    def create_picklist(
        self,
        order_id: str,
        dealer_id: str,
        fulfilment_staff: str | None,
        sku_list: list[dict],
    ) -> ServiceResult:
        payload = {
            "orderId": order_id,
            "dealerId": dealer_id,
            "fulfilmentStaff": fulfilment_staff,
            "skuList": sku_list,
        }
        failure = self._write("create_picklist", payload)
        if failure:
            return failure
        picklist_id = self.add_picklist(order_id, dealer_id, sku_list, fulfilment_staff=fulfilment_staff)
        for item in self._items_for(order_id, [entry["sku"] for entry in sku_list]):
            item["piclistGenerated"] = True
        return ServiceResult(success=True, message="Picklist created", data={"picklistId": picklist_id})

    def assign_picklist_to_staff(self, picklist_id: str, staff_id: str) -> ServiceResult:
        failure = self._write("assign_picklist_to_staff", {"picklistId": picklist_id, "staffId": staff_id})
        if failure:
            return failure
        picklist = self.picklists.get(picklist_id)
        if picklist is None:
            return ServiceResult(success=False, message="Picklist not found")
        picklist["fulfilmentStaff"] = staff_id
        return ServiceResult(success=True, message="Picklist assigned")

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
        payload = {
            "orderId": order_id,
            "dealerId": dealer_id,
            "weight_object": weights or {},
            "securePackageAmount": secure_package_amount,
            "forcePacking": force_packing,
        }
        if picklist_id:
            payload["picklistId"] = picklist_id
        else:
            payload["sku"] = sku
        failure = self._write("mark_order_as_packed", payload)
        if failure:
            return failure

        if picklist_id:
            picklist = self.picklists.get(picklist_id)
            if picklist is None:
                return ServiceResult(success=False, message="Picklist not found")
            if picklist["scanStatus"] != "Completed" and not force_packing:
                return ServiceResult(success=False, message="Picklist scan is not completed")
            skus = [entry["sku"] for entry in picklist["skuList"]]
        else:
            skus = [sku]
        for item in self._items_for(order_id, skus):
            item["markAsPacked"] = True

        order = self.orders.get(order_id)
        if order and order["skus"] and all(item.get("markAsPacked") for item in order["skus"]):
            order["status"] = "Packed"
        return ServiceResult(success=True, message="Order marked as packed")

    def _inspection(self, name: str, picklist_id: str, employee_id: str, sku: str, **flags) -> ServiceResult:
        failure = self._write(name, {"picklistId": picklist_id, "employeeId": employee_id, "sku": sku})
        if failure:
            return failure
        picklist = self.picklists.get(picklist_id)
        if picklist is None:
            return ServiceResult(success=False, message="Picklist not found")
        for item in self._items_for(picklist["linkedOrderId"], [sku]):
            item.update(flags)
        return ServiceResult(success=True)

    def inspect_picklist(self, picklist_id: str, employee_id: str, sku: str) -> ServiceResult:
        return self._inspection("inspect_picklist", picklist_id, employee_id, sku, inspectionStarted=True)

    def stop_picklist_inspection(self, picklist_id: str, employee_id: str, sku: str) -> ServiceResult:
        return self._inspection("stop_picklist_inspection", picklist_id, employee_id, sku, inspectionCompleted=True)
