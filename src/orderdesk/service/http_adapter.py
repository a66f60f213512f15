"""HTTP order service adapter — talks to the marketplace backend over REST."""

import requests
import structlog

from orderdesk.model.snapshot import Dealer, Employee, Order, Picklist
from orderdesk.service.port import (
    OrderServicePort,
    OrderServiceUnavailable,
    ServiceResult,
    parse_picklists,
    parse_snapshot,
)

logger = structlog.get_logger(__name__)


def _unwrap(body, *keys):
    """Dig the payload out of the backend's ``{"data": ...}`` envelopes."""
    for key in keys:
        if isinstance(body, dict) and key in body:
            body = body[key]
    return body


class HttpOrderService(OrderServicePort):
    def __init__(self, base_url: str, token: str | None = None, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    # -------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------
    def _get(self, path: str, **params):
        try:
            response = self.session.get(f"{self.base_url}{path}", params=params or None, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise OrderServiceUnavailable(f"GET {path} failed: {exc}") from exc

    def _send(self, method: str, path: str, payload: dict) -> ServiceResult:
        try:
            response = self.session.request(method, f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Order service write failed", method=method, path=path, error=str(exc))
            return ServiceResult(success=False, message=str(exc))

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        success = response.ok and body.get("success", True) is not False
        message = body.get("message") or ("" if success else f"HTTP {response.status_code}")
        if not success:
            logger.warning(
                "Order service rejected write",
                method=method,
                path=path,
                status_code=response.status_code,
                message=message,
            )
        data = _unwrap(body, "data")
        if not isinstance(data, dict):
            data = {"data": data} if data else {}
        return ServiceResult(success=success, message=message, data=data)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_order(self, order_id: str) -> Order | None:
        data = _unwrap(self._get(f"/orders/api/orders/id/{order_id}"), "data")
        # Some order endpoints wrap the single order in a list
        if isinstance(data, list):
            data = data[0] if data else None
        return parse_snapshot(Order, data)

    def get_picklists(self, order_id: str, employee_id: str | None = None) -> list[Picklist]:
        if employee_id:
            body = self._get(f"/orders/api/fulfillment/picklists/employee/{employee_id}", linkedOrderId=order_id)
            data = _unwrap(body, "data", "picklists")
        else:
            data = _unwrap(self._get(f"/orders/api/fulfillment/picklist/by-orderId/{order_id}"), "data")
        return parse_picklists(data)

    def get_dealer(self, dealer_id: str) -> Dealer | None:
        data = _unwrap(self._get(f"/users/api/users/dealer/{dealer_id}"), "data")
        return parse_snapshot(Dealer, data)

    def get_employee_by_user(self, user_id: str) -> Employee | None:
        data = _unwrap(self._get(f"/users/api/users/employee/get-by-user/{user_id}"), "employee")
        return parse_snapshot(Employee, data)

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def assign_dealers(self, order_id: str, assignments: list[dict]) -> ServiceResult:
        return self._send(
            "POST",
            "/orders/api/orders/assign-dealers",
            {"orderId": order_id, "assignments": assignments},
        )

    def create_picklist(
        self,
        order_id: str,
        dealer_id: str,
        fulfilment_staff: str | None,
        sku_list: list[dict],
    ) -> ServiceResult:
        return self._send(
            "POST",
            "/orders/api/fulfillment/picklist",
            {
                "orderId": order_id,
                "dealerId": dealer_id,
                "fulfilmentStaff": fulfilment_staff,
                "skuList": sku_list,
            },
        )

    def assign_picklist_to_staff(self, picklist_id: str, staff_id: str) -> ServiceResult:
        return self._send(
            "PUT",
            "/orders/api/fulfillment/picklist/assign-staff",
            {"picklistId": picklist_id, "staffId": staff_id},
        )

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
        return self._send("PUT", "/orders/api/orders/update/order-status-by-dealer", payload)

    def inspect_picklist(self, picklist_id: str, employee_id: str, sku: str) -> ServiceResult:
        return self._send(
            "PATCH",
            f"/orders/api/fulfillment/picklist/start-inspection/{picklist_id}/{employee_id}",
            {"sku": sku},
        )

    def stop_picklist_inspection(self, picklist_id: str, employee_id: str, sku: str) -> ServiceResult:
        return self._send(
            "PATCH",
            f"/orders/api/fulfillment/picklist/end-inspection/{picklist_id}/{employee_id}",
            {"sku": sku},
        )
