"""Request and response bodies for the OrderDesk HTTP API.

Responses flatten the derived workbench into plain strings and lists; the
order-service snapshot models never leave the domain.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class DealerAssignmentRequest(BaseModel):
    sku: str
    dealer_id: str


class AssignDealersRequest(BaseModel):
    assignments: list[DealerAssignmentRequest]


class SkuQuantityRequest(BaseModel):
    sku: str
    quantity: int = 1


class CreatePicklistRequest(BaseModel):
    dealer_id: str
    sku_list: list[SkuQuantityRequest] | None = None
    fulfilment_staff: str | None = None


class AssignPicklistRequest(BaseModel):
    staff_id: str


class InspectionRequest(BaseModel):
    sku: str


class MarkPackedRequest(BaseModel):
    sku: str | None = None
    weights: dict[str, float] = {}
    secure_package_amount: float = 0.0


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class SkuQuantityResponse(BaseModel):
    sku: str
    quantity: int


class PicklistResponse(BaseModel):
    picklist_id: str
    dealer_id: str
    fulfilment_staff: str | None
    scan_status: str | None
    sku_list: list[SkuQuantityResponse]
    assignable: bool


class LineResponse(BaseModel):
    sku: str | None
    product_name: str | None
    quantity: int | None
    dealer_id: str
    dealer_name: str | None
    dealer_count: int
    status: str
    badge: str | None
    actions: list[str]
    has_picklist: bool
    scan_status: str | None


class WorkbenchResponse(BaseModel):
    order_id: str
    order_status: str
    role: str
    perspective: str
    scope_state: str
    current_picklist_id: str | None
    lines: list[LineResponse]
    picklists: list[PicklistResponse]
    dealer_groups: dict[str, list[SkuQuantityResponse]]
    dealer_names: dict[str, str]
    can_bulk_create_picklist: bool
    can_bulk_mark_packed: bool


class ActionResponse(BaseModel):
    status: str
    message: str
    action_id: str | None = None
    workbench: WorkbenchResponse | None = None
