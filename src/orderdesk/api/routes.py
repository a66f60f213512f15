"""FastAPI routes for the OrderDesk domain.

Authentication happens upstream; the gateway forwards the caller's role and
user id in the ``X-User-Role`` and ``X-User-Id`` headers.

Handlers are plain functions: they block on the order service, so FastAPI
runs them in its threadpool rather than on the event loop.
"""

from fastapi import APIRouter, Header, HTTPException
from protean.exceptions import ValidationError

from orderdesk.action.dispatch import OUTCOME_FAILED
from orderdesk.api.schemas import (
    ActionResponse,
    AssignDealersRequest,
    AssignPicklistRequest,
    CreatePicklistRequest,
    InspectionRequest,
    LineResponse,
    MarkPackedRequest,
    PicklistResponse,
    SkuQuantityResponse,
    WorkbenchResponse,
)
from orderdesk.engine.identifiers import normalize_dealer_id
from orderdesk.workbench import desk
from orderdesk.workbench.desk import ActionNotAvailable, ActionResult
from orderdesk.workbench.loader import Viewer, Workbench, load_workbench


def _workbench_response(workbench: Workbench) -> WorkbenchResponse:
    return WorkbenchResponse(
        order_id=workbench.order_id,
        order_status=workbench.order_status,
        role=workbench.viewer.role.value,
        perspective=workbench.perspective.value,
        scope_state=workbench.scope_state.value,
        current_picklist_id=workbench.current_picklist_id,
        lines=[
            LineResponse(
                sku=line.sku,
                product_name=line.item.product_name,
                quantity=line.item.quantity,
                dealer_id=line.dealer_id,
                dealer_name=line.dealer_name,
                dealer_count=line.dealer_count,
                status=line.status.value,
                badge=line.badge.value if line.badge else None,
                actions=sorted(action.value for action in line.actions),
                has_picklist=line.has_picklist,
                scan_status=line.scan_status,
            )
            for line in workbench.lines
        ],
        picklists=[
            PicklistResponse(
                picklist_id=picklist.picklist_id,
                dealer_id=normalize_dealer_id(picklist.dealer_id),
                fulfilment_staff=picklist.fulfilment_staff,
                scan_status=picklist.scan_status,
                sku_list=[SkuQuantityResponse(sku=entry.sku, quantity=entry.quantity) for entry in picklist.sku_list],
                assignable=picklist.picklist_id in workbench.assignable_picklist_ids,
            )
            for picklist in workbench.visible_picklists
        ],
        dealer_groups={
            dealer_id: [SkuQuantityResponse(sku=entry.sku, quantity=entry.quantity) for entry in skus]
            for dealer_id, skus in workbench.dealer_groups.items()
        },
        dealer_names=workbench.dealer_names,
        can_bulk_create_picklist=workbench.can_bulk_create_picklist,
        can_bulk_mark_packed=workbench.can_bulk_mark_packed,
    )


def _action_response(result: ActionResult) -> ActionResponse:
    if result.status == OUTCOME_FAILED:
        raise HTTPException(status_code=502, detail=result.message)
    return ActionResponse(
        status=result.status,
        message=result.message,
        action_id=result.action_id,
        workbench=_workbench_response(result.workbench) if result.workbench else None,
    )


def _run(action, *args, **kwargs) -> ActionResponse:
    try:
        result = action(*args, **kwargs)
    except ActionNotAvailable as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.messages) from exc
    return _action_response(result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/{order_id}/workbench", response_model=WorkbenchResponse)
def get_workbench(
    order_id: str,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> WorkbenchResponse:
    """Derived fulfillment view of an order for the calling user."""
    return _workbench_response(load_workbench(order_id, Viewer.of(x_user_role, x_user_id)))


@order_router.post("/{order_id}/dealers", response_model=ActionResponse)
def assign_dealers(
    order_id: str,
    body: AssignDealersRequest,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> ActionResponse:
    """Assign dealers to SKUs that have none."""
    workbench = load_workbench(order_id, Viewer.of(x_user_role, x_user_id))
    return _run(desk.assign_dealers, workbench, {a.sku: a.dealer_id for a in body.assignments})


@order_router.post("/{order_id}/picklists", response_model=ActionResponse)
def create_picklist(
    order_id: str,
    body: CreatePicklistRequest,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> ActionResponse:
    """Create a picklist for one dealer; omit sku_list to take the dealer's whole group."""
    workbench = load_workbench(order_id, Viewer.of(x_user_role, x_user_id))
    sku_list = [entry.model_dump() for entry in body.sku_list] if body.sku_list is not None else None
    return _run(desk.create_picklist, workbench, body.dealer_id, sku_list, body.fulfilment_staff)


@order_router.post("/{order_id}/picklists/{picklist_id}/staff", response_model=ActionResponse)
def assign_picklist_to_staff(
    order_id: str,
    picklist_id: str,
    body: AssignPicklistRequest,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> ActionResponse:
    """Hand one of the order's picklists to a fulfilment staff member."""
    workbench = load_workbench(order_id, Viewer.of(x_user_role, x_user_id))
    return _run(desk.assign_picklist_to_staff, workbench, picklist_id, body.staff_id)


@order_router.post("/{order_id}/inspect", response_model=ActionResponse)
def inspect(
    order_id: str,
    body: InspectionRequest,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> ActionResponse:
    """Start inspecting a SKU on the caller's picklist."""
    workbench = load_workbench(order_id, Viewer.of(x_user_role, x_user_id))
    return _run(desk.inspect, workbench, body.sku)


@order_router.post("/{order_id}/stop-inspect", response_model=ActionResponse)
def stop_inspect(
    order_id: str,
    body: InspectionRequest,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> ActionResponse:
    """Stop the inspection of a SKU on the caller's picklist."""
    workbench = load_workbench(order_id, Viewer.of(x_user_role, x_user_id))
    return _run(desk.stop_inspection, workbench, body.sku)


@order_router.post("/{order_id}/pack", response_model=ActionResponse)
def mark_packed(
    order_id: str,
    body: MarkPackedRequest,
    x_user_role: str = Header(default=""),
    x_user_id: str = Header(default=""),
) -> ActionResponse:
    """Mark a SKU (admin) or the caller's current picklist (staff) as packed."""
    workbench = load_workbench(order_id, Viewer.of(x_user_role, x_user_id))
    return _run(
        desk.mark_packed,
        workbench,
        sku=body.sku,
        weights=body.weights,
        secure_package_amount=body.secure_package_amount,
    )
