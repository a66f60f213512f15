"""OrderDesk — turns dashboard actions on a loaded workbench into commands.

Each entry point checks that the workbench actually offers the action to
the viewer, builds the command, processes it, and on success loads a fresh
workbench: flags are never patched locally.
"""

import json
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from orderdesk.action.assignment import AssignDealers
from orderdesk.action.dispatch import OUTCOME_SUCCEEDED
from orderdesk.action.inspection import InspectPicklist, StopPicklistInspection
from orderdesk.action.packing import MarkOrderAsPacked
from orderdesk.action.picklist import AssignPicklistToStaff, CreatePicklist
from orderdesk.engine.actions import Action
from orderdesk.engine.identifiers import normalize_dealer_id
from orderdesk.engine.roles import force_packing_for
from orderdesk.workbench.loader import LineView, Workbench, load_workbench

logger = structlog.get_logger(__name__)


class ActionNotAvailable(Exception):
    """The workbench does not offer this action to the viewer right now."""


@dataclass(frozen=True)
class ActionResult:
    status: str
    message: str
    action_id: str | None = None
    workbench: Workbench | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == OUTCOME_SUCCEEDED


def _perform(command, workbench: Workbench) -> ActionResult:
    outcome = current_domain.process(command, asynchronous=False)
    refreshed = None
    if outcome["status"] == OUTCOME_SUCCEEDED:
        refreshed = load_workbench(workbench.order_id, workbench.viewer)
    return ActionResult(
        status=outcome["status"],
        message=outcome["message"],
        action_id=outcome["action_id"],
        workbench=refreshed,
    )


def _line_offering(workbench: Workbench, sku: str, action: Action) -> LineView:
    line = workbench.line(sku)
    if line is None:
        raise ActionNotAvailable(f"SKU {sku} is not visible on order {workbench.order_id}")
    if action not in line.actions:
        raise ActionNotAvailable(f"{action.value} is not available for SKU {sku}")
    return line


def assign_dealers(workbench: Workbench, assignments: dict[str, str]) -> ActionResult:
    """Assign a dealer to each SKU in ``assignments`` (sku -> dealer id)."""
    for sku in assignments:
        _line_offering(workbench, sku, Action.ASSIGN_DEALER)
    command = AssignDealers(
        order_id=workbench.order_id,
        assignments=json.dumps([{"sku": sku, "dealerId": dealer_id} for sku, dealer_id in assignments.items()]),
        requested_by=workbench.viewer.user_id,
    )
    return _perform(command, workbench)


def create_picklist(
    workbench: Workbench,
    dealer_id: str,
    sku_list: list[dict] | None = None,
    fulfilment_staff: str | None = None,
) -> ActionResult:
    """Create a picklist for ``dealer_id``.

    Without ``sku_list`` the dealer's whole group of un-picklisted SKUs is
    used (bulk mode). Staff picklists are always assigned to the staff
    member creating them.
    """
    dealer_id = normalize_dealer_id(dealer_id)
    group = {entry.sku: entry.quantity for entry in workbench.dealer_groups.get(dealer_id, [])}
    if not group:
        raise ActionNotAvailable(f"Dealer {dealer_id or '(none)'} has no SKUs awaiting a picklist")
    if sku_list is None:
        sku_list = [{"sku": sku, "quantity": quantity} for sku, quantity in group.items()]

    for entry in sku_list:
        if entry.get("sku") not in group:
            raise ActionNotAvailable(f"SKU {entry.get('sku')} is not awaiting a picklist from dealer {dealer_id}")

    role = workbench.viewer.role
    if role.is_staff:
        if not workbench.can_bulk_create_picklist:
            raise ActionNotAvailable("Picklist creation is not available")
        fulfilment_staff = workbench.scope.employee_id if workbench.scope else None
    else:
        for entry in sku_list:
            _line_offering(workbench, entry["sku"], Action.CREATE_PICKLIST)

    command = CreatePicklist(
        order_id=workbench.order_id,
        dealer_id=dealer_id,
        fulfilment_staff=fulfilment_staff,
        sku_list=json.dumps(sku_list),
        requested_by=workbench.viewer.user_id,
    )
    return _perform(command, workbench)


def assign_picklist_to_staff(workbench: Workbench, picklist_id: str, staff_id: str) -> ActionResult:
    """Hand one of the order's picklists to a fulfilment staff member (admins only)."""
    if workbench.picklist(picklist_id) is None:
        raise ActionNotAvailable(f"Picklist {picklist_id} does not belong to order {workbench.order_id}")
    if picklist_id not in workbench.assignable_picklist_ids:
        raise ActionNotAvailable(f"Picklist {picklist_id} cannot be assigned")
    command = AssignPicklistToStaff(
        order_id=workbench.order_id,
        picklist_id=picklist_id,
        staff_id=staff_id,
        requested_by=workbench.viewer.user_id,
    )
    return _perform(command, workbench)


def _inspection(workbench: Workbench, sku: str, action: Action, command_cls) -> ActionResult:
    _line_offering(workbench, sku, action)
    scope = workbench.scope
    picklist_id = scope.picklist_for_sku(sku) if scope else None
    if not scope or not scope.employee_id:
        raise ActionNotAvailable("Employee ID not found")
    if not picklist_id:
        raise ActionNotAvailable("No picklist found")
    command = command_cls(
        order_id=workbench.order_id,
        picklist_id=picklist_id,
        employee_id=scope.employee_id,
        sku=sku,
        requested_by=workbench.viewer.user_id,
    )
    return _perform(command, workbench)


def inspect(workbench: Workbench, sku: str) -> ActionResult:
    return _inspection(workbench, sku, Action.INSPECT, InspectPicklist)


def stop_inspection(workbench: Workbench, sku: str) -> ActionResult:
    return _inspection(workbench, sku, Action.STOP_INSPECT, StopPicklistInspection)


def mark_packed(
    workbench: Workbench,
    sku: str | None = None,
    weights: dict[str, float] | None = None,
    secure_package_amount: float = 0.0,
) -> ActionResult:
    """Mark packed.

    Staff pack their whole current picklist at once (``sku`` is ignored);
    admins pack the picklist holding ``sku``, or the SKU alone if it is on no
    known picklist.
    """
    role = workbench.viewer.role
    if role.is_staff:
        if not workbench.can_bulk_mark_packed:
            raise ActionNotAvailable("Mark packed needs every visible SKU to be scanned")
        picklist_id = workbench.current_picklist_id
        picklist = next(p for p in workbench.scope.picklists if p.picklist_id == picklist_id)
        dealer_id = normalize_dealer_id(picklist.dealer_id)
        target_sku = None
    else:
        if sku is None:
            raise ActionNotAvailable("Admins mark packed one SKU at a time")
        line = _line_offering(workbench, sku, Action.MARK_PACKED)
        picklist = next(
            (p for p in workbench.picklists if any(entry.sku == sku for entry in p.sku_list)),
            None,
        )
        picklist_id = picklist.picklist_id if picklist else None
        dealer_id = (normalize_dealer_id(picklist.dealer_id) if picklist else "") or line.dealer_id
        target_sku = None if picklist_id else sku

    command = MarkOrderAsPacked(
        order_id=workbench.order_id,
        dealer_id=dealer_id,
        picklist_id=picklist_id,
        sku=target_sku,
        weights=json.dumps(weights or {}),
        secure_package_amount=secure_package_amount,
        force_packing=force_packing_for(role),
        requested_by=workbench.viewer.user_id,
    )
    logger.info(
        "Dispatching mark packed",
        order_id=workbench.order_id,
        picklist_id=picklist_id,
        sku=target_sku,
        force_packing=force_packing_for(role),
    )
    return _perform(command, workbench)
