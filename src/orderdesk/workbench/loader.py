"""Workbench loader — fetches an order snapshot and derives its fulfillment view.

The workbench is a projection of the last fetch and is never patched: after
any action the caller loads a fresh one. Read failures degrade to empty
defaults and are logged, so a broken picklist or dealer lookup never stops
the order from rendering.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

import structlog

from orderdesk.engine.actions import (
    Action,
    available_actions,
    can_assign_picklist,
    can_bulk_create_picklist,
    can_bulk_mark_packed,
)
from orderdesk.engine.grouping import SkuQuantity, group_by_dealer
from orderdesk.engine.identifiers import dealer_count, resolve_dealer_id
from orderdesk.engine.roles import Perspective, Role, perspective_for
from orderdesk.engine.staff_scope import ScopeState, StaffScope, scope_state, staff_visible_items
from orderdesk.engine.status import FulfillmentStatus, TerminalBadge, derive_status, terminal_badge
from orderdesk.model.snapshot import LineItem, Picklist
from orderdesk.service import get_order_service
from orderdesk.service.port import OrderServicePort, OrderServiceUnavailable
from orderdesk.workbench.dealers import DealerDirectory

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Viewer:
    """The authenticated user looking at an order."""

    role: Role
    user_id: str | None = None

    @classmethod
    def of(cls, role: str | Role | None, user_id: str | None = None) -> "Viewer":
        return cls(role=Role.parse(role), user_id=user_id or None)


@dataclass(frozen=True)
class LineView:
    item: LineItem
    dealer_id: str
    dealer_name: str | None
    dealer_count: int
    status: FulfillmentStatus
    badge: TerminalBadge | None
    actions: frozenset[Action]
    has_picklist: bool
    scan_status: str | None = None

    @property
    def sku(self) -> str | None:
        return self.item.sku


@dataclass(frozen=True)
class Workbench:
    order_id: str
    order_status: str
    viewer: Viewer
    items: list[LineItem]
    lines: list[LineView]
    scope: StaffScope | None
    scope_state: ScopeState
    picklists: list[Picklist] = field(default_factory=list)
    dealer_groups: dict[str, list[SkuQuantity]] = field(default_factory=dict)
    dealer_names: dict[str, str] = field(default_factory=dict)
    can_bulk_create_picklist: bool = False
    can_bulk_mark_packed: bool = False
    assignable_picklist_ids: frozenset[str] = frozenset()

    @property
    def perspective(self) -> Perspective:
        return perspective_for(self.viewer.role)

    @property
    def current_picklist_id(self) -> str | None:
        return self.scope.current_picklist_id if self.scope else None

    @property
    def visible_picklists(self) -> list[Picklist]:
        """Every picklist of the order for admins; staff see only their own."""
        if self.viewer.role.is_staff:
            return list(self.scope.picklists) if self.scope else []
        return self.picklists

    def picklist(self, picklist_id: str) -> Picklist | None:
        return next((p for p in self.visible_picklists if p.picklist_id == picklist_id), None)

    def line(self, sku: str) -> LineView | None:
        return next((line for line in self.lines if line.sku == sku), None)


def _read(what: str, call: Callable[[], T | None], default: T, **context) -> T:
    try:
        result = call()
    except OrderServiceUnavailable as exc:
        logger.warning("Order service read failed, using empty default", read=what, error=str(exc), **context)
        return default
    return default if result is None else result


def _staff_scope(service: OrderServicePort, order_id: str, viewer: Viewer) -> StaffScope:
    if not viewer.user_id:
        return StaffScope()
    employee = _read("employee", lambda: service.get_employee_by_user(viewer.user_id), None, user_id=viewer.user_id)
    employee_id = employee.employee_id if employee else None
    if not employee_id:
        return StaffScope()
    picklists = _read(
        "staff_picklists",
        lambda: service.get_picklists(order_id, employee_id),
        [],
        order_id=order_id,
        employee_id=employee_id,
    )
    return StaffScope.from_picklists(order_id, employee_id, picklists)


def load_workbench(order_id: str, viewer: Viewer, service: OrderServicePort | None = None) -> Workbench:
    """Fetch the order, its picklists and (for staff) the employee's picklists, then derive every line."""
    service = service or get_order_service()
    perspective = perspective_for(viewer.role)

    order = _read("order", lambda: service.get_order(order_id), None, order_id=order_id)
    items = list(order.items) if order else []
    order_status = order.status if order else ""
    picklists = _read("picklists", lambda: service.get_picklists(order_id), [], order_id=order_id)
    picklisted_skus = {entry.sku for p in picklists if p.order_id in (None, order_id) for entry in p.sku_list}

    scope = _staff_scope(service, order_id, viewer) if viewer.role.is_staff else None
    visible = staff_visible_items(items, scope, viewer.role)
    state = scope_state(items, scope, viewer.role)

    dealers = DealerDirectory(service)
    lines = []
    for item in visible:
        dealer_id = resolve_dealer_id(item)
        badge = terminal_badge(item, order_status, perspective)
        lines.append(
            LineView(
                item=item,
                dealer_id=dealer_id,
                dealer_name=dealers.display_name(dealer_id) if dealer_id else None,
                dealer_count=dealer_count(item.dealer_id),
                status=derive_status(item, perspective),
                badge=badge,
                actions=available_actions(item, viewer.role, badge is not None),
                has_picklist=item.sku in picklisted_skus or (scope is not None and item.sku in scope.skus),
                scan_status=scope.scan_status_of(item.sku) if scope else None,
            )
        )

    groups = group_by_dealer(visible)
    workbench = Workbench(
        order_id=order_id,
        order_status=order_status,
        viewer=viewer,
        items=items,
        lines=lines,
        scope=scope,
        scope_state=state,
        picklists=picklists,
        dealer_groups=groups,
        dealer_names=dealers.names_for(groups),
        can_bulk_create_picklist=can_bulk_create_picklist(visible, viewer.role, order_status, scope),
        can_bulk_mark_packed=viewer.role.is_staff and can_bulk_mark_packed(scope, visible, order_status),
        assignable_picklist_ids=frozenset(
            p.picklist_id
            for p in picklists
            if can_assign_picklist({entry.sku for entry in p.sku_list}, items, viewer.role, order_status)
        ),
    )
    logger.debug(
        "Workbench loaded",
        order_id=order_id,
        role=viewer.role.value,
        line_count=len(items),
        visible_count=len(lines),
        scope_state=state.value,
    )
    return workbench
