"""Role-gated fulfillment actions.

Given a role and a line's derived state, decides which next steps the
dashboard offers. Hiding an action is the only precondition check made
here; the backend stays the final authority for anything dispatched.
"""

from enum import Enum

from orderdesk.engine.identifiers import resolve_dealer_id
from orderdesk.engine.roles import Role, perspective_for
from orderdesk.engine.staff_scope import StaffScope, all_scans_completed
from orderdesk.engine.status import is_cancelled, is_packed, terminal_badge
from orderdesk.model.snapshot import LineItem


class Action(Enum):
    ASSIGN_DEALER = "assign_dealer"
    CREATE_PICKLIST = "create_picklist"
    MARK_PACKED = "mark_packed"
    INSPECT = "inspect"
    STOP_INSPECT = "stop_inspect"


def is_order_terminal(item: LineItem, order_status: str | None, role: Role) -> bool:
    """Whether the line shows a terminal badge instead of an action menu."""
    return terminal_badge(item, order_status, perspective_for(role)) is not None


def _admin_actions(item: LineItem) -> set[Action]:
    actions = set()
    dealer_id = resolve_dealer_id(item)
    if not dealer_id:
        actions.add(Action.ASSIGN_DEALER)
    if dealer_id and not item.picklist_generated:
        actions.add(Action.CREATE_PICKLIST)
    if item.picklist_generated and not item.mark_as_packed:
        actions.add(Action.MARK_PACKED)
    return actions


def _staff_actions(item: LineItem) -> set[Action]:
    actions = set()
    if item.picklist_generated and not item.inspection_started and not item.inspection_completed:
        actions.add(Action.INSPECT)
    if item.inspection_started and not item.inspection_completed:
        actions.add(Action.STOP_INSPECT)
    return actions


def available_actions(item: LineItem, role: Role, is_order_terminal: bool) -> frozenset[Action]:
    """Per-line actions currently permitted for ``role``.

    Staff bulk packing works over the whole visible set and is decided by
    ``can_bulk_mark_packed`` instead.
    """
    if is_order_terminal:
        return frozenset()
    if role.is_admin:
        return frozenset(_admin_actions(item))
    if role.is_staff:
        return frozenset(_staff_actions(item))
    return frozenset()


def can_bulk_mark_packed(scope: StaffScope | None, visible_items: list[LineItem], order_status: str | None) -> bool:
    """Staff bulk mark-packed over every visible line.

    Needs a current picklist for the staff member and a completed scan for
    every visible SKU; hidden once every visible line is already packed.
    """
    if scope is None or not scope.current_picklist_id or not visible_items:
        return False
    if all(is_packed(item, order_status) for item in visible_items):
        return False
    return all_scans_completed(visible_items, scope)


def can_bulk_create_picklist(
    items: list[LineItem],
    role: Role,
    order_status: str | None,
    scope: StaffScope | None = None,
) -> bool:
    """Whether the "Create Picklist" button for the whole order is shown.

    For staff, ``items`` is the visible set; the button disappears once every
    visible SKU's scan has completed.
    """
    has_unpicklisted = any(not item.picklist_generated for item in items)
    if role.is_admin:
        return has_unpicklisted and not is_cancelled(order_status)
    if role.is_staff:
        return bool(items) and has_unpicklisted and not all_scans_completed(items, scope)
    return False


def can_assign_picklist(
    picklist_skus: set[str],
    items: list[LineItem],
    role: Role,
    order_status: str | None,
) -> bool:
    """Whether an admin may hand a picklist to a staff member.

    Only picklists that still hold an unpacked line of a live order qualify.
    """
    if not role.is_admin or is_cancelled(order_status):
        return False
    return any(not is_packed(item, order_status) for item in items if item.sku in picklist_skus)
