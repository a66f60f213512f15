"""Fulfillment status derivation for order lines.

A line's progress is stored by the backend as four independently-settable
flags plus a legacy free-text tracking label. This module projects them onto
a single display status, using one of two first-match state machines:

Admin perspective:
    picklist_generated and mark_as_packed       → PACKED
    picklist_generated                          → PICKLIST_GENERATED
    otherwise                                   → PENDING

Staff perspective (adds inspection granularity):
    all four flags                              → PACKED
    picklist_generated, inspection started+done → INSPECTION_COMPLETED
    picklist_generated, inspection started      → INSPECTION_IN_PROGRESS
    picklist_generated                          → PICKLIST_GENERATED
    otherwise                                   → PENDING

Separately, the packed indicator (``is_packed``) decides whether the line is
terminal, regardless of which status label is shown.

The order status never changes the derived label, so ``derive_status`` does
not take it. It only feeds ``is_packed`` and ``terminal_badge``, which decide
whether the line is terminal.
"""

from enum import Enum

import structlog

from orderdesk.engine.roles import Perspective
from orderdesk.model.snapshot import LineItem

logger = structlog.get_logger(__name__)

PACKED_LABELS = frozenset({"packed", "packed completed", "packedcompleted"})
CANCELLED_ORDER_STATUS = "Cancelled"


class FulfillmentStatus(Enum):
    PENDING = "Pending"
    PICKLIST_GENERATED = "Picklist Generated"
    INSPECTION_IN_PROGRESS = "Inspection In Progress"
    INSPECTION_COMPLETED = "Inspection Completed"
    PACKED = "Packed"


class TerminalBadge(Enum):
    """Shown in place of the action menu once a line can no longer progress."""

    PACKED = "Packed Completed"
    CANCELLED = "Cancelled"


class FlagViolation(Enum):
    COMPLETED_WITHOUT_START = "inspection_completed_without_inspection_started"
    INSPECTION_WITHOUT_PICKLIST = "inspection_without_picklist"
    PACKED_WITHOUT_PICKLIST = "mark_as_packed_without_picklist"


def flag_violations(item: LineItem) -> list[FlagViolation]:
    """List the ways a line's flags break the monotonic lifecycle.

    The backend is expected to set flags in order (picklist, inspection
    start, inspection completion, packed); any other combination is an
    inconsistent backend state.
    """
    violations = []
    if item.inspection_completed and not item.inspection_started:
        violations.append(FlagViolation.COMPLETED_WITHOUT_START)
    if (item.inspection_started or item.inspection_completed) and not item.picklist_generated:
        violations.append(FlagViolation.INSPECTION_WITHOUT_PICKLIST)
    if item.mark_as_packed and not item.picklist_generated:
        violations.append(FlagViolation.PACKED_WITHOUT_PICKLIST)
    return violations


def _admin_status(item: LineItem) -> FulfillmentStatus:
    if item.picklist_generated and item.mark_as_packed:
        return FulfillmentStatus.PACKED
    if item.picklist_generated:
        return FulfillmentStatus.PICKLIST_GENERATED
    return FulfillmentStatus.PENDING


def _staff_status(item: LineItem) -> FulfillmentStatus:
    if item.picklist_generated and item.mark_as_packed and item.inspection_completed and item.inspection_started:
        return FulfillmentStatus.PACKED
    if item.picklist_generated and item.inspection_started and item.inspection_completed:
        return FulfillmentStatus.INSPECTION_COMPLETED
    if item.picklist_generated and item.inspection_started:
        return FulfillmentStatus.INSPECTION_IN_PROGRESS
    if item.picklist_generated:
        return FulfillmentStatus.PICKLIST_GENERATED
    return FulfillmentStatus.PENDING


_STATE_MACHINES = {
    Perspective.ADMIN: _admin_status,
    Perspective.STAFF: _staff_status,
}


def derive_status(item: LineItem, perspective: Perspective) -> FulfillmentStatus:
    """Derive the display status of a line for the given perspective.

    Inconsistent flag combinations still map to the status the state machine
    yields, but each violation is logged so the backend state can be fixed.
    """
    for violation in flag_violations(item):
        logger.warning(
            "Inconsistent fulfillment flags on order line",
            sku=item.sku,
            violation=violation.value,
            picklist_generated=item.picklist_generated,
            inspection_started=item.inspection_started,
            inspection_completed=item.inspection_completed,
            mark_as_packed=item.mark_as_packed,
        )
    return _STATE_MACHINES[perspective](item)


def is_packed(item: LineItem, order_status: str | None) -> bool:
    """The packed indicator: terminal, suppresses every further action.

    The line's own tracking label is preferred; the order status is only
    consulted when the line has none.
    """
    if item.mark_as_packed:
        return True
    label = item.tracking_status or order_status or ""
    return label.lower() in PACKED_LABELS


def is_cancelled(order_status: str | None) -> bool:
    return order_status == CANCELLED_ORDER_STATUS


def terminal_badge(item: LineItem, order_status: str | None, perspective: Perspective) -> TerminalBadge | None:
    """Return the badge that replaces the action menu, if any.

    Cancellation only terminates the admin action area; staff only ever see
    the packed badge.
    """
    if perspective is Perspective.ADMIN and is_cancelled(order_status):
        return TerminalBadge.CANCELLED
    if is_packed(item, order_status):
        return TerminalBadge.PACKED
    return None
