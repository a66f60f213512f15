"""Shared dispatch path for every fulfillment action handler.

Each action makes exactly one call to the order service. The outcome is
recorded in the FulfillmentAction ledger and returned to the caller, who
refetches on success. A failed call leaves every flag untouched, so there is
nothing to roll back.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from orderdesk.action.action import ActionKind, FulfillmentAction
from orderdesk.action.guard import in_flight
from orderdesk.service import get_order_service
from orderdesk.service.port import OrderServicePort, ServiceResult

logger = structlog.get_logger(__name__)

OUTCOME_SUCCEEDED = "succeeded"
OUTCOME_FAILED = "failed"
OUTCOME_DUPLICATE = "duplicate"

FAILURE_MESSAGES = {
    ActionKind.ASSIGN_DEALERS: "Failed to assign dealers",
    ActionKind.CREATE_PICKLIST: "Failed to create picklist",
    ActionKind.ASSIGN_PICKLIST_TO_STAFF: "Failed to assign picklist",
    ActionKind.INSPECT_PICKLIST: "Failed to start inspection",
    ActionKind.STOP_PICKLIST_INSPECTION: "Failed to stop inspection",
    ActionKind.MARK_PACKED: "Failed to mark order as packed",
}


def dispatch(
    kind: ActionKind,
    order_id: str,
    target: str,
    payload: dict,
    call: Callable[[OrderServicePort], ServiceResult],
    requested_by: str | None = None,
) -> dict:
    """Send one action to the order service unless the same one is in flight.

    Returns ``{"status", "action_id", "message", "data"}`` where status is
    succeeded, failed or duplicate.
    """
    key = (kind.value, str(order_id), target)
    with in_flight.hold(key) as acquired:
        if not acquired:
            logger.info(
                "Ignoring duplicate fulfillment action while in flight",
                kind=kind.value,
                order_id=order_id,
                target=target,
            )
            return {"status": OUTCOME_DUPLICATE, "action_id": None, "message": "Action already in progress", "data": {}}

        requested_at = datetime.now(UTC)
        result = call(get_order_service())

    message = result.message or ("" if result.success else FAILURE_MESSAGES[kind])
    action = FulfillmentAction.record(
        order_id=order_id,
        kind=kind,
        target=target,
        payload=payload,
        success=result.success,
        message=message,
        requested_by=requested_by,
        requested_at=requested_at,
    )
    current_domain.repository_for(FulfillmentAction).add(action)

    if result.success:
        logger.info(
            "Fulfillment action succeeded",
            kind=kind.value,
            order_id=order_id,
            target=target,
            action_id=str(action.id),
        )
    else:
        logger.warning(
            "Fulfillment action failed",
            kind=kind.value,
            order_id=order_id,
            target=target,
            action_id=str(action.id),
            reason=message,
        )
    return {
        "status": OUTCOME_SUCCEEDED if result.success else OUTCOME_FAILED,
        "action_id": str(action.id),
        "message": message,
        "data": dict(result.data),
    }
