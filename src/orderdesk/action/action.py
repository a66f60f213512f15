"""FulfillmentAction aggregate (CQRS) — ledger of dispatched fulfillment actions.

OrderDesk never owns line-item flags; the order service does. What it does
own is the record of each action it sent there, who sent it and how the
service answered. One aggregate is stored per settled dispatch.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from orderdesk.action.events import FulfillmentActionFailed, FulfillmentActionSucceeded
from orderdesk.domain import orderdesk


class ActionKind(Enum):
    ASSIGN_DEALERS = "AssignDealers"
    CREATE_PICKLIST = "CreatePicklist"
    ASSIGN_PICKLIST_TO_STAFF = "AssignPicklistToStaff"
    INSPECT_PICKLIST = "InspectPicklist"
    STOP_PICKLIST_INSPECTION = "StopPicklistInspection"
    MARK_PACKED = "MarkOrderAsPacked"


class ActionStatus(Enum):
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@orderdesk.aggregate
class FulfillmentAction:
    order_id = Identifier(required=True)
    kind = String(required=True, max_length=50, choices=ActionKind)
    target = Text()  # dealer and SKU keys, unbounded on large orders
    requested_by = String(max_length=100)
    payload = Text()  # JSON body sent to the order service
    status = String(required=True, max_length=20, choices=ActionStatus)
    message = String(max_length=500)
    requested_at = DateTime()
    settled_at = DateTime()

    @classmethod
    def record(
        cls,
        order_id: str,
        kind: ActionKind,
        target: str,
        payload: dict,
        success: bool,
        message: str = "",
        requested_by: str | None = None,
        requested_at: datetime | None = None,
    ):
        """Record a settled action and raise the matching event."""
        now = datetime.now(UTC)
        action = cls(
            order_id=order_id,
            kind=kind.value,
            target=target,
            requested_by=requested_by or "",
            payload=json.dumps(payload),
            status=(ActionStatus.SUCCEEDED if success else ActionStatus.FAILED).value,
            message=(message or "")[:500],
            requested_at=requested_at or now,
            settled_at=now,
        )
        if success:
            action.raise_(
                FulfillmentActionSucceeded(
                    action_id=str(action.id),
                    order_id=order_id,
                    kind=kind.value,
                    target=target,
                    requested_by=requested_by or "",
                    settled_at=now,
                )
            )
        else:
            action.raise_(
                FulfillmentActionFailed(
                    action_id=str(action.id),
                    order_id=order_id,
                    kind=kind.value,
                    target=target,
                    requested_by=requested_by or "",
                    reason=action.message,
                    settled_at=now,
                )
            )
        return action

    @property
    def succeeded(self) -> bool:
        return self.status == ActionStatus.SUCCEEDED.value
