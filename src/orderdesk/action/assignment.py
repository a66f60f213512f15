"""Dealer assignment — command and handler.

Records an explicit per-SKU dealer for lines that have no resolvable dealer.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text

from orderdesk.action.action import ActionKind, FulfillmentAction
from orderdesk.action.dispatch import dispatch
from orderdesk.domain import orderdesk
from orderdesk.engine.identifiers import normalize_dealer_id


@orderdesk.command(part_of="FulfillmentAction")
class AssignDealers:
    """Assign a dealer to one or more SKUs of an order."""

    order_id = Identifier(required=True)
    assignments = Text(required=True)  # JSON list of {"sku", "dealerId"}
    requested_by = String(max_length=100)


@orderdesk.command_handler(part_of=FulfillmentAction)
class AssignDealersHandler:
    @handle(AssignDealers)
    def assign_dealers(self, command):
        raw = json.loads(command.assignments) if isinstance(command.assignments, str) else command.assignments
        assignments = []
        for entry in raw or []:
            sku = entry.get("sku")
            dealer_id = normalize_dealer_id(entry.get("dealerId"))
            if sku and dealer_id:
                assignments.append({"sku": sku, "dealerId": dealer_id})
        if not assignments:
            raise ValidationError({"assignments": ["At least one SKU must be assigned a dealer"]})

        return dispatch(
            ActionKind.ASSIGN_DEALERS,
            order_id=command.order_id,
            target=",".join(sorted(a["sku"] for a in assignments)),
            payload={"orderId": command.order_id, "assignments": assignments},
            call=lambda service: service.assign_dealers(command.order_id, assignments),
            requested_by=command.requested_by,
        )
