"""Picklist inspection — commands and handler.

Fulfillment staff start an inspection on a SKU of their picklist and stop it
once the SKU has been checked.
"""

from protean import handle
from protean.fields import Identifier, String

from orderdesk.action.action import ActionKind, FulfillmentAction
from orderdesk.action.dispatch import dispatch
from orderdesk.domain import orderdesk


@orderdesk.command(part_of="FulfillmentAction")
class InspectPicklist:
    """Start inspecting a SKU on a picklist."""

    order_id = Identifier(required=True)
    picklist_id = String(required=True, max_length=100)
    employee_id = String(required=True, max_length=100)
    sku = String(required=True, max_length=100)
    requested_by = String(max_length=100)


@orderdesk.command(part_of="FulfillmentAction")
class StopPicklistInspection:
    """Stop the inspection of a SKU on a picklist."""

    order_id = Identifier(required=True)
    picklist_id = String(required=True, max_length=100)
    employee_id = String(required=True, max_length=100)
    sku = String(required=True, max_length=100)
    requested_by = String(max_length=100)


def _payload(command) -> dict:
    return {"picklistId": command.picklist_id, "employeeId": command.employee_id, "sku": command.sku}


@orderdesk.command_handler(part_of=FulfillmentAction)
class InspectionHandler:
    @handle(InspectPicklist)
    def inspect_picklist(self, command):
        return dispatch(
            ActionKind.INSPECT_PICKLIST,
            order_id=command.order_id,
            target=f"{command.picklist_id}:{command.sku}",
            payload=_payload(command),
            call=lambda service: service.inspect_picklist(command.picklist_id, command.employee_id, command.sku),
            requested_by=command.requested_by,
        )

    @handle(StopPicklistInspection)
    def stop_picklist_inspection(self, command):
        return dispatch(
            ActionKind.STOP_PICKLIST_INSPECTION,
            order_id=command.order_id,
            target=f"{command.picklist_id}:{command.sku}",
            payload=_payload(command),
            call=lambda service: service.stop_picklist_inspection(
                command.picklist_id, command.employee_id, command.sku
            ),
            requested_by=command.requested_by,
        )
