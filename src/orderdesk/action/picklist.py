"""Picklists: creation and hand-off to fulfilment staff."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text

from orderdesk.action.action import ActionKind, FulfillmentAction
from orderdesk.action.dispatch import dispatch
from orderdesk.domain import orderdesk
from orderdesk.engine.identifiers import normalize_dealer_id


@orderdesk.command(part_of="FulfillmentAction")
class CreatePicklist:
    """Ask the order service to create a picklist for one dealer's SKUs."""

    order_id = Identifier(required=True)
    dealer_id = String(required=True, max_length=100)
    fulfilment_staff = String(max_length=100)
    sku_list = Text(required=True)  # JSON list of {"sku", "quantity"}
    requested_by = String(max_length=100)


@orderdesk.command_handler(part_of=FulfillmentAction)
class CreatePicklistHandler:
    @handle(CreatePicklist)
    def create_picklist(self, command):
        dealer_id = normalize_dealer_id(command.dealer_id)
        if not dealer_id:
            raise ValidationError({"dealer_id": ["A dealer is required to create a picklist"]})

        raw = json.loads(command.sku_list) if isinstance(command.sku_list, str) else command.sku_list
        sku_list = [
            {"sku": entry["sku"], "quantity": entry.get("quantity") or 1} for entry in raw or [] if entry.get("sku")
        ]
        if not sku_list:
            raise ValidationError({"sku_list": ["A picklist needs at least one SKU"]})

        staff = command.fulfilment_staff or None
        return dispatch(
            ActionKind.CREATE_PICKLIST,
            order_id=command.order_id,
            target=f"{dealer_id}:" + ",".join(sorted(entry["sku"] for entry in sku_list)),
            payload={
                "orderId": command.order_id,
                "dealerId": dealer_id,
                "fulfilmentStaff": staff,
                "skuList": sku_list,
            },
            call=lambda service: service.create_picklist(command.order_id, dealer_id, staff, sku_list),
            requested_by=command.requested_by,
        )


@orderdesk.command(part_of="FulfillmentAction")
class AssignPicklistToStaff:
    """Hand an existing picklist to a fulfilment staff member."""

    order_id = Identifier(required=True)
    picklist_id = String(required=True, max_length=100)
    staff_id = String(required=True, max_length=100)
    requested_by = String(max_length=100)


@orderdesk.command_handler(part_of=FulfillmentAction)
class AssignPicklistToStaffHandler:
    @handle(AssignPicklistToStaff)
    def assign_picklist_to_staff(self, command):
        staff_id = (command.staff_id or "").strip()
        if not staff_id:
            raise ValidationError({"staff_id": ["A staff member is required to assign a picklist"]})

        return dispatch(
            ActionKind.ASSIGN_PICKLIST_TO_STAFF,
            order_id=command.order_id,
            target=command.picklist_id,
            payload={"picklistId": command.picklist_id, "staffId": staff_id},
            call=lambda service: service.assign_picklist_to_staff(command.picklist_id, staff_id),
            requested_by=command.requested_by,
        )
