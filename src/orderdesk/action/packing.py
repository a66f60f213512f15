"""Mark packed — command and handler.

Marks either a whole picklist or a single SKU as packed, with the package
weight per SKU. ``force_packing`` is set for Super-admin and
Fulfillment-Admin so the backend skips its scan-completion checks.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String, Text

from orderdesk.action.action import ActionKind, FulfillmentAction
from orderdesk.action.dispatch import dispatch
from orderdesk.domain import orderdesk


@orderdesk.command(part_of="FulfillmentAction")
class MarkOrderAsPacked:
    """Mark a picklist, or a single SKU when no picklist is known, as packed."""

    order_id = Identifier(required=True)
    dealer_id = String(max_length=100)
    picklist_id = String(max_length=100)
    sku = String(max_length=100)
    weights = Text()  # JSON object of sku -> weight in kg
    secure_package_amount = Float(default=0.0)
    force_packing = Boolean(default=False)
    requested_by = String(max_length=100)


@orderdesk.command_handler(part_of=FulfillmentAction)
class MarkPackedHandler:
    @handle(MarkOrderAsPacked)
    def mark_order_as_packed(self, command):
        if not command.picklist_id and not command.sku:
            raise ValidationError({"picklist_id": ["A picklist or a SKU is required to mark packed"]})

        weights = json.loads(command.weights) if isinstance(command.weights, str) else (command.weights or {})
        payload = {
            "orderId": command.order_id,
            "dealerId": command.dealer_id or "",
            "weight_object": weights,
            "securePackageAmount": command.secure_package_amount or 0.0,
            "forcePacking": bool(command.force_packing),
        }
        if command.picklist_id:
            payload["picklistId"] = command.picklist_id
        else:
            payload["sku"] = command.sku

        return dispatch(
            ActionKind.MARK_PACKED,
            order_id=command.order_id,
            target=command.picklist_id or command.sku,
            payload=payload,
            call=lambda service: service.mark_order_as_packed(
                command.order_id,
                command.dealer_id or "",
                picklist_id=command.picklist_id or None,
                sku=None if command.picklist_id else command.sku,
                weights=weights,
                secure_package_amount=command.secure_package_amount or 0.0,
                force_packing=bool(command.force_packing),
            ),
            requested_by=command.requested_by,
        )
