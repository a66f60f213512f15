"""Fulfillment action events — facts about actions dispatched to the order service."""

from protean.fields import DateTime, Identifier, String, Text

from orderdesk.domain import orderdesk


@orderdesk.event(part_of="FulfillmentAction")
class FulfillmentActionSucceeded:
    """The order service accepted a fulfillment action."""

    __version__ = 1

    action_id = Identifier(required=True)
    order_id = Identifier(required=True)
    kind = String(required=True)
    target = Text()
    requested_by = String(max_length=100)
    settled_at = DateTime(required=True)


@orderdesk.event(part_of="FulfillmentAction")
class FulfillmentActionFailed:
    """The order service rejected a fulfillment action; nothing changed."""

    __version__ = 1

    action_id = Identifier(required=True)
    order_id = Identifier(required=True)
    kind = String(required=True)
    target = Text()
    requested_by = String(max_length=100)
    reason = String(max_length=500)
    settled_at = DateTime(required=True)
