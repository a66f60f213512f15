"""Tests for the FulfillmentAction ledger aggregate."""

import json
from datetime import UTC, datetime

from orderdesk.action.action import ActionKind, ActionStatus, FulfillmentAction
from orderdesk.action.events import FulfillmentActionFailed, FulfillmentActionSucceeded


def _record(success=True, **overrides):
    defaults = {
        "order_id": "O1",
        "kind": ActionKind.CREATE_PICKLIST,
        "target": "D1:S1",
        "payload": {"orderId": "O1", "dealerId": "D1", "skuList": [{"sku": "S1", "quantity": 1}]},
        "success": success,
        "requested_by": "U1",
    }
    defaults.update(overrides)
    return FulfillmentAction.record(**defaults)


class TestRecordSucceeded:
    def test_fields(self):
        action = _record()
        assert action.order_id == "O1"
        assert action.kind == ActionKind.CREATE_PICKLIST.value
        assert action.status == ActionStatus.SUCCEEDED.value
        assert action.succeeded is True
        assert action.requested_by == "U1"
        assert action.settled_at is not None

    def test_payload_is_stored_as_json(self):
        action = _record()
        assert json.loads(action.payload)["dealerId"] == "D1"

    def test_raises_succeeded_event(self):
        action = _record()
        assert len(action._events) == 1
        event = action._events[0]
        assert isinstance(event, FulfillmentActionSucceeded)
        assert event.action_id == str(action.id)
        assert event.kind == "CreatePicklist"

    def test_requested_at_is_kept(self):
        requested_at = datetime(2026, 1, 5, 10, 30, tzinfo=UTC)
        action = _record(requested_at=requested_at)
        assert action.requested_at.isoformat().startswith("2026-01-05T10:30")


class TestRecordFailed:
    def test_fields(self):
        action = _record(success=False, message="Dealer is inactive")
        assert action.status == ActionStatus.FAILED.value
        assert action.succeeded is False
        assert action.message == "Dealer is inactive"

    def test_raises_failed_event_with_reason(self):
        action = _record(success=False, message="Dealer is inactive")
        event = action._events[0]
        assert isinstance(event, FulfillmentActionFailed)
        assert event.reason == "Dealer is inactive"

    def test_long_messages_are_truncated(self):
        action = _record(success=False, message="x" * 800)
        assert len(action.message) == 500

    def test_transport_sized_reason_reaches_the_event(self):
        reason = "HTTPConnectionPool(host='orders.internal', port=443): Max retries exceeded " + "x" * 270
        action = _record(success=False, message=reason)
        event = action._events[0]
        assert len(reason) > 255
        assert event.reason == reason
        assert action.message == reason


class TestRecordTarget:
    def test_target_listing_many_skus(self):
        target = "D1:" + ",".join(f"TOPRISE-SKU-{n:04d}" for n in range(30))
        action = _record(target=target)
        assert action.target == target
        assert action._events[0].target == target
