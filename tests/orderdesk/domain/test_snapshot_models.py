"""Tests for parsing order-service documents into snapshot models."""

import pytest
from orderdesk.model.snapshot import UNKNOWN_DEALER, Dealer, Employee, LineItem, Order, Picklist
from pydantic import ValidationError


class TestLineItem:
    def test_camel_case_document(self):
        item = LineItem.model_validate(
            {
                "sku": "SKU-1",
                "productName": "Brake Pad",
                "quantity": 2,
                "dealerId": "D1",
                "dealerMapped": [{"dealerId": "D2"}],
                "picklistGenerated": True,
                "inspectionStarted": True,
                "inspectionCompleted": False,
                "markAsPacked": False,
            }
        )
        assert item.product_name == "Brake Pad"
        assert item.dealer_mapped[0].dealer_id == "D2"
        assert item.picklist_generated is True
        assert item.inspection_started is True

    def test_misspelled_picklist_flag(self):
        assert LineItem.model_validate({"piclistGenerated": True}).picklist_generated is True

    def test_absent_flags_are_false(self):
        item = LineItem.model_validate({"sku": "SKU-1", "markAsPacked": None})
        assert item.picklist_generated is False
        assert item.mark_as_packed is False
        assert item.dealer_mapped == []

    def test_tracking_info_status_is_lifted(self):
        item = LineItem.model_validate({"tracking_info": {"status": "Packed"}})
        assert item.tracking_status == "Packed"

    def test_explicit_tracking_status_wins(self):
        item = LineItem.model_validate({"trackingStatus": "Shipped", "tracking_info": {"status": "Packed"}})
        assert item.tracking_status == "Shipped"

    def test_dealer_reference_kept_raw(self):
        item = LineItem.model_validate({"dealerId": {"_id": "D1", "trade_name": "Acme"}})
        assert item.dealer_id == {"_id": "D1", "trade_name": "Acme"}

    def test_snapshots_are_immutable(self):
        item = LineItem.model_validate({"sku": "SKU-1"})
        with pytest.raises(ValidationError):
            item.mark_as_packed = True


class TestOrder:
    def test_order_document(self):
        order = Order.model_validate({"_id": "O1", "status": "Confirmed", "skus": [{"sku": "S1"}, {"sku": "S2"}]})
        assert order.order_id == "O1"
        assert [item.sku for item in order.items] == ["S1", "S2"]

    def test_missing_fields(self):
        order = Order.model_validate({"_id": "O1", "status": None, "skus": None})
        assert order.status == ""
        assert order.items == []


class TestPicklist:
    def test_picklist_document(self):
        picklist = Picklist.model_validate(
            {
                "picklistId": "P1",
                "linkedOrderId": "O1",
                "dealerId": "D1",
                "fulfilmentStaff": "E1",
                "skuList": [{"sku": "S1", "quantity": 3}, {"sku": "S2", "quantity": None}],
                "scanStatus": "Completed",
            }
        )
        assert picklist.order_id == "O1"
        assert [(entry.sku, entry.quantity) for entry in picklist.sku_list] == [("S1", 3), ("S2", 1)]

    def test_blank_skus_are_dropped(self):
        picklist = Picklist.model_validate({"_id": "P1", "skuList": [{"sku": ""}, {"sku": "S1"}, {"quantity": 2}]})
        assert [entry.sku for entry in picklist.sku_list] == ["S1"]


class TestDealer:
    @pytest.mark.parametrize(
        "document,name",
        [
            ({"_id": "D1", "trade_name": "Acme Parts", "legal_name": "Acme Pvt Ltd"}, "Acme Parts"),
            ({"_id": "D1", "trade_name": "", "legal_name": "Acme Pvt Ltd"}, "Acme Pvt Ltd"),
            ({"_id": "D1", "trade_name": None, "legal_name": None}, UNKNOWN_DEALER),
        ],
    )
    def test_display_name(self, document, name):
        assert Dealer.model_validate(document).display_name == name


class TestEmployee:
    def test_employee_document(self):
        employee = Employee.model_validate({"_id": "E1", "user_id": "U1", "role": "Fulfillment-Staff"})
        assert employee.employee_id == "E1"
        assert employee.user_id == "U1"
