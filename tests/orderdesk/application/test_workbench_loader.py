"""Application tests for loading an order workbench from the order service."""

import pytest
from orderdesk.engine.actions import Action
from orderdesk.engine.grouping import SkuQuantity
from orderdesk.engine.roles import Perspective, Role
from orderdesk.engine.staff_scope import ScopeState
from orderdesk.engine.status import FulfillmentStatus, TerminalBadge
from orderdesk.model.snapshot import UNKNOWN_DEALER
from orderdesk.workbench.loader import Viewer, load_workbench

ADMIN = Viewer.of("Fulfillment-Admin", "U-ADMIN")
STAFF = Viewer.of("Fulfillment-Staff", "U-STAFF")


@pytest.fixture()
def service(order_service):
    order_service.add_order(
        "O1",
        [
            {"sku": "S1", "dealerId": "D1", "quantity": 2, "productName": "Brake Pad"},
            {"sku": "S2", "dealerId": "D1", "dealerMapped": [{"dealerId": "D2"}]},
            {"sku": "S3", "dealerId": "N/A"},
        ],
    )
    order_service.add_dealer("D1", trade_name="Acme Parts")
    order_service.add_dealer("D2", legal_name="Bolt Traders Pvt Ltd")
    order_service.add_employee("E1", "U-STAFF")
    return order_service


class TestViewer:
    def test_of_parses_role(self):
        viewer = Viewer.of("Fullfillment-Admin", "")
        assert viewer.role is Role.FULFILLMENT_ADMIN
        assert viewer.user_id is None


class TestAdminWorkbench:
    def test_every_line_is_visible(self, service):
        workbench = load_workbench("O1", ADMIN)
        assert [line.sku for line in workbench.lines] == ["S1", "S2", "S3"]
        assert workbench.perspective is Perspective.ADMIN
        assert workbench.scope is None
        assert workbench.scope_state is ScopeState.ALL_ITEMS

    def test_lines_carry_resolved_dealer_and_actions(self, service):
        workbench = load_workbench("O1", ADMIN)
        s1, s2, s3 = workbench.lines
        assert (s1.dealer_id, s1.dealer_name, s1.dealer_count) == ("D1", "Acme Parts", 1)
        assert (s2.dealer_id, s2.dealer_name) == ("D2", "Bolt Traders Pvt Ltd")
        assert (s3.dealer_id, s3.dealer_name, s3.dealer_count) == ("", None, 0)
        assert s1.actions == {Action.CREATE_PICKLIST}
        assert s3.actions == {Action.ASSIGN_DEALER}
        assert s1.status is FulfillmentStatus.PENDING
        assert s1.badge is None

    def test_dealer_groups_and_names(self, service):
        workbench = load_workbench("O1", ADMIN)
        assert workbench.dealer_groups == {"D1": [SkuQuantity("S1", 2)], "D2": [SkuQuantity("S2", 1)]}
        assert workbench.dealer_names == {"D1": "Acme Parts", "D2": "Bolt Traders Pvt Ltd"}
        assert workbench.can_bulk_create_picklist is True
        assert workbench.can_bulk_mark_packed is False

    def test_unknown_dealer_name(self, service):
        service.add_order("O2", [{"sku": "S9", "dealerId": "D404"}])
        workbench = load_workbench("O2", ADMIN)
        assert workbench.lines[0].dealer_name == UNKNOWN_DEALER

    def test_cancelled_order_is_terminal(self, service):
        service.orders["O1"]["status"] = "Cancelled"
        workbench = load_workbench("O1", ADMIN)
        assert {line.badge for line in workbench.lines} == {TerminalBadge.CANCELLED}
        assert all(line.actions == frozenset() for line in workbench.lines)
        assert workbench.can_bulk_create_picklist is False

    def test_picklisted_lines_are_flagged(self, service):
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}])
        workbench = load_workbench("O1", ADMIN)
        assert workbench.line("S1").has_picklist is True
        assert workbench.line("S2").has_picklist is False


class TestStaffWorkbench:
    def test_staff_sees_only_their_picklisted_skus(self, service):
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], fulfilment_staff="E1", picklist_id="P1")
        service.add_picklist("O1", "D2", [{"sku": "S2", "quantity": 1}], fulfilment_staff="E9", picklist_id="P2")
        workbench = load_workbench("O1", STAFF)
        assert [line.sku for line in workbench.lines] == ["S1"]
        assert workbench.perspective is Perspective.STAFF
        assert workbench.scope_state is ScopeState.READY
        assert workbench.current_picklist_id == "P1"
        assert workbench.lines[0].scan_status == "Pending"

    def test_nothing_assigned(self, service):
        workbench = load_workbench("O1", STAFF)
        assert workbench.lines == []
        assert workbench.scope_state is ScopeState.NOTHING_ASSIGNED

    def test_identity_pending_without_employee_record(self, service):
        workbench = load_workbench("O1", Viewer.of("Fulfillment-Staff", "U-UNKNOWN"))
        assert workbench.lines == []
        assert workbench.scope_state is ScopeState.IDENTITY_PENDING

    def test_bulk_mark_packed_after_scan_completes(self, service):
        service.orders["O1"]["skus"][0]["piclistGenerated"] = True
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], fulfilment_staff="E1", picklist_id="P1")
        assert load_workbench("O1", STAFF).can_bulk_mark_packed is False

        service.set_scan_status("P1", "Completed")
        workbench = load_workbench("O1", STAFF)
        assert workbench.can_bulk_mark_packed is True
        assert workbench.can_bulk_create_picklist is False


class TestDegradedReads:
    def test_unavailable_service_yields_empty_workbench(self, service):
        service.configure(reads_available=False)
        workbench = load_workbench("O1", ADMIN)
        assert workbench.lines == []
        assert workbench.order_status == ""
        assert workbench.picklists == []

    def test_missing_order(self, service):
        workbench = load_workbench("O-MISSING", ADMIN)
        assert workbench.lines == []
        assert workbench.can_bulk_create_picklist is False

    def test_failed_dealer_lookup_falls_back_to_unknown(self, service, monkeypatch):
        from orderdesk.service.port import OrderServiceUnavailable

        def broken(dealer_id):
            raise OrderServiceUnavailable("dealer service down")

        monkeypatch.setattr(service, "get_dealer", broken)
        workbench = load_workbench("O1", ADMIN)
        assert workbench.line("S1").dealer_name == UNKNOWN_DEALER
        assert workbench.dealer_names["D1"] == UNKNOWN_DEALER

    def test_malformed_order_yields_empty_workbench(self, service):
        service.add_order("O2", [{"sku": 12345, "dealerId": "D1"}])
        workbench = load_workbench("O2", ADMIN)
        assert workbench.lines == []
        assert workbench.order_status == ""

    def test_malformed_picklist_does_not_hide_the_order(self, service):
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], picklist_id="P1")
        service.picklists["BROKEN"] = {"linkedOrderId": "O1", "dealerId": "D2", "skuList": [{"sku": "S2"}]}
        workbench = load_workbench("O1", ADMIN)
        assert [line.sku for line in workbench.lines] == ["S1", "S2", "S3"]
        assert [p.picklist_id for p in workbench.picklists] == ["P1"]
        assert workbench.line("S1").has_picklist is True
        assert workbench.line("S2").has_picklist is False

    def test_malformed_staff_picklist_is_skipped(self, service):
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], fulfilment_staff="E1", picklist_id="P1")
        service.picklists["BROKEN"] = {"linkedOrderId": "O1", "fulfilmentStaff": "E1", "skuList": [{"sku": "S2"}]}
        workbench = load_workbench("O1", STAFF)
        assert [line.sku for line in workbench.lines] == ["S1"]
        assert workbench.current_picklist_id == "P1"


class TestPicklistListing:
    def test_admin_sees_every_picklist(self, service):
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], fulfilment_staff="E1", picklist_id="P1")
        service.add_picklist("O1", "D2", [{"sku": "S2", "quantity": 1}], picklist_id="P2")
        workbench = load_workbench("O1", ADMIN)
        assert [p.picklist_id for p in workbench.visible_picklists] == ["P1", "P2"]
        assert workbench.assignable_picklist_ids == {"P1", "P2"}

    def test_staff_see_only_their_own(self, service):
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], fulfilment_staff="E1", picklist_id="P1")
        service.add_picklist("O1", "D2", [{"sku": "S2", "quantity": 1}], fulfilment_staff="E9", picklist_id="P2")
        workbench = load_workbench("O1", STAFF)
        assert [p.picklist_id for p in workbench.visible_picklists] == ["P1"]
        assert workbench.assignable_picklist_ids == frozenset()

    def test_cancelled_order_has_nothing_to_assign(self, service):
        service.orders["O1"]["status"] = "Cancelled"
        service.add_picklist("O1", "D1", [{"sku": "S1", "quantity": 2}], picklist_id="P1")
        assert load_workbench("O1", ADMIN).assignable_picklist_ids == frozenset()
