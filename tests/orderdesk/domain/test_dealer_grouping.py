"""Tests for dealer/SKU grouping and create-picklist defaults."""

from orderdesk.engine.grouping import PicklistDraft, SkuQuantity, group_by_dealer, picklist_defaults
from orderdesk.model.snapshot import LineItem


def _line(sku, dealer=None, mapped=None, quantity=1, picklist=False):
    return LineItem.model_validate(
        {
            "sku": sku,
            "dealerId": dealer,
            "dealerMapped": [{"dealerId": mapped}] if mapped else [],
            "quantity": quantity,
            "piclistGenerated": picklist,
        }
    )


class TestGroupByDealer:
    def test_groups_by_resolved_dealer_in_input_order(self):
        items = [
            _line("S1", dealer="D1", quantity=2),
            _line("S2", dealer="D2"),
            _line("S3", dealer="D9", mapped="D1", quantity=5),
        ]
        assert group_by_dealer(items) == {
            "D1": [SkuQuantity("S1", 2), SkuQuantity("S3", 5)],
            "D2": [SkuQuantity("S2", 1)],
        }

    def test_skips_lines_without_dealer(self):
        assert group_by_dealer([_line("S1", dealer="N/A"), _line("S2")]) == {}

    def test_skips_lines_without_sku(self):
        assert group_by_dealer([_line(None, dealer="D1"), _line("", dealer="D1")]) == {}

    def test_skips_lines_with_picklist(self):
        assert group_by_dealer([_line("S1", dealer="D1", picklist=True)]) == {}

    def test_missing_quantity_defaults_to_one(self):
        assert group_by_dealer([_line("S1", dealer="D1", quantity=None)]) == {"D1": [SkuQuantity("S1", 1)]}

    def test_zero_quantity_is_kept(self):
        assert group_by_dealer([_line("S1", dealer="D1", quantity=0)]) == {"D1": [SkuQuantity("S1", 0)]}

    def test_numeric_dealer_ids_group_with_strings(self):
        items = [_line("S1", dealer=12), _line("S2", dealer="12")]
        assert list(group_by_dealer(items)) == ["12"]


class TestPicklistDefaults:
    def test_bulk_mode_returns_a_draft_per_dealer(self):
        items = [_line("S1", dealer="D1"), _line("S2", dealer="D2", quantity=3)]
        assert picklist_defaults(items) == [
            PicklistDraft("D1", [SkuQuantity("S1", 1)]),
            PicklistDraft("D2", [SkuQuantity("S2", 3)]),
        ]

    def test_single_mode_offers_only_the_clicked_sku(self):
        items = [_line("S1", dealer="D1"), _line("S2", dealer="D1", quantity=4)]
        assert picklist_defaults(items, selected=items[1]) == [PicklistDraft("D1", [SkuQuantity("S2", 4)])]

    def test_single_mode_uses_the_mapped_dealer(self):
        selected = _line("S1", dealer="D1", mapped="D2")
        assert picklist_defaults([selected], selected=selected) == [PicklistDraft("D2", [SkuQuantity("S1", 1)])]

    def test_single_mode_ineligible_line(self):
        selected = _line("S1", dealer="D1", picklist=True)
        assert picklist_defaults([selected], selected=selected) == []
