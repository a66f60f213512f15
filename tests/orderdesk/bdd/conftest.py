"""Shared BDD fixtures and step definitions for the OrderDesk domain."""

from orderdesk.model.snapshot import LineItem
from pytest_bdd import given, parsers

_FLAG_NAMES = ("picklistGenerated", "inspectionStarted", "inspectionCompleted", "markAsPacked")


def _line(**data):
    return LineItem.model_validate({"sku": "SKU-BDD-1", "quantity": 1, **data})


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an order line with no dealer", target_fixture="item")
def line_without_dealer():
    return _line(dealerId="", dealerMapped=[], picklistGenerated=False)


@given(
    parsers.cfparse('an order line with dealer "{legacy}" mapped to dealer "{mapped}"'),
    target_fixture="item",
)
def line_with_mapped_dealer(legacy, mapped):
    return _line(dealerId=legacy, dealerMapped=[{"dealerId": mapped}], picklistGenerated=False)


@given(parsers.cfparse('an order line with flags "{flags}"'), target_fixture="item")
def line_with_flags(flags):
    raised = {name.strip() for name in flags.split(",")}
    return _line(dealerId="D1", **{name: name in raised for name in _FLAG_NAMES})


@given("an order line with no flags set", target_fixture="item")
def line_without_flags():
    return _line(dealerId="D1", **{name: False for name in _FLAG_NAMES})
