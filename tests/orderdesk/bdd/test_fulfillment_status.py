"""BDD tests for fulfillment status derivation and role-gated actions."""

from orderdesk.engine.actions import available_actions
from orderdesk.engine.identifiers import resolve_dealer_id
from orderdesk.engine.roles import Role, perspective_for
from orderdesk.engine.status import derive_status, terminal_badge
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/fulfillment_status.feature")


@when(
    parsers.cfparse('a "{role}" views the line on a "{order_status}" order'),
    target_fixture="view",
)
def view_line(item, role, order_status):
    role = Role.parse(role)
    perspective = perspective_for(role)
    badge = terminal_badge(item, order_status, perspective)
    return {
        "dealer_id": resolve_dealer_id(item),
        "status": derive_status(item, perspective),
        "badge": badge,
        "actions": available_actions(item, role, badge is not None),
    }


@then("the resolved dealer is empty")
def resolved_dealer_is_empty(view):
    assert view["dealer_id"] == ""


@then(parsers.cfparse('the resolved dealer is "{dealer_id}"'))
def resolved_dealer_is(view, dealer_id):
    assert view["dealer_id"] == dealer_id


@then(parsers.cfparse('the status is "{status}"'))
def status_is(view, status):
    assert view["status"].value == status


@then(parsers.cfparse('the available actions are "{actions}"'))
def available_actions_are(view, actions):
    assert {action.value for action in view["actions"]} == {name.strip() for name in actions.split(",")}


@then(parsers.cfparse('the terminal badge is "{badge}"'))
def terminal_badge_is(view, badge):
    assert view["badge"] is not None
    assert view["badge"].value == badge


@then("no actions are available")
def no_actions(view):
    assert view["actions"] == frozenset()
