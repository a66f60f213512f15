"""Dealer/SKU grouping — seeds picklist creation for an order."""

from dataclasses import dataclass, field

from orderdesk.engine.identifiers import resolve_dealer_id
from orderdesk.model.snapshot import LineItem


@dataclass(frozen=True)
class SkuQuantity:
    sku: str
    quantity: int


@dataclass(frozen=True)
class PicklistDraft:
    """Default dealer and SKU list offered by the create-picklist dialog."""

    dealer_id: str
    sku_list: list[SkuQuantity] = field(default_factory=list)


def _quantity(item: LineItem) -> int:
    return 1 if item.quantity is None else item.quantity


def is_groupable(item: LineItem) -> bool:
    """Whether a line can still be offered for picklist creation."""
    return bool(resolve_dealer_id(item)) and bool(item.sku) and not item.picklist_generated


def group_by_dealer(items: list[LineItem]) -> dict[str, list[SkuQuantity]]:
    """Partition lines into per-dealer (SKU, quantity) lists.

    Lines without a resolvable dealer, without a SKU, or whose picklist has
    already been generated are left out. Each dealer's list keeps input order.
    """
    groups: dict[str, list[SkuQuantity]] = {}
    for item in items:
        if not is_groupable(item):
            continue
        groups.setdefault(resolve_dealer_id(item), []).append(SkuQuantity(sku=item.sku, quantity=_quantity(item)))
    return groups


def picklist_defaults(items: list[LineItem], selected: LineItem | None = None) -> list[PicklistDraft]:
    """Build the create-picklist defaults.

    With no ``selected`` line (bulk mode) every dealer group becomes a draft.
    In single-item mode only the clicked line's SKU is offered, under its
    resolved dealer; an ineligible line yields no draft.
    """
    if selected is None:
        return [
            PicklistDraft(dealer_id=dealer_id, sku_list=list(skus))
            for dealer_id, skus in group_by_dealer(items).items()
        ]

    if not is_groupable(selected):
        return []
    return [
        PicklistDraft(
            dealer_id=resolve_dealer_id(selected),
            sku_list=[SkuQuantity(sku=selected.sku, quantity=_quantity(selected))],
        )
    ]
