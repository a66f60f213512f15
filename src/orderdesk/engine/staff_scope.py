"""Staff scope — narrows an order to the SKUs on a staff member's picklists."""

from dataclasses import dataclass, field
from enum import Enum

from orderdesk.engine.roles import Role
from orderdesk.model.snapshot import LineItem, Picklist

SCAN_COMPLETED = "Completed"


class ScopeState(Enum):
    """Why a staff member sees what they see.

    IDENTITY_PENDING and NOTHING_ASSIGNED both yield an empty list but must
    be shown differently: the first is still resolving who the user is, the
    second legitimately has nothing assigned.
    """

    ALL_ITEMS = "all_items"
    IDENTITY_PENDING = "identity_pending"
    NOTHING_ASSIGNED = "nothing_assigned"
    READY = "ready"


@dataclass(frozen=True)
class StaffScope:
    """The picklists assigned to one employee for one order, flattened by SKU."""

    employee_id: str | None = None
    picklists: tuple[Picklist, ...] = ()
    skus: frozenset[str] = frozenset()
    scan_statuses: dict[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_picklists(cls, order_id: str, employee_id: str | None, picklists: list[Picklist]) -> "StaffScope":
        if not employee_id:
            return cls()

        own = tuple(p for p in picklists if p.order_id is None or str(p.order_id) == str(order_id))
        skus = set()
        scan_statuses = {}
        for picklist in own:
            for entry in picklist.sku_list:
                skus.add(entry.sku)
                # Picklist-level status; a SKU on several picklists keeps the last one seen
                scan_statuses[entry.sku] = picklist.scan_status
        return cls(employee_id=employee_id, picklists=own, skus=frozenset(skus), scan_statuses=scan_statuses)

    @property
    def identity_resolved(self) -> bool:
        return bool(self.employee_id)

    @property
    def current_picklist_id(self) -> str | None:
        return self.picklists[0].picklist_id if self.picklists else None

    def scan_status_of(self, sku: str | None) -> str | None:
        return self.scan_statuses.get(sku or "")

    def picklist_for_sku(self, sku: str | None) -> str | None:
        """The picklist listing ``sku``, falling back to the current picklist."""
        for picklist in self.picklists:
            if any(entry.sku == sku for entry in picklist.sku_list):
                return picklist.picklist_id
        return self.current_picklist_id


def scope_state(items: list[LineItem], scope: StaffScope | None, role: Role) -> ScopeState:
    if not role.is_staff:
        return ScopeState.ALL_ITEMS
    if scope is None or not scope.identity_resolved:
        return ScopeState.IDENTITY_PENDING
    if not scope.skus and items:
        return ScopeState.NOTHING_ASSIGNED
    return ScopeState.READY


def staff_visible_items(items: list[LineItem], scope: StaffScope | None, role: Role) -> list[LineItem]:
    """Return the lines a user may see and act on.

    Non-staff roles bypass filtering entirely.
    """
    if not role.is_staff:
        return list(items)
    if scope is None or not scope.identity_resolved:
        return []
    return [item for item in items if item.sku in scope.skus]


def all_scans_completed(items: list[LineItem], scope: StaffScope | None) -> bool:
    """Whether every given line sits on a picklist whose scan has completed."""
    if not items or scope is None:
        return False
    return all(scope.scan_status_of(item.sku) == SCAN_COMPLETED for item in items)
