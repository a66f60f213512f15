"""OrderDesk bounded context — Fulfillment Routing and Status Derivation.

Resolves the authoritative dealer for each order line, groups lines for
picklist creation, derives per-line fulfillment status and gates the actions
an admin or fulfillment-staff user may take next. The order and picklist
services own all state; this context works from the last fetched snapshot.
"""

import structlog
from protean.domain import Domain

orderdesk = Domain(name="orderdesk")

logger = structlog.get_logger(__name__)
