import pytest
from protean.integrations.pytest import DomainFixture

from orderdesk.service import reset_order_service, set_order_service
from orderdesk.service.fake_adapter import FakeOrderService


@pytest.fixture(scope="session")
def orderdesk_bed():
    from orderdesk.domain import orderdesk

    bed = DomainFixture(orderdesk)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(orderdesk_bed):
    with orderdesk_bed.domain_context():
        yield

        from protean import current_domain

        # Clear the action ledger and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def order_service():
    """A fresh fake order service installed as the active adapter."""
    service = FakeOrderService()
    set_order_service(service)
    yield service
    reset_order_service()
