"""
Data factories for test data generation.

Factories use factory-boy to create realistic test data with sensible defaults.
All factories support async creation via create_async() method.

They write rows directly, bypassing the LedgerCoordinator: use them to arrange
state (including states the coordinator would refuse), and the coordinator or the
API to exercise behaviour.

Usage:
    from tests.factories import ClientFactory, PackageFactory

    client = await ClientFactory.create_async(db_session, name="Ana Torres")
    package = await PackageFactory.create_async(db_session, client_id=client.id, package_type="S5")
"""

from tests.factories.user import UserFactory
from tests.factories.client import ClientFactory
from tests.factories.client_package import PackageFactory
from tests.factories.session_record import SessionRecordFactory
from tests.factories.payment import PaymentFactory

__all__ = [
    "UserFactory",
    "ClientFactory",
    "PackageFactory",
    "SessionRecordFactory",
    "PaymentFactory",
]
