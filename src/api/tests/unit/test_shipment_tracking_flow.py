"""Signup to public tracking, wired through the real services.

Repositories are in-memory fakes so the flow runs without a database;
everything above them (password hashing, token issuing, tenant context,
tracking number composition, status derivation) is production code.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from iam.application.services import AuthService
from shared_kernel.auth import JWTValidator
from shared_kernel.auth.observability import JWTValidatorProbe
from shared_kernel.authorization.types import TenantRole
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.services import ShipmentService
from shipping.application.value_objects import NewShipment, NewTravelEvent
from shipping.domain.value_objects import EventType


class InMemoryOrganizations:
    def __init__(self):
        self.by_id = {}

    async def add(self, organization):
        self.by_id[organization.id.value] = organization

    async def save(self, organization):
        self.by_id[organization.id.value] = organization

    async def get_by_id(self, organization_id):
        return self.by_id.get(organization_id.value)

    async def first_free_slug(self, base):
        return base

    async def get_name(self, organization_id):
        organization = self.by_id.get(organization_id)
        return organization.name if organization else None


class InMemoryUsers:
    def __init__(self):
        self.by_id = {}

    async def add(self, user):
        self.by_id[user.id.value] = user

    async def save(self, user):
        self.by_id[user.id.value] = user

    async def get_by_id(self, user_id):
        return self.by_id.get(user_id.value)

    async def get_by_email(self, email):
        return next((u for u in self.by_id.values() if u.email == email), None)


class InMemoryShipments:
    def __init__(self):
        self.by_id = {}

    async def add(self, shipment):
        self.by_id[shipment.id.value] = shipment

    async def save(self, shipment):
        self.by_id[shipment.id.value] = shipment

    async def get_by_id(self, shipment_id, organization_id, for_update=False):
        shipment = self.by_id.get(shipment_id.value)
        if shipment is None or shipment.organization_id != organization_id:
            return None
        return shipment

    async def get_by_tracking_number(self, tracking_number):
        return next(
            (s for s in self.by_id.values() if s.tracking_number == tracking_number),
            None,
        )

    async def get_by_tracking_number_in_organization(
        self, tracking_number, organization_id
    ):
        shipment = await self.get_by_tracking_number(tracking_number)
        if shipment is None or shipment.organization_id != organization_id:
            return None
        return shipment

    async def add_event(self, event):
        pass


@pytest.fixture
def session():
    ctx = Mock()
    ctx.__aenter__ = AsyncMock(return_value=None)
    ctx.__aexit__ = AsyncMock(return_value=None)
    session = Mock()
    session.begin = Mock(return_value=ctx)
    return session


@pytest.fixture
def validator():
    return JWTValidator(
        secret="flow-test-secret",
        issuer="trackscargo",
        audience="trackscargo-api",
        probe=Mock(spec=JWTValidatorProbe),
    )


@pytest.mark.asyncio
async def test_new_organization_ships_and_the_public_can_track(session, validator):
    organizations = InMemoryOrganizations()
    auth = AuthService(
        organization_repository=organizations,
        user_repository=InMemoryUsers(),
        session=session,
        token_issuer=validator,
        bcrypt_rounds=4,
        probe=Mock(),
    )
    shipments = ShipmentService(
        shipment_repository=InMemoryShipments(),
        organization_directory=organizations,
        session=session,
        probe=Mock(),
    )

    signed_up = await auth.signup(
        organization_name="Test Corp",
        name="Olive Owner",
        email="Olive@TestCorp.com",
        password="correct-horse",
    )
    assert signed_up.organization.slug == "test-corp"

    claims = validator.validate_token(signed_up.token)
    context = TenantContext(
        user_id=claims.user_id,
        organization_id=claims.organization_id,
        role=TenantRole(claims.role),
    )
    assert context.is_owner

    shipment = await shipments.create_shipment(
        context,
        NewShipment(
            tracking_suffix="X1",
            origin="Rotterdam",
            destination="Lagos",
            weight=120.5,
            pieces=3,
            status="Booked",
        ),
    )
    assert shipment.tracking_number == "TC-X1"

    await shipments.add_travel_event(
        context,
        shipment.id,
        NewTravelEvent(
            status="in-transit",
            location="Port of Rotterdam",
            event_type=EventType.IN_TRANSIT,
        ),
    )

    tracked = await shipments.get_by_tracking_number("TC-X1")

    assert tracked is not None
    assert tracked.current_status == "in-transit"
    assert [e.location for e in tracked.travel_events] == ["Port of Rotterdam"]
    assert await shipments.get_by_tracking_number("TC-X2") is None
