"""Unit tests for the TenantContext value object."""

import dataclasses

import pytest

from shared_kernel.authorization.types import TenantRole
from shared_kernel.middleware.tenant_context import TenantContext


class TestTenantContext:
    def test_owner_flag(self):
        context = TenantContext(user_id="u", organization_id="o", role=TenantRole.OWNER)
        assert context.is_owner is True

    def test_member_flag(self):
        context = TenantContext(user_id="u", organization_id="o", role=TenantRole.MEMBER)
        assert context.is_owner is False

    def test_is_immutable(self):
        context = TenantContext(user_id="u", organization_id="o", role=TenantRole.MEMBER)

        with pytest.raises(dataclasses.FrozenInstanceError):
            context.organization_id = "other"  # type: ignore[misc]

    def test_value_equality(self):
        first = TenantContext(user_id="u", organization_id="o", role=TenantRole.MEMBER)
        second = TenantContext(user_id="u", organization_id="o", role=TenantRole.MEMBER)
        assert first == second
