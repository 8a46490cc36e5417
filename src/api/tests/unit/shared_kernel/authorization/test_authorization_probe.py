"""Unit tests for authorization domain probe."""

from unittest.mock import Mock

from shared_kernel.authorization.observability import (
    DefaultAuthorizationProbe,
)
from shared_kernel.observability_context import ObservationContext


class TestDefaultAuthorizationProbe:
    """Tests for DefaultAuthorizationProbe."""

    def test_creates_with_default_logger(self):
        """Test that probe can be created without providing a logger."""
        probe = DefaultAuthorizationProbe()
        assert probe._logger is not None

    def test_accepts_custom_logger(self):
        """Test that probe accepts a custom logger."""
        custom_logger = Mock()
        probe = DefaultAuthorizationProbe(logger=custom_logger)
        assert probe._logger is custom_logger


class TestPermissionChecked:
    """Tests for permission_checked probe method."""

    def test_grant_logged_at_debug(self):
        mock_logger = Mock()
        probe = DefaultAuthorizationProbe(logger=mock_logger)

        probe.permission_checked(
            user_id="01USER",
            organization_id="01ORG",
            permission="view_shipments",
            granted=True,
        )

        mock_logger.debug.assert_called_once()
        mock_logger.warning.assert_not_called()
        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "permission_checked"
        assert call_args[1]["permission"] == "view_shipments"

    def test_denial_logged_at_warning(self):
        mock_logger = Mock()
        probe = DefaultAuthorizationProbe(logger=mock_logger)

        probe.permission_checked(
            user_id="01USER",
            organization_id="01ORG",
            permission="manage_members",
            granted=False,
        )

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[1]["granted"] is False

    def test_includes_context(self):
        mock_logger = Mock()
        context = ObservationContext(request_id="req-9")
        probe = DefaultAuthorizationProbe(logger=mock_logger).with_context(context)

        probe.permission_checked(
            user_id="01USER",
            organization_id="01ORG",
            permission="manage_members",
            granted=False,
        )

        assert mock_logger.warning.call_args[1]["request_id"] == "req-9"
