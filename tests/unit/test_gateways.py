"""Unit tests for the permission gateways."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from travel_monitor.config.defaults import LocationParams, NotificationParams
from travel_monitor.errors import PermissionRequestError
from travel_monitor.permissions import LocationPermissionGateway, NotificationPermissionGateway
from travel_monitor.platform.simulated import (
    SimulatedLocationSubsystem,
    SimulatedNotificationCenter,
)
from travel_monitor.state.models import LocationAuthorization, NotificationAuthorization


class TestLocationPermissionGateway:
    """Test location authorization queries and prompts."""

    def setup_method(self):
        self.subsystem = SimulatedLocationSubsystem()
        self.gateway = LocationPermissionGateway(self.subsystem)

    def test_current_status_never_prompts(self):
        assert self.gateway.current_status() == LocationAuthorization.NOT_DETERMINED
        assert self.subsystem.when_in_use_requests == 0

    @pytest.mark.asyncio
    async def test_prompts_when_undetermined(self):
        status = await self.gateway.request_if_undetermined()

        assert status == LocationAuthorization.WHEN_IN_USE
        assert self.subsystem.when_in_use_requests == 1

    @pytest.mark.asyncio
    async def test_no_prompt_once_decided(self):
        self.subsystem.set_authorization(LocationAuthorization.DENIED)

        status = await self.gateway.request_if_undetermined()

        assert status == LocationAuthorization.DENIED
        assert self.subsystem.when_in_use_requests == 0

    @pytest.mark.asyncio
    async def test_always_escalation_from_when_in_use(self):
        self.subsystem.set_authorization(LocationAuthorization.WHEN_IN_USE)

        status = await self.gateway.request_always()

        assert status == LocationAuthorization.ALWAYS
        assert self.subsystem.always_requests == 1
        assert self.gateway.always_requested is True

    @pytest.mark.asyncio
    async def test_always_requested_at_most_once(self):
        self.subsystem.always_answer = LocationAuthorization.WHEN_IN_USE
        self.subsystem.set_authorization(LocationAuthorization.WHEN_IN_USE)

        first = await self.gateway.request_always()
        second = await self.gateway.request_always()

        assert first == second == LocationAuthorization.WHEN_IN_USE
        assert self.subsystem.always_requests == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [
        LocationAuthorization.NOT_DETERMINED,
        LocationAuthorization.DENIED,
        LocationAuthorization.RESTRICTED,
        LocationAuthorization.ALWAYS,
    ])
    async def test_no_escalation_outside_when_in_use(self, status):
        subsystem = SimulatedLocationSubsystem(status=status)
        gateway = LocationPermissionGateway(subsystem)

        assert await gateway.request_always() == status
        assert subsystem.always_requests == 0
        assert gateway.always_requested is False

    @pytest.mark.asyncio
    async def test_prompt_timeout_becomes_permission_error(self):
        subsystem = SimulatedLocationSubsystem(prompt_delay=1.0)
        gateway = LocationPermissionGateway(
            subsystem, LocationParams(request_timeout_seconds=0.01)
        )

        with pytest.raises(PermissionRequestError) as exc_info:
            await gateway.request_if_undetermined()

        assert exc_info.value.permission == "location"
        assert exc_info.value.recoverable is True
        assert subsystem.authorization_status == LocationAuthorization.NOT_DETERMINED

    @pytest.mark.asyncio
    async def test_os_failure_becomes_permission_error(self):
        self.subsystem.request_when_in_use = AsyncMock(side_effect=OSError("no daemon"))

        with pytest.raises(PermissionRequestError) as exc_info:
            await self.gateway.request_if_undetermined()

        assert isinstance(exc_info.value.__cause__, OSError)


class TestNotificationPermissionGateway:
    """Test notification authorization queries and prompts."""

    def setup_method(self):
        self.center = SimulatedNotificationCenter()
        self.gateway = NotificationPermissionGateway(self.center)

    @pytest.mark.asyncio
    async def test_refresh_reads_settings(self):
        self.center.set_authorization(NotificationAuthorization.PROVISIONAL)

        assert self.gateway.current_status() == NotificationAuthorization.NOT_DETERMINED
        assert await self.gateway.refresh() == NotificationAuthorization.PROVISIONAL
        assert self.gateway.current_status() == NotificationAuthorization.PROVISIONAL
        assert self.center.settings_reads == 1

    @pytest.mark.asyncio
    async def test_granted_request_registers_category(self):
        status = await self.gateway.request_if_undetermined()

        assert status == NotificationAuthorization.AUTHORIZED
        assert self.center.authorization_requests == 1
        assert [c.identifier for c in self.center.categories] == ["TRAVEL_COUNTRY_CHANGE"]

    @pytest.mark.asyncio
    async def test_denied_request_registers_nothing(self):
        self.center.grant = False

        status = await self.gateway.request_if_undetermined()

        assert status == NotificationAuthorization.DENIED
        assert self.center.categories == []

    @pytest.mark.asyncio
    async def test_never_reprompts_after_denial(self):
        self.center.grant = False
        await self.gateway.request_if_undetermined()
        await self.gateway.request_if_undetermined()

        assert self.center.authorization_requests == 1

    @pytest.mark.asyncio
    async def test_requested_options_come_from_params(self):
        self.center.request_authorization = AsyncMock(return_value=True)
        gateway = NotificationPermissionGateway(
            self.center, NotificationParams(authorization_options=("alert", "provisional"))
        )

        await gateway.request_if_undetermined()

        self.center.request_authorization.assert_awaited_once_with(("alert", "provisional"))

    @pytest.mark.asyncio
    async def test_settings_failure_becomes_permission_error(self):
        self.center.settings_error = RuntimeError("settings unavailable")

        with pytest.raises(PermissionRequestError) as exc_info:
            await self.gateway.refresh()

        assert exc_info.value.permission == "notification"
        assert self.gateway.current_status() == NotificationAuthorization.NOT_DETERMINED

    @pytest.mark.asyncio
    async def test_settings_timeout(self):
        async def slow_settings():
            await asyncio.sleep(1.0)
            return NotificationAuthorization.AUTHORIZED

        self.center.get_settings = slow_settings
        gateway = NotificationPermissionGateway(
            self.center, NotificationParams(timeout_seconds=0.01)
        )

        with pytest.raises(PermissionRequestError):
            await gateway.refresh()
