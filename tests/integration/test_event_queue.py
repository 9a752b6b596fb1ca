"""Integration tests for platform event delivery through the monitor worker."""

import asyncio

import pytest
from unittest.mock import patch

from travel_monitor.errors import StateTransitionError
from travel_monitor.state.events import AuthorizationChanged
from travel_monitor.state.models import (
    LocationAuthorization,
    MonitorState,
    NotificationAuthorization,
)


def monitoring(build_monitor, **kwargs):
    return build_monitor(enabled=True, location=LocationAuthorization.ALWAYS,
                         notification=NotificationAuthorization.AUTHORIZED, **kwargs)


class TestEventWorker:
    """Test FIFO processing by the single worker task."""

    @pytest.mark.asyncio
    async def test_fixes_applied_in_delivery_order(self, build_monitor):
        h = monitoring(build_monitor, region="Finland", responses=["Sweden", "Norway", "Norway"])
        await h.monitor.start()

        h.location.deliver_fix(59.33, 18.07)
        h.location.deliver_fix(59.91, 10.75)
        h.location.deliver_fix(59.92, 10.76)
        await h.monitor.drain()

        assert h.monitor.last_known_region == "Norway"
        assert [r.user_info["region"] for r in h.notifications.delivered] == ["Sweden", "Norway"]
        await h.monitor.shutdown()

    @pytest.mark.asyncio
    async def test_downgrade_applied_before_later_fix(self, build_monitor):
        h = monitoring(build_monitor, responses=["Sweden"])
        await h.monitor.start()

        h.location.set_authorization(LocationAuthorization.DENIED)
        h.location.deliver_fix(59.33, 18.07)
        await h.monitor.drain()

        assert h.monitor.is_monitoring is False
        assert h.location.stop_calls == 1
        assert h.monitor.last_known_region == "Sweden"
        await h.monitor.shutdown()

    @pytest.mark.asyncio
    async def test_events_from_another_thread(self, build_monitor):
        h = monitoring(build_monitor, responses=["Denmark"])
        await h.monitor.start()

        await asyncio.to_thread(h.location.deliver_fix, 55.68, 12.57)
        await asyncio.sleep(0)
        await h.monitor.drain()

        assert h.monitor.last_known_region == "Denmark"
        await h.monitor.shutdown()

    @pytest.mark.asyncio
    async def test_worker_survives_handler_failure(self, build_monitor):
        h = monitoring(build_monitor, responses=["Sweden"])
        await h.monitor.start()

        with patch.object(h.monitor, "on_authorization_changed",
                          side_effect=StateTransitionError("bad transition")):
            h.monitor.post_event(AuthorizationChanged(status=LocationAuthorization.DENIED))
            await h.monitor.drain()

        h.location.deliver_fix(59.33, 18.07)
        await h.monitor.drain()

        assert h.monitor.last_known_region == "Sweden"
        assert any(o.operation == "handle_event" for o in h.monitor.suppressed_outcomes)
        await h.monitor.shutdown()

    @pytest.mark.asyncio
    async def test_unknown_event_ignored(self, build_monitor):
        h = monitoring(build_monitor)
        await h.monitor.start()

        h.monitor.post_event("not an event")
        await h.monitor.drain()

        assert h.monitor.state == MonitorState.MONITORING
        await h.monitor.shutdown()


class TestWorkerLifecycle:
    """Test start, drain and shutdown."""

    @pytest.mark.asyncio
    async def test_drain_without_worker_processes_inline(self, build_monitor):
        h = monitoring(build_monitor, responses=["Latvia"])

        h.location.deliver_fix(56.95, 24.11)
        assert h.monitor.snapshot().pending_events == 1
        await h.monitor.drain()

        assert h.monitor.snapshot().pending_events == 0
        assert h.monitor.last_known_region == "Latvia"

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, build_monitor):
        h = monitoring(build_monitor)

        await h.monitor.start()
        worker = h.monitor._worker
        await h.monitor.start()

        assert h.monitor._worker is worker
        assert h.location.start_calls == 1
        await h.monitor.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_keeps_session(self, build_monitor):
        h = monitoring(build_monitor)
        await h.monitor.start()

        await h.monitor.shutdown()
        await h.monitor.shutdown()

        assert h.monitor.is_monitoring is True
        assert h.location.stop_calls == 0
