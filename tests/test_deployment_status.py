"""
Tests for deployment status observation and polling.
"""

import asyncio

import pytest

from gobackhomee.errors import (
    DeploymentPollTimeout,
    InvalidStatusTransition,
    UnknownStatus,
)
from gobackhomee.modules.api.models import Deployment, DeploymentStatus
from gobackhomee.modules.content import compute_digest
from gobackhomee.modules.deployment import StatusTracker, can_transition, parse_status, poll_deployment


def deployment(status: str, deployment_id: str = "dep-1") -> Deployment:
    return Deployment(
        id=deployment_id,
        project_id="proj-1",
        version="v1",
        hash=compute_digest({"index.html": "hi"}),
        status=status,
    )


class TestParseStatus:
    """Interpretation of wire status values."""

    @pytest.mark.parametrize("value", ["pending", "building", "ready", "failed"])
    def test_known(self, value):
        assert parse_status(value).value == value

    @pytest.mark.parametrize("value", ["", "READY", "deploying", None, 3])
    def test_unknown_has_no_default(self, value):
        with pytest.raises(UnknownStatus) as exc_info:
            parse_status(value)
        assert exc_info.value.status == value

    def test_deployment_model_keeps_raw_value(self):
        d = deployment("archived")
        assert d.status == "archived"
        with pytest.raises(UnknownStatus):
            d.lifecycle_status()


class TestTransitions:
    """Forward-progress rules."""

    def test_forward_moves_allowed(self):
        assert can_transition(DeploymentStatus.PENDING, DeploymentStatus.BUILDING)
        assert can_transition(DeploymentStatus.BUILDING, DeploymentStatus.READY)
        assert can_transition(DeploymentStatus.PENDING, DeploymentStatus.FAILED)
        assert can_transition(DeploymentStatus.BUILDING, DeploymentStatus.FAILED)
        assert can_transition(DeploymentStatus.PENDING, DeploymentStatus.READY)  # skipped building

    def test_backward_and_terminal_exits_rejected(self):
        assert not can_transition(DeploymentStatus.READY, DeploymentStatus.PENDING)
        assert not can_transition(DeploymentStatus.READY, DeploymentStatus.BUILDING)
        assert not can_transition(DeploymentStatus.BUILDING, DeploymentStatus.PENDING)
        assert not can_transition(DeploymentStatus.FAILED, DeploymentStatus.READY)
        assert not can_transition(DeploymentStatus.READY, DeploymentStatus.FAILED)

    def test_tracker_pending_building_ready(self):
        tracker = StatusTracker()
        for status in ("pending", "building", "building", "ready"):
            tracker.observe(deployment(status))
        assert tracker.last_status("dep-1") is DeploymentStatus.READY

    @pytest.mark.parametrize("regression", ["pending", "building"])
    def test_tracker_rejects_ready_regression(self, regression):
        tracker = StatusTracker()
        tracker.observe(deployment("pending"))
        tracker.observe(deployment("building"))
        tracker.observe(deployment("ready"))

        with pytest.raises(InvalidStatusTransition) as exc_info:
            tracker.observe(deployment(regression))

        assert exc_info.value.previous == "ready"
        assert exc_info.value.current == regression
        assert tracker.last_status("dep-1") is DeploymentStatus.READY

    def test_tracker_is_per_deployment(self):
        tracker = StatusTracker()
        tracker.observe(deployment("ready", "dep-1"))
        tracker.observe(deployment("pending", "dep-2"))
        assert tracker.last_status("dep-2") is DeploymentStatus.PENDING


@pytest.mark.asyncio
async def test_poll_until_ready():
    observed = iter(["pending", "building", "building", "ready"])
    delays = []

    async def fetch():
        return deployment(next(observed))

    result = await poll_deployment(fetch, backoff=lambda attempt: delays.append(attempt) or 0, max_attempts=10)

    assert result.status == "ready"
    assert delays == [1, 2, 3]


@pytest.mark.asyncio
async def test_poll_stops_on_failed():
    observed = iter(["pending", "failed"])

    async def fetch():
        return deployment(next(observed))

    result = await poll_deployment(fetch, backoff=lambda attempt: 0)
    assert result.status == "failed"


@pytest.mark.asyncio
async def test_poll_is_bounded():
    calls = 0

    async def fetch():
        nonlocal calls
        calls += 1
        return deployment("building")

    with pytest.raises(DeploymentPollTimeout) as exc_info:
        await poll_deployment(fetch, backoff=lambda attempt: 0, max_attempts=3)

    assert calls == 3
    assert exc_info.value.last_status == "building"


@pytest.mark.asyncio
async def test_poll_surfaces_regression():
    observed = iter(["building", "pending"])

    async def fetch():
        return deployment(next(observed))

    with pytest.raises(InvalidStatusTransition):
        await poll_deployment(fetch, backoff=lambda attempt: 0)


@pytest.mark.asyncio
async def test_poll_surfaces_unknown_status():
    async def fetch():
        return deployment("queued")

    with pytest.raises(UnknownStatus):
        await poll_deployment(fetch, backoff=lambda attempt: 0)


@pytest.mark.asyncio
async def test_poll_is_cancellable():
    async def fetch():
        return deployment("building")

    task = asyncio.create_task(poll_deployment(fetch, backoff=lambda attempt: 10))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_poll_rejects_zero_attempts():
    async def fetch():
        return deployment("ready")

    with pytest.raises(ValueError):
        await poll_deployment(fetch, backoff=lambda attempt: 0, max_attempts=0)
