"""
Deployment status observation.

Status transitions are server-authoritative; the client only observes
them. Observation enforces forward progress:

    pending -> building -> ready
    pending | building -> failed
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, FrozenSet, Optional

from ...errors import DeploymentPollTimeout, InvalidStatusTransition, UnknownStatus
from ..api.models import Deployment, DeploymentStatus

logger = logging.getLogger(__name__)

_ALLOWED: Dict[DeploymentStatus, FrozenSet[DeploymentStatus]] = {
    DeploymentStatus.PENDING: frozenset(
        {DeploymentStatus.PENDING, DeploymentStatus.BUILDING, DeploymentStatus.READY, DeploymentStatus.FAILED}
    ),
    DeploymentStatus.BUILDING: frozenset(
        {DeploymentStatus.BUILDING, DeploymentStatus.READY, DeploymentStatus.FAILED}
    ),
    DeploymentStatus.READY: frozenset({DeploymentStatus.READY}),
    DeploymentStatus.FAILED: frozenset({DeploymentStatus.FAILED}),
}


def parse_status(value) -> DeploymentStatus:
    """
    Interpret a wire status value.

    Raises:
        UnknownStatus: If the value is not part of the lifecycle. There is
            no default status.
    """
    if isinstance(value, DeploymentStatus):
        return value
    if not isinstance(value, str):
        raise UnknownStatus(value)
    try:
        return DeploymentStatus(value)
    except ValueError:
        raise UnknownStatus(value) from None


def can_transition(previous: DeploymentStatus, current: DeploymentStatus) -> bool:
    """Check whether an observed move respects forward progress."""
    return current in _ALLOWED[previous]


class StatusTracker:
    """
    Records the last observed status per deployment and rejects regressions.

    Polling may skip intermediate states (pending straight to ready), so
    only backward moves and exits from a terminal state are rejected.
    """

    def __init__(self):
        self._last: Dict[str, DeploymentStatus] = {}

    def last_status(self, deployment_id: str) -> Optional[DeploymentStatus]:
        return self._last.get(deployment_id)

    def observe(self, deployment: Deployment) -> DeploymentStatus:
        """
        Record an observation of a deployment.

        Args:
            deployment: Latest server projection

        Returns:
            The interpreted status

        Raises:
            UnknownStatus: Status value outside the lifecycle
            InvalidStatusTransition: Observation moves backwards
        """
        current = parse_status(deployment.status)
        previous = self._last.get(deployment.id)

        if previous is not None and not can_transition(previous, current):
            raise InvalidStatusTransition(deployment.id, previous.value, current.value)

        if previous != current:
            logger.debug(f"Deployment {deployment.id}: {previous.value if previous else None} -> {current.value}")
        self._last[deployment.id] = current
        return current


async def poll_deployment(
    fetch: Callable[[], Awaitable[Deployment]],
    *,
    backoff: Callable[[int], float],
    max_attempts: int = 30,
    tracker: Optional[StatusTracker] = None,
) -> Deployment:
    """
    Poll a deployment until it reaches a terminal status.

    Each attempt is one call to ``fetch``. Errors from ``fetch`` propagate
    unchanged; cancellation of the calling task stops polling immediately.

    Args:
        fetch: Coroutine factory returning the latest Deployment
        backoff: Maps the attempt number (1-based) to a delay in seconds
        max_attempts: Upper bound on fetch calls
        tracker: Optional shared tracker for monotonic checks

    Returns:
        The deployment in its terminal state (ready or failed)

    Raises:
        DeploymentPollTimeout: No terminal status within max_attempts
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    tracker = tracker or StatusTracker()
    last_status = None

    for attempt in range(1, max_attempts + 1):
        deployment = await fetch()
        status = tracker.observe(deployment)
        last_status = status.value
        if status.is_terminal:
            return deployment
        if attempt < max_attempts:
            await asyncio.sleep(max(0.0, float(backoff(attempt))))

    raise DeploymentPollTimeout(max_attempts, last_status)
