"""Forging delegate tracking.

Tracks the forging delegate set and reports who moved in or out of it.
The stored baseline only changes when a change is reported, so repeated
triggers without a net change stay silent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from delegate_notifier.notifications.models import DelegateQuery

logger = logging.getLogger(__name__)


class ActiveDelegateTracker:
    """Owns the last notified active-delegate set.

    Usage::

        tracker = ActiveDelegateTracker(query)
        await tracker.initialize()
        args = await tracker.compute_diff()  # [added, removed] or None
    """

    def __init__(self, query: DelegateQuery) -> None:
        self._query = query
        self._previous: list[str] = []

    @property
    def active_delegates(self) -> list[str]:
        """Return a copy of the current baseline."""
        return list(self._previous)

    async def initialize(self) -> None:
        """Load the startup baseline from the delegate query."""
        self._previous = await self._current()
        logger.info("Active delegate baseline loaded (%d delegates)", len(self._previous))

    async def compute_diff(self, _data: Any = None) -> list[Any] | None:
        """Return ``[added, removed]`` since the last change, or None if unchanged.

        The trigger payload is accepted so the tracker can stand in for an
        event transform; it is not inspected.
        """
        current = await self._current()
        # No await below this point: compare and assign must not interleave.
        previous = self._previous
        added = [delegate for delegate in current if delegate not in previous]
        removed = [delegate for delegate in previous if delegate not in current]

        if not added and not removed:
            return None

        self._previous = current
        logger.info("Active delegates changed: +%s -%s", added, removed)
        return [added, removed]

    async def _current(self) -> list[str]:
        delegates = await self._query.get_active_delegates()
        return list(delegates) if delegates else []
