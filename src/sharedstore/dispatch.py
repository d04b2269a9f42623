"""Dispatcher — decides which subscriptions refresh after a state transition.

Both passes iterate a snapshot of the live records taken when the pass
starts. A refresh callback may synchronously mutate the store (running a
nested pass) or unmount another binding; records retired mid-pass are
skipped when the outer pass reaches them.
"""

from __future__ import annotations

import logging

from sharedstore.subscription import SubscriptionRegistry

logger = logging.getLogger("sharedstore.dispatch")


class Dispatcher:
    """Runs notification passes over one container's registry."""

    def __init__(self, registry: SubscriptionRegistry) -> None:
        self._registry = registry

    def notify(self) -> int:
        """Refresh every live record whose derived view changed.

        Returns the number of refreshes requested.
        """
        refreshed = 0
        for record in self._registry.snapshot():
            if record.retired:
                continue
            if record.refresh_if_changed():
                refreshed += 1
        logger.debug("Notification pass: %d refreshed", refreshed)
        return refreshed

    def force_refresh(self) -> int:
        """Refresh every live record unconditionally, leaving views untouched."""
        refreshed = 0
        for record in self._registry.snapshot():
            if record.retired:
                continue
            record.trigger_refresh()
            refreshed += 1
        logger.debug("Forced refresh pass: %d refreshed", refreshed)
        return refreshed
