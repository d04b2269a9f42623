"""Subscription records and the registry that owns them.

Each mounted binding owns one Subscription. The record knows how to
recompute its derived view from the current state and how to ask its
component to refresh. Change detection is shallow reference equality:
never structural, so a merge that yields a new aggregate with equal contents
still counts as a change for full-state subscribers.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

logger = logging.getLogger("sharedstore.subscription")

# Immutable scalar types compared by value; everything else by identity.
_SCALARS = (bool, int, float, complex, str, bytes, type(None))


def same_value(a: object, b: object) -> bool:
    """Shallow reference equality.

    Objects are equal only when they are the same object. Immutable scalars
    of the same exact type are equal when their values are, with NaN equal
    to NaN and 0.0 distinct from -0.0.
    """
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _SCALARS):
        return False
    if isinstance(a, float):
        if math.isnan(a) and math.isnan(b):
            return True
        if a == 0.0 and b == 0.0:
            return math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def view_changed(new_view, last_view, is_array: bool) -> bool:
    """Has a derived view changed since the last refresh decision?

    Sequence views change when any element differs from its counterpart.
    """
    if not is_array:
        return not same_value(new_view, last_view)
    if len(new_view) != len(last_view):
        return True
    return any(not same_value(new, old) for new, old in zip(new_view, last_view))


class Subscription:
    """One mounted binding's interest in the shared state.

    A record without a recompute function is refresh-only: it is skipped by
    the notification pass and only reached by a forced refresh.
    """

    __slots__ = ("last_known_view", "retired", "is_array", "_recompute", "_refresh")

    def __init__(
        self,
        recompute: Callable[[], object] | None,
        refresh: Callable[[], None],
        last_known_view: object = None,
        *,
        is_array: bool = False,
    ) -> None:
        self.last_known_view = last_known_view
        self.retired = False
        self.is_array = is_array
        self._recompute = recompute
        self._refresh = refresh

    @property
    def tracks_state(self) -> bool:
        return self._recompute is not None

    def recompute(self) -> object:
        return self._recompute()

    def trigger_refresh(self) -> None:
        if self.retired:
            return
        self._refresh()

    def refresh_if_changed(self) -> bool:
        """Recompute and refresh when the view changed. Returns True if refreshed."""
        if self.retired or not self.tracks_state:
            return False
        view = self.recompute()
        if not view_changed(view, self.last_known_view, self.is_array):
            return False
        self.last_known_view = view
        self.trigger_refresh()
        return True

    def __repr__(self) -> str:
        state = "retired" if self.retired else "live"
        kind = "state" if self.tracks_state else "refresh-only"
        return f"Subscription({kind}, {state})"


class SubscriptionRegistry:
    """Insertion-ordered set of live subscriptions for one container."""

    def __init__(self) -> None:
        self._records: dict[Subscription, None] = {}

    def add(self, record: Subscription) -> Callable[[], None]:
        """Register a record. Returns the function that retires and removes it."""
        self._records[record] = None
        logger.debug("Subscribed %r (%d live)", record, len(self._records))

        def _unsubscribe() -> None:
            self.retire(record)

        return _unsubscribe

    def retire(self, record: Subscription) -> None:
        record.retired = True
        if self._records.pop(record, False) is None:
            logger.debug("Unsubscribed %r (%d live)", record, len(self._records))

    def snapshot(self) -> list[Subscription]:
        """Stable copy of the live records, safe to iterate while mutating."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record: object) -> bool:
        return record in self._records
