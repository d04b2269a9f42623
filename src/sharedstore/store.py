"""Store — the state cell shared by every binding of a container.

A Store holds the current state and the built-in mutators. Every mutator
applies its change, runs the notification pass synchronously, and only then
calls the optional on_done callback, so the callback observes a settled
refresh cycle.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Callable

from sharedstore._checks import require_callable
from sharedstore.dispatch import Dispatcher


class _Empty:
    """Type of the EMPTY sentinel."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "EMPTY"

    def __bool__(self) -> bool:
        return False


# State of a container constructed without an initial state.
EMPTY: Any = _Empty()


def merge_partial(state: object, partial: object) -> object:
    """Shallow-merge partial over state, always producing a new aggregate."""
    if not isinstance(partial, Mapping):
        raise TypeError(
            f"partial state must be a mapping, not {type(partial).__name__}"
        )
    if state is EMPTY or state is None:
        return dict(partial)
    if isinstance(state, Mapping):
        return {**state, **partial}
    if dataclasses.is_dataclass(state) and not isinstance(state, type):
        return dataclasses.replace(state, **partial)
    raise TypeError(f"cannot merge a partial state into {type(state).__name__}")


class Store:
    """The single state cell of a container."""

    def __init__(self, dispatcher: Dispatcher, initial_state: object = EMPTY) -> None:
        self._dispatcher = dispatcher
        self._initial_state = initial_state
        self._state = initial_state

    @property
    def state(self) -> Any:
        return self._state

    @property
    def initial_state(self) -> Any:
        return self._initial_state

    def set_state(
        self,
        next_state: object,
        on_done: Callable[[], None] | None = None,
    ) -> None:
        """Replace the whole state. No merging.

        next_state may be a function of the current state.
        """
        if callable(next_state):
            next_state = next_state(self._state)
        self._state = next_state
        self._settle(on_done)

    def set_partial_state(
        self,
        partial: object,
        on_done: Callable[[], None] | None = None,
    ) -> None:
        """Merge partial over the current state.

        The merge always produces a new aggregate, even for an empty patch,
        so full-state subscribers see a change.
        """
        if callable(partial):
            partial = partial(self._state)
        self._state = merge_partial(self._state, partial)
        self._settle(on_done)

    def reset_state(self) -> None:
        self.set_state(self._initial_state)

    def notify_subscribers(self, *_ignored) -> None:
        self._dispatcher.notify()

    def force_rerender_subscribers(self, *_ignored) -> None:
        self._dispatcher.force_refresh()

    def _settle(self, on_done) -> None:
        self._dispatcher.notify()
        if on_done is not None:
            require_callable(on_done, "on_done")
            on_done()

    def __repr__(self) -> str:
        return f"Store({self._state!r})"
