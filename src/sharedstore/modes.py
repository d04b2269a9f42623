"""Binding modes — the two markers and selector resolution.

A binding call takes a state-selector position and an actions-selector
position. The selector position holds nothing, one selector, a sequence of
selectors, or one of the two markers below.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Mode(enum.Enum):
    """Distinguished markers accepted in place of a selector."""

    ACTIONS_ONLY = "actions_only"
    NO_ACTIONS = "no_actions"

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"


# Return (potentially mapped) actions only; never re-render on state changes.
ACTIONS_ONLY = Mode.ACTIONS_ONLY

# Return (potentially mapped) state only; re-render when it changes.
NO_ACTIONS = Mode.NO_ACTIONS


@dataclass(frozen=True)
class Resolution:
    actions_only: bool
    no_actions: bool
    # None when the selector position is absent or a marker.
    selector: object = None


def resolve_binding(map_state, map_actions) -> Resolution:
    """Classify a binding call's two positions.

    Values that are neither markers nor absent are passed through untouched:
    validating them is left to the point where they are invoked.
    """
    state_mode = map_state if isinstance(map_state, Mode) else None
    actions_mode = map_actions if isinstance(map_actions, Mode) else None

    actions_only = state_mode is Mode.ACTIONS_ONLY
    no_actions = Mode.NO_ACTIONS in (state_mode, actions_mode)
    selector = None if state_mode is not None else map_state
    return Resolution(actions_only, no_actions, selector)


def is_selector_sequence(selector) -> bool:
    return isinstance(selector, (list, tuple))
