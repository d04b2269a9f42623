"""Action sets — the named callables handed to bindings.

The built-in mutators come first; an optional factory, given the store,
contributes application actions merged on top (last write wins).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, Iterator

from sharedstore._checks import require_callable
from sharedstore.store import Store

BUILTIN_ACTIONS = (
    "force_rerender_subscribers",
    "notify_subscribers",
    "reset_state",
    "set_partial_state",
    "set_state",
)


class UnknownActionError(TypeError):
    """Raised when a binding reaches for an action the container does not define."""


class ActionSet(Mapping):
    """Immutable mapping of action names to callables.

    Supports both ``actions["set_state"]`` and ``actions.set_state``.
    """

    __slots__ = ("_actions",)

    def __init__(self, actions: Mapping[str, Callable]) -> None:
        object.__setattr__(self, "_actions", dict(actions))

    def __getitem__(self, name: str) -> Callable:
        try:
            return self._actions[name]
        except KeyError:
            raise UnknownActionError(f"actions.{name} is not defined") from None

    def __getattr__(self, name: str) -> Callable:
        if name == "_actions" or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ActionSet is read-only")

    def __copy__(self) -> "ActionSet":
        return ActionSet(self._actions)

    def __reduce__(self):
        return (ActionSet, (self._actions,))

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def get(self, name: str, default: Callable | None = None) -> Callable | None:
        return self._actions.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __dir__(self):
        return [*super().__dir__(), *self._actions]

    def __repr__(self) -> str:
        return f"ActionSet({', '.join(self._actions)})"


def build_actions(store: Store, factory: Callable[[Store], Mapping] | None = None) -> ActionSet:
    """Built-ins first, then the factory's output on top."""
    actions: dict[str, Callable] = {name: getattr(store, name) for name in BUILTIN_ACTIONS}
    if factory is not None:
        require_callable(factory, "actions")
        actions.update(factory(store))
    return ActionSet(actions)
