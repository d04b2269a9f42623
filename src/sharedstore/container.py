"""Containers and the binding facade.

create_container() builds one independent store (state cell, action set and
subscription registry) and returns the binding function components call once
per render:

    use_store = create_container(initial_state={"count": 0})

    def counter():
        count, actions = use_store(lambda s: s["count"])
        ...

The binding resolves the requested mode, registers a subscription when the
component mounts, retires it when the component unmounts, and returns the
shaped value:

- use_store(ACTIONS_ONLY[, map_actions]) -> actions
- use_store(map_state, NO_ACTIONS) or use_store(NO_ACTIONS) -> state view
- use_store([map_state[, map_actions]]) -> (state view, actions)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from sharedstore._checks import require_callable
from sharedstore.actions import ActionSet, build_actions
from sharedstore.dispatch import Dispatcher
from sharedstore.hooks import use_hooks
from sharedstore.modes import is_selector_sequence, resolve_binding
from sharedstore.store import EMPTY, Store
from sharedstore.subscription import Subscription, SubscriptionRegistry

logger = logging.getLogger("sharedstore.container")


class Container:
    """One shared store: state cell, action set and subscription registry."""

    def __init__(
        self,
        actions: Callable[[Store], Mapping[str, Callable]] | None = None,
        initial_state: object = EMPTY,
    ) -> None:
        self.registry = SubscriptionRegistry()
        self.dispatcher = Dispatcher(self.registry)
        self.store = Store(self.dispatcher, initial_state)
        self.actions: ActionSet = build_actions(self.store, actions)
        logger.debug("Created container with actions: %s", ", ".join(self.actions))

    def bind(self, map_state=None, map_actions=None) -> Any:
        """Binding facade body. Must run inside a component render."""
        hooks = use_hooks("use_store")
        mode = resolve_binding(map_state, map_actions)

        mapped_actions = hooks.memoize(
            lambda: self._map_actions(mode.no_actions, map_actions),
            [mode.no_actions, map_actions],
        )

        get_view = None
        view = None
        is_array = False
        if not mode.actions_only:
            get_view = self._view_getter(mode.selector)
            is_array = is_selector_sequence(mode.selector)
            view = get_view()

        _, set_local = hooks.use_local_state(object())

        def _subscribe():
            record = Subscription(
                get_view,
                lambda: set_local(object()),
                view,
                is_array=is_array,
            )
            return self.registry.add(record)

        hooks.use_mount_effect(_subscribe)

        if mode.actions_only:
            return mapped_actions
        if mode.no_actions:
            return view
        return view, mapped_actions

    def _map_actions(self, no_actions: bool, map_actions) -> Any:
        if no_actions:
            return None
        if map_actions is None:
            return self.actions
        require_callable(map_actions, "map_actions")
        return map_actions(self.actions)

    def _view_getter(self, selector) -> Callable[[], Any]:
        store = self.store

        if selector is None:
            return lambda: store.state

        if is_selector_sequence(selector):
            selectors = tuple(selector)

            def _many() -> tuple:
                state = store.state
                views = []
                for map_function in selectors:
                    require_callable(map_function, "map_function")
                    views.append(map_function(state))
                return tuple(views)

            return _many

        def _one() -> Any:
            require_callable(selector, "map_state")
            return selector(store.state)

        return _one

    def __repr__(self) -> str:
        return f"Container({self.store.state!r}, subscribers={len(self.registry)})"


def create_container(
    *,
    actions: Callable[[Store], Mapping[str, Callable]] | None = None,
    initial_state: object = EMPTY,
) -> Callable[..., Any]:
    """Create an independent container and return its binding function.

    actions, when given, is a factory called once with the store; the
    mapping it returns is merged over the built-in actions.
    """
    container = Container(actions=actions, initial_state=initial_state)

    def use_store(map_state=None, map_actions=None):
        return container.bind(map_state, map_actions)

    use_store.container = container
    return use_store
