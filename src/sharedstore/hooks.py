"""Host primitives a binding needs from the UI framework.

A binding reaches its component's host through ``current_hooks``, set for the
duration of a render the same way a derivation is tracked through a context
variable while it evaluates. Hosts implement three primitives:

- memoize(compute, deps): recompute only when deps change by identity.
- use_local_state(initial) -> (value, setter): calling the setter requests a
  re-render of the component.
- use_mount_effect(fn): run fn once after the first render; the callable it
  returns (if any) runs exactly once at unmount.

ComponentHooks is a headless host keeping hook slots in call order. It backs
the Textual bridge and is usable on its own wherever components are plain
functions.
"""

from __future__ import annotations

import contextvars
import logging
from typing import Any, Callable, Protocol, Sequence, TypeVar

from sharedstore.subscription import same_value

T = TypeVar("T")
V = TypeVar("V")

logger = logging.getLogger("sharedstore.hooks")


class Hooks(Protocol):
    def memoize(self, compute: Callable[[], V], deps: Sequence[object]) -> V: ...

    def use_local_state(self, initial: T) -> tuple[T, Callable[[T], None]]: ...

    def use_mount_effect(self, fn: Callable[[], Callable[[], None] | None]) -> None: ...


# The host of the component currently rendering.
current_hooks: contextvars.ContextVar[Hooks | None] = contextvars.ContextVar(
    "current_hooks", default=None
)


def use_hooks(caller: str = "hook") -> Hooks:
    """Return the rendering component's host, or fail if none is rendering."""
    hooks = current_hooks.get()
    if hooks is None:
        raise RuntimeError(f"{caller}() called outside of a component render")
    return hooks


class _Slot:
    __slots__ = ("kind", "value", "deps")

    def __init__(self, kind: str, value: Any = None, deps: tuple | None = None) -> None:
        self.kind = kind
        self.value = value
        self.deps = deps


def _deps_changed(old: tuple, new: tuple) -> bool:
    if len(old) != len(new):
        return True
    return any(not same_value(a, b) for a, b in zip(old, new))


class ComponentHooks:
    """Hook slots for one component instance.

    on_refresh, when given, is called each time the component asks to be
    re-rendered. Refresh requests after unmount are dropped.
    """

    def __init__(self, on_refresh: Callable[[], None] | None = None) -> None:
        self._slots: list[_Slot] = []
        self._cursor = 0
        self._pending_effects: list[Callable] = []
        self._cleanups: list[Callable[[], None]] = []
        self._mounted = False
        self._unmounted = False
        self._on_refresh = on_refresh
        self.render_count = 0
        self.refresh_count = 0

    @property
    def mounted(self) -> bool:
        return self._mounted and not self._unmounted

    @property
    def unmounted(self) -> bool:
        return self._unmounted

    # --- Rendering ---

    def render(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Call fn with this host installed, then run pending mount effects."""
        if self._unmounted:
            raise RuntimeError("cannot render an unmounted component")
        self._cursor = 0
        token = current_hooks.set(self)
        try:
            result = fn(*args, **kwargs)
        finally:
            current_hooks.reset(token)
        if self._mounted and self._cursor != len(self._slots):
            raise RuntimeError(
                f"rendered {self._cursor} hooks, expected {len(self._slots)}"
            )
        self.render_count += 1
        self._commit()
        return result

    def _commit(self) -> None:
        self._mounted = True
        effects, self._pending_effects = self._pending_effects, []
        for effect in effects:
            cleanup = effect()
            if cleanup is not None:
                self._cleanups.append(cleanup)

    def unmount(self) -> None:
        """Run mount-effect cleanups, last registered first. Idempotent."""
        if self._unmounted:
            return
        self._unmounted = True
        cleanups, self._cleanups = self._cleanups, []
        for cleanup in reversed(cleanups):
            cleanup()
        logger.debug("Unmounted %r", self)

    def request_refresh(self) -> None:
        if self._unmounted:
            return
        self.refresh_count += 1
        if self._on_refresh is not None:
            self._on_refresh()

    # --- Primitives ---

    def _slot(self, kind: str) -> tuple[_Slot, bool]:
        """Next slot in call order, and whether it was just created."""
        index = self._cursor
        self._cursor += 1
        if index < len(self._slots):
            slot = self._slots[index]
            if slot.kind != kind:
                raise RuntimeError(
                    f"hook order changed: slot {index} was {slot.kind}, now {kind}"
                )
            return slot, False
        if self._mounted:
            raise RuntimeError("rendered more hooks than during the first render")
        slot = _Slot(kind)
        self._slots.append(slot)
        return slot, True

    def memoize(self, compute: Callable[[], V], deps: Sequence[object]) -> V:
        slot, created = self._slot("memo")
        deps = tuple(deps)
        if created or _deps_changed(slot.deps, deps):
            slot.value = compute()
            slot.deps = deps
        return slot.value

    def use_local_state(self, initial: T) -> tuple[T, Callable[[T], None]]:
        slot, created = self._slot("state")
        if created:
            def _set(value: T) -> None:
                slot.value[0] = value
                self.request_refresh()

            slot.value = [initial, _set]
        return slot.value[0], slot.value[1]

    def use_mount_effect(self, fn: Callable[[], Callable[[], None] | None]) -> None:
        _, created = self._slot("effect")
        if created:
            self._pending_effects.append(fn)

    def __repr__(self) -> str:
        state = "unmounted" if self._unmounted else "mounted" if self._mounted else "new"
        return f"{type(self).__name__}({state}, renders={self.render_count})"
