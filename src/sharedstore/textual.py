"""Textual integration for sharedstore. Opt-in — requires textual.

WidgetHooks hosts bindings for one widget: a refresh request repaints the
widget, mount effects run after the widget's render, cleanups run when it
unmounts. Refreshes are skipped while the app is paused or not running,
cross-thread requests are marshaled through call_from_thread, and NoMatches
from a widget being torn down is swallowed.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches
from textual.widget import Widget

from sharedstore.hooks import ComponentHooks

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend widget refreshes during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


class WidgetHooks(ComponentHooks):
    """Hook host for a single Textual widget."""

    def __init__(self, widget, *, layout: bool = False) -> None:
        super().__init__(on_refresh=self._guarded)
        self._widget = widget
        self._layout = layout
        self._main = threading.get_ident()

    def _guarded(self) -> None:
        app = self._widget.app
        if not is_safe(app):
            return
        if threading.get_ident() != self._main:
            app.call_from_thread(self._safe)
        else:
            self._safe()

    def _safe(self) -> None:
        try:
            self._widget.refresh(layout=self._layout)
        except NoMatches:
            pass


class BoundWidget(Widget):
    """A widget whose render() reads from shared stores.

    Subclasses implement render_bound(), calling binding functions inside it:

        use_store = create_container(initial_state={"count": 0})

        class Counter(BoundWidget):
            def render_bound(self):
                count = use_store(lambda s: s["count"], NO_ACTIONS)
                return f"Count: {count}"
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.store_hooks = WidgetHooks(self)

    def render(self):
        return self.store_hooks.render(self.render_bound)

    def render_bound(self):
        """Return the renderable for this widget. Subclasses must override."""
        raise NotImplementedError

    def on_unmount(self) -> None:
        self.store_hooks.unmount()
