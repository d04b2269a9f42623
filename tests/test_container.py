"""Tests for create_container() and the binding facade."""

import pytest

from sharedstore import ACTIONS_ONLY, EMPTY, NO_ACTIONS, ComponentHooks, create_container

BUILTINS = [
    "force_rerender_subscribers",
    "notify_subscribers",
    "reset_state",
    "set_partial_state",
    "set_state",
]


class _Component:
    """A headless component making one binding call per render.

    With rerender=True a refresh request renders the component again.
    """

    def __init__(self, use_store, *args, rerender=False):
        self.hooks = ComponentHooks(on_refresh=self.render if rerender else None)
        self._use_store = use_store
        self._args = args
        self.result = None
        self.render()

    def render(self):
        self.result = self.hooks.render(self._use_store, *self._args)
        return self.result

    @property
    def refreshes(self):
        return self.hooks.refresh_count

    def unmount(self):
        self.hooks.unmount()


class TestBasicUse:
    def test_modes_and_notifications(self):
        use_store = create_container()

        c1 = _Component(use_store)
        c2 = _Component(use_store)
        c3 = _Component(use_store, ACTIONS_ONLY)
        c4 = _Component(use_store, NO_ACTIONS)

        state1, actions1 = c1.result
        state2, actions2 = c2.result
        actions3 = c3.result
        assert state1 is EMPTY
        assert state2 is EMPTY
        assert c4.result is EMPTY
        assert list(actions1) == BUILTINS
        assert actions1 is actions2 is actions3

        done = []
        actions3.set_state(42, lambda: done.append(True))
        assert done == [True]
        assert [c.refreshes for c in (c1, c2, c3, c4)] == [1, 1, 0, 1]

        c1.unmount()
        actions3.set_state(84)
        assert [c.refreshes for c in (c1, c2, c3, c4)] == [1, 2, 0, 2]

        actions2.reset_state()
        assert [c.refreshes for c in (c1, c2, c3, c4)] == [1, 3, 0, 3]

    def test_outside_render(self):
        use_store = create_container()
        with pytest.raises(RuntimeError, match="use_store\\(\\) called outside"):
            use_store()

    def test_containers_are_independent(self):
        use_a = create_container(initial_state={"n": 0})
        use_b = create_container(initial_state={"n": 0})
        a = _Component(use_a)
        b = _Component(use_b)
        a.result[1].set_state({"n": 1})
        assert a.refreshes == 1
        assert b.refreshes == 0
        assert len(use_a.container.registry) == 1

    def test_counter_scenario(self):
        use_store = create_container(initial_state={"counter": 0})
        a = _Component(use_store, rerender=True)
        b = _Component(use_store, rerender=True)

        increment = lambda s: {**s, "counter": s["counter"] + 1}  # noqa: E731
        a.result[1].set_state(increment)
        a.result[1].set_state(increment)

        assert a.result[0]["counter"] == 2
        assert b.result[0]["counter"] == 2


class TestMapState:
    def test_single_selector(self):
        use_store = create_container(initial_state={"a": 1, "b": 1})
        c = _Component(use_store, lambda s: s["a"])
        view, actions = c.result
        assert view == 1

        actions.set_partial_state({"b": 2})
        assert c.refreshes == 0
        actions.set_partial_state({"a": 2})
        assert c.refreshes == 1
        actions.set_partial_state({"a": 2})
        assert c.refreshes == 1

    def test_selector_with_no_actions(self):
        use_store = create_container(initial_state={"a": 1})
        c = _Component(use_store, lambda s: s["a"], NO_ACTIONS)
        assert c.result == 1

    def test_full_state_sees_every_partial_merge(self):
        use_store = create_container(initial_state={"a": 1})
        c = _Component(use_store, None, NO_ACTIONS)
        use_store.container.store.set_partial_state({})
        assert c.refreshes == 1


class TestMapStateArray:
    def test_refreshes_only_when_any_element_changes(self):
        initial = {"field_one": 42, "field_two": 84, "other_field": False}
        use_store = create_container(
            actions=lambda store: {"get_state": lambda: store.state},
            initial_state=initial,
        )
        calls = []

        def map_one(s):
            calls.append(1)
            return s["field_one"]

        def map_two(s):
            return s["field_two"]

        def map_even(s):
            return (s["field_one"] + s["field_two"]) % 2 == 0

        c = _Component(use_store, [map_one, map_two, map_even])
        views, actions = c.result
        assert views == (42, 84, True)
        assert len(calls) == 1

        actions.reset_state()
        assert actions.get_state() == initial
        assert len(calls) == 2
        assert c.refreshes == 0

        actions.set_state(initial)
        assert c.refreshes == 0

        # field_two and the parity both change: one refresh
        actions.set_partial_state({"field_two": 7})
        assert actions.get_state() == {"field_one": 42, "field_two": 7, "other_field": False}
        assert c.refreshes == 1

        actions.set_partial_state(lambda _s: {"field_two": 7})
        assert c.refreshes == 1

        actions.set_partial_state({"field_one": 3})
        assert c.refreshes == 2

        actions.set_state(lambda _s: {"field_one": 5, "field_two": 9, "other_field": False})
        assert c.refreshes == 3

        actions.set_state({"field_one": 7, "field_two": 9, "other_field": False})
        assert c.refreshes == 4

        # no selector reads other_field
        actions.set_state({"field_one": 7, "field_two": 9, "other_field": True})
        assert c.refreshes == 4

    def test_other_field_only(self):
        use_store = create_container(
            initial_state={"field_one": 42, "field_two": 84, "other_field": False}
        )
        c = _Component(
            use_store,
            (
                lambda s: s["field_one"],
                lambda s: s["field_two"],
                lambda s: (s["field_one"] + s["field_two"]) % 2,
            ),
            NO_ACTIONS,
        )
        use_store.container.store.set_partial_state({"other_field": True})
        assert c.refreshes == 0
        assert c.result == (42, 84, 0)


class TestMapActions:
    def test_filtered_actions(self):
        use_store = create_container(actions=lambda store: {"action_one": lambda: None})
        c = _Component(use_store, ACTIONS_ONLY)
        assert list(c.result) == [*BUILTINS, "action_one"]

        c = _Component(
            use_store,
            ACTIONS_ONLY,
            lambda ac: {k: v for k, v in ac.items() if k != "action_one"},
        )
        assert list(c.result) == BUILTINS

    def test_mapping_memoized(self):
        use_store = create_container(initial_state={"a": 0})
        calls = []

        def map_actions(actions):
            calls.append(1)
            return actions.set_state

        c = _Component(use_store, None, map_actions, rerender=True)
        set_state = c.result[1]
        set_state({"a": 1})
        set_state({"a": 2})
        assert c.hooks.render_count == 3
        assert len(calls) == 1

    def test_mapping_recomputed_when_mapper_changes(self):
        use_store = create_container(initial_state={"a": 0})
        calls = []

        def map_setter(actions):
            calls.append("setter")
            return actions.set_state

        def map_reset(actions):
            calls.append("reset")
            return actions.reset_state

        hooks = ComponentHooks()
        _, first = hooks.render(use_store, None, map_setter)
        _, second = hooks.render(use_store, None, map_reset)
        assert calls == ["setter", "reset"]
        assert second is not first
        assert second == use_store.container.actions.reset_state

        _, third = hooks.render(use_store, None, map_reset)
        assert calls == ["setter", "reset"]
        assert third is second

    def test_mapping_recomputed_when_no_actions_toggles(self):
        use_store = create_container(initial_state={"a": 0})
        hooks = ComponentHooks()
        no_actions = [False]

        def component():
            if no_actions[0]:
                return use_store(None, NO_ACTIONS)
            return use_store()

        _, actions = hooks.render(component)
        assert actions is use_store.container.actions
        no_actions[0] = True
        assert hooks.render(component) == {"a": 0}

    def test_no_actions_skips_mapping(self):
        use_store = create_container(initial_state={"a": 0})
        c = _Component(use_store, lambda s: s["a"], NO_ACTIONS)
        assert c.result == 0


class TestActionsOnly:
    def test_never_refreshed_by_state(self):
        use_store = create_container(initial_state={"a": 0})
        c = _Component(use_store, ACTIONS_ONLY)
        actions = c.result
        actions.set_state({"a": 1})
        actions.set_partial_state({"a": 2})
        actions.reset_state()
        actions.notify_subscribers()
        assert c.refreshes == 0

        actions.force_rerender_subscribers()
        assert c.refreshes == 1

    def test_registers_no_state_subscription(self):
        use_store = create_container()
        _Component(use_store, ACTIONS_ONLY)
        (record,) = use_store.container.registry.snapshot()
        assert not record.tracks_state


class TestUnmount:
    def test_no_refresh_after_unmount(self):
        use_store = create_container(initial_state={"a": 0})
        c = _Component(use_store)
        actions = c.result[1]
        c.unmount()
        actions.set_state({"a": 1})
        actions.notify_subscribers()
        actions.force_rerender_subscribers()
        assert c.refreshes == 0
        assert len(use_store.container.registry) == 0

    def test_unmount_during_pass(self):
        use_store = create_container(initial_state={"a": 0})
        holder = {}

        first = _Component(use_store)
        first.hooks._on_refresh = lambda: holder["second"].unmount()
        holder["second"] = _Component(use_store)

        first.result[1].set_state({"a": 1})
        assert first.refreshes == 1
        assert holder["second"].refreshes == 0


class TestWrongParams:
    def test_map_state_not_callable(self):
        use_store = create_container()
        with pytest.raises(TypeError, match="map_state is not callable"):
            _Component(use_store, 42)

    def test_map_function_not_callable(self):
        use_store = create_container()
        with pytest.raises(TypeError, match="map_function is not callable"):
            _Component(use_store, [42])

    def test_map_actions_not_callable(self):
        use_store = create_container()
        with pytest.raises(TypeError, match="map_actions is not callable"):
            _Component(use_store, lambda s: s, 42)

    def test_actions_only_is_not_an_actions_mapper(self):
        use_store = create_container()
        with pytest.raises(TypeError, match="map_actions is not callable"):
            _Component(use_store, None, ACTIONS_ONLY)

    def test_mapped_actions_not_callable(self):
        use_store = create_container()
        c = _Component(use_store, ACTIONS_ONLY, lambda actions: 42)
        with pytest.raises(TypeError):
            c.result()
