"""sharedstore: a shared state container with fine-grained re-render notification."""

from importlib.metadata import version as _version

__version__ = _version("sharedstore")

from sharedstore.modes import Mode, ACTIONS_ONLY, NO_ACTIONS
from sharedstore.store import Store, EMPTY
from sharedstore.actions import ActionSet, UnknownActionError
from sharedstore.subscription import Subscription, SubscriptionRegistry, same_value
from sharedstore.dispatch import Dispatcher
from sharedstore.hooks import Hooks, ComponentHooks, current_hooks, use_hooks
from sharedstore.container import Container, create_container
# textual NOT auto-imported — opt-in only

__all__ = [
    "Mode",
    "ACTIONS_ONLY",
    "NO_ACTIONS",
    "Store",
    "EMPTY",
    "ActionSet",
    "UnknownActionError",
    "Subscription",
    "SubscriptionRegistry",
    "same_value",
    "Dispatcher",
    "Hooks",
    "ComponentHooks",
    "current_hooks",
    "use_hooks",
    "Container",
    "create_container",
]
