"""
palettex Publisher - Selector-Scoped Change Notification
========================================================

The store owns one Publisher. After each committed transition the store
calls ``notify()``, and every Subscriber re-runs its selector against the
new snapshot. The callback only fires when the derived value differs
structurally from the last one that subscriber saw, so a subscriber that
selects ``state.search_query`` stays quiet while only ``visual_state``
changes.

Usage:
    publisher = Publisher(store.get_state)
    unsubscribe = publisher.subscribe(
        lambda state: state.search_query,
        lambda query: print(f"search is now {query!r}"),
    )
    publisher.notify()   # prints once, for the first collected value
    unsubscribe()

Errors raised by a selector or callback are logged and swallowed at the
Subscriber boundary so one broken subscriber never starves the rest.
"""

import logging
from functools import partial
from typing import Any, Callable, List, Optional

from .equality import deep_equal
from .types import PaletteState


class _NotCollected:
    """Sentinel for a Subscriber that has not collected a value yet."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __eq__(self, other):
        return False

    def __hash__(self):
        return id(self)

    def __repr__(self):
        return "NOT_COLLECTED"


NOT_COLLECTED = _NotCollected()


class Subscriber:
    """Pairs a collector with a callback and remembers the last value seen."""

    __slots__ = ("collector", "on_change", "collected")

    def __init__(
        self,
        collector: Callable[[], Any],
        on_change: Optional[Callable[[Any], None]] = None,
    ):
        self.collector = collector
        self.on_change = on_change
        self.collected: Any = NOT_COLLECTED

    def collect(self) -> None:
        try:
            recollected = self.collector()
            if self.collected is NOT_COLLECTED or not deep_equal(
                recollected, self.collected
            ):
                self.collected = recollected
                if self.on_change is not None:
                    self.on_change(self.collected)
        except Exception as e:
            logging.warning(f"Error in palette subscriber {self!r}: {e!r}")

    def __repr__(self) -> str:
        name = getattr(self.on_change, "__qualname__", None) or repr(self.on_change)
        return f"Subscriber({name})"


class Publisher:
    """Ordered fan-out of state changes to Subscribers."""

    def __init__(self, get_state: Callable[[], PaletteState]):
        self.get_state = get_state
        self.subscribers: List[Subscriber] = []

    def subscribe(
        self,
        selector: Callable[[PaletteState], Any],
        on_change: Callable[[Any], None],
    ) -> Callable[[], None]:
        """Register ``on_change`` for the value ``selector`` derives from state."""
        subscriber = Subscriber(lambda: selector(self.get_state()), on_change)
        self.subscribers.append(subscriber)
        return partial(self.unsubscribe, subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        # By identity: two Subscribers wrapping the same callback are distinct
        for index, existing in enumerate(self.subscribers):
            if existing is subscriber:
                del self.subscribers[index]
                return

    def notify(self) -> None:
        for subscriber in list(self.subscribers):
            subscriber.collect()

    def __len__(self) -> int:
        return len(self.subscribers)

    def __repr__(self) -> str:
        return f"Publisher(subscribers={len(self.subscribers)})"
