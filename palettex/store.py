"""
palettex Store - Command Palette State Container
================================================

This module provides PaletteStore, the single owner of a command palette's
state. The rendering host reads the current snapshot with ``get_state()``,
drives transitions through ``store.query``, and reacts to changes with
``subscribe()``.

Every transition works the same way:

1. a pure transform builds the next PaletteState from the current one
2. the store swaps the new snapshot in (one reference assignment)
3. the Publisher notifies subscribers, who see the new snapshot

Snapshots are never edited in place, so a reader holding an older snapshot
keeps a consistent view of it.

Basic Usage
-----------

```python
from palettex import Action, PaletteStore

store = PaletteStore(
    actions=[
        Action("theme", name="Change theme"),
        Action("theme.dark", name="Dark", parent="theme"),
    ]
)

unsubscribe = store.subscribe(
    lambda state: state.visual_state,
    lambda visual_state: print(f"palette is {visual_state.value}"),
)

store.query.toggle()            # palette is animating-in
store.query.set_search("dar")

unregister = store.query.register_actions([Action("quit", name="Quit")])
unregister()                    # removes "quit" again
```

Batching
--------

A host that applies several queries for one render can coalesce their
notifications:

```python
with store.batch():
    store.query.set_current_root_action("theme")
    store.query.set_search("")
# subscribers are notified once, here
```
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional

from . import registry
from .options import ConfigurationError, PaletteOptions
from .publisher import Publisher
from .types import (
    Action,
    ActionBatch,
    ActionId,
    PaletteState,
    VisualState,
    VisualStateUpdate,
    freeze_actions,
)

Transform = Callable[[PaletteState], PaletteState]


def _toggled(visual_state: VisualState) -> VisualState:
    if visual_state in (VisualState.ANIMATING_OUT, VisualState.HIDDEN):
        return VisualState.ANIMATING_IN
    return VisualState.ANIMATING_OUT


class Registration:
    """
    Returned by ``register_actions``. Calling it unregisters the batch.

    The batch itself is kept on ``batch`` so it can also be handed to
    ``Query.unregister_actions`` directly.
    """

    __slots__ = ("_query", "batch")

    def __init__(self, query: "Query", batch: ActionBatch):
        self._query = query
        self.batch = batch

    def __call__(self) -> None:
        self._query.unregister_actions(self.batch)

    def __repr__(self) -> str:
        return f"Registration(ids={list(self.batch.ids)!r})"


class Query:
    """State transitions exposed to the host as ``store.query``."""

    def __init__(self, store: "PaletteStore"):
        self._store = store

    def set_current_root_action(self, action_id: Optional[ActionId]) -> None:
        self._store._apply(
            lambda state: replace(state, current_root_action_id=action_id)
        )

    def set_search(self, search_query: str) -> None:
        self._store._apply(lambda state: replace(state, search_query=search_query))

    def set_visual_state(self, update: VisualStateUpdate) -> None:
        """Set the visual state to a value, or to ``update(current)``."""

        def transform(state: PaletteState) -> PaletteState:
            if callable(update):
                visual_state = update(state.visual_state)
            else:
                visual_state = update
            return replace(state, visual_state=VisualState(visual_state))

        self._store._apply(transform)

    def toggle(self) -> None:
        self._store._apply(
            lambda state: replace(state, visual_state=_toggled(state.visual_state))
        )

    def register_actions(self, actions: Iterable[Action]) -> Registration:
        """
        Add ``actions`` to the tree and return a handle that removes them.

        Raises:
            ActionNotFoundError: an action names a parent that is neither
                registered nor part of ``actions``. Nothing is committed.
        """
        actions = list(actions)
        self._store._apply(
            lambda state: replace(
                state,
                actions=freeze_actions(
                    registry.register_actions(state.actions, actions)
                ),
            )
        )
        return Registration(self, ActionBatch.of(actions))

    def unregister_actions(self, batch: ActionBatch) -> None:
        self._store._apply(
            lambda state: replace(
                state,
                actions=freeze_actions(
                    registry.unregister_actions(state.actions, batch)
                ),
            )
        )


class BatchContext:
    """Defers subscriber notification until the outermost block exits."""

    def __init__(self, store: "PaletteStore"):
        self._store = store

    def __enter__(self):
        self._store._batch_depth += 1
        if self._store._batch_depth == 1:
            self._store._pending_notify = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._store._batch_depth -= 1

        if self._store._batch_depth == 0 and self._store._pending_notify:
            self._store._pending_notify = False
            logging.debug("Flushing batched palette notifications")
            self._store._publisher.notify()

        return False


class PaletteStore:
    """
    Owns the palette snapshot and the subscribers watching it.

    Args:
        actions: Initial actions. Required; pass an empty list for none.
        options: Host configuration merged over the defaults once, here.

    Raises:
        ConfigurationError: ``actions`` is missing or ``options`` is invalid.
        ActionNotFoundError: an initial action names an unknown parent.
    """

    def __init__(
        self,
        actions: Optional[Iterable[Action]] = None,
        options: Optional[Any] = None,
    ):
        if actions is None:
            raise ConfigurationError(
                "You must define a list of `actions` when creating a PaletteStore"
            )

        self._options = PaletteOptions.from_mapping(options)
        self._state = PaletteState(
            actions=freeze_actions(registry.register_actions({}, actions))
        )
        self._publisher = Publisher(self.get_state)
        self._batch_depth = 0
        self._pending_notify = False
        self.query = Query(self)

    @property
    def options(self) -> PaletteOptions:
        return self._options

    def get_state(self) -> PaletteState:
        return self._state

    def subscribe(
        self,
        selector: Callable[[PaletteState], Any],
        on_change: Callable[[Any], None],
    ) -> Callable[[], None]:
        """
        Call ``on_change`` whenever ``selector(state)`` changes structurally.

        The first notification after subscribing always fires. Returns a
        function that removes this subscription.
        """
        return self._publisher.subscribe(selector, on_change)

    def batch(self) -> BatchContext:
        """Coalesce notifications for the transitions made inside the block."""
        return BatchContext(self)

    def _apply(self, transform: Transform) -> None:
        # A failing transform raises before anything is committed
        self._state = transform(self._state)
        if self._batch_depth > 0:
            self._pending_notify = True
            return
        self._publisher.notify()

    def __repr__(self) -> str:
        return f"PaletteStore({self._state!r})"
