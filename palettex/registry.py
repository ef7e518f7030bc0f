"""
Action Registry - Pure Transforms Over the Action Map
=====================================================

The palette keeps its actions in a flat map keyed by id. Nesting is
expressed by id references in both directions: a child names its
``parent`` and the parent lists the child in ``children``. Both functions
here take the committed map and return a brand-new dict; neither touches
the map or the Action objects they were given, so the store can commit
the result atomically or drop it on error.

Registration runs in two passes. The first pass only reads and fails with
``ActionNotFoundError`` on an unknown parent. The second pass builds the
merged map and links children to their parents over copies.

Removal is not cascading. Unregistering a parent leaves its children in the
map with a dangling ``parent`` id until their own batch is unregistered.
"""

import dataclasses
import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .types import Action, ActionBatch, ActionId

# ============================================================================
# EXCEPTIONS
# ============================================================================


class ActionNotFoundError(LookupError):
    """Raised when an action id referenced by the caller is not registered."""

    def __init__(self, action_id: ActionId, child_id: Optional[ActionId] = None):
        self.action_id = action_id
        self.child_id = child_id
        super().__init__(f"Action of id '{action_id}' does not exist.")


# ============================================================================
# REGISTRATION
# ============================================================================


def _index(actions: Iterable[Action]) -> Dict[ActionId, Action]:
    incoming: Dict[ActionId, Action] = {}
    for action in actions:
        incoming[action.id] = action
    return incoming


def validate_parents(
    existing: Mapping[ActionId, Action], incoming: Mapping[ActionId, Action]
) -> None:
    """Check every parent reference in ``incoming`` without building anything."""
    for action in incoming.values():
        if action.parent is None:
            continue
        if action.parent not in existing and action.parent not in incoming:
            raise ActionNotFoundError(action.parent, child_id=action.id)


def register_actions(
    existing: Mapping[ActionId, Action], actions: Iterable[Action]
) -> Dict[ActionId, Action]:
    """
    Return a new action map with ``actions`` merged into ``existing``.

    A child may name a parent that is already registered or one that is
    part of the same call, in either order. Ids that are already registered
    keep their committed entry, links included. Children of new actions are
    rebuilt from parent references, so any ``children`` passed in is ignored;
    registered actions that still name a new id as their parent are linked
    back to it.

    Raises:
        ActionNotFoundError: a parent is in neither ``existing`` nor ``actions``.
            ``existing`` is left untouched.
    """
    incoming = _index(actions)
    validate_parents(existing, incoming)

    merged: Dict[ActionId, Action] = {}
    new_ids = []
    for action_id, action in incoming.items():
        if action_id in existing:
            continue
        merged[action_id] = (
            dataclasses.replace(action, children=()) if action.children else action
        )
        new_ids.append(action_id)
    merged.update(existing)

    # Actions left behind when this id was last unregistered link back to it
    new_id_set = set(new_ids)
    for action_id, action in existing.items():
        parent_id = action.parent
        if parent_id not in new_id_set:
            continue
        parent = merged[parent_id]
        if action_id not in parent.children:
            merged[parent_id] = dataclasses.replace(
                parent, children=parent.children + (action_id,)
            )

    for action_id in new_ids:
        parent_id = merged[action_id].parent
        if parent_id is None:
            continue
        parent = merged[parent_id]
        if action_id in parent.children:
            continue
        merged[parent_id] = dataclasses.replace(
            parent, children=parent.children + (action_id,)
        )

    logging.debug(
        f"Registered {len(new_ids)} new action(s), "
        f"{len(incoming) - len(new_ids)} already present"
    )
    return merged


# ============================================================================
# REMOVAL
# ============================================================================


def unregister_actions(
    existing: Mapping[ActionId, Action], batch: ActionBatch
) -> Dict[ActionId, Action]:
    """
    Return a new action map without the ids in ``batch``.

    Each removed action is detached from whatever its parent is in the map
    at this moment. Ids that are already gone are skipped, which makes
    removing the same batch twice harmless.
    """
    remaining = dict(existing)
    removed = 0
    for action_id in batch.ids:
        action = remaining.pop(action_id, None)
        if action is None:
            continue
        removed += 1
        if action.parent is None:
            continue
        parent = remaining.get(action.parent)
        if parent is None or action_id not in parent.children:
            continue
        remaining[parent.id] = dataclasses.replace(
            parent,
            children=tuple(child for child in parent.children if child != action_id),
        )

    logging.debug(f"Unregistered {removed} of {len(batch)} action(s)")
    return remaining


# ============================================================================
# QUERIES
# ============================================================================


def action_path(
    actions: Mapping[ActionId, Action], action_id: ActionId
) -> Tuple[ActionId, ...]:
    """
    Ids from the outermost registered ancestor down to ``action_id``.

    Stops early at a dangling parent reference. Cycles are not detected.
    """
    if action_id not in actions:
        raise ActionNotFoundError(action_id)

    path = [action_id]
    parent_id = actions[action_id].parent
    while parent_id is not None and parent_id in actions:
        path.append(parent_id)
        parent_id = actions[parent_id].parent
    return tuple(reversed(path))
