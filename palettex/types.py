"""
Core value types for the palette state.

All of these are immutable: a transition never edits a snapshot or an
action, it builds replacements and the store swaps the whole snapshot in.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

ActionId = str


class VisualState(str, Enum):
    """Open/close animation phase of the palette."""

    HIDDEN = "hidden"
    ANIMATING_IN = "animating-in"
    SHOWING = "showing"
    ANIMATING_OUT = "animating-out"

    def __repr__(self) -> str:
        return f"VisualState.{self.name}"


# Either a literal state or an updater applied to the current one
VisualStateUpdate = Union[VisualState, str, Callable[[VisualState], VisualState]]


@dataclass(frozen=True)
class Action:
    """
    A command entry in the palette's action tree.

    ``parent`` and ``children`` are id references into the store's flat
    action map; an Action never owns another Action. ``name`` and
    ``payload`` are carried for the host and never inspected here.
    """

    id: ActionId
    name: Optional[str] = None
    parent: Optional[ActionId] = None
    children: Tuple[ActionId, ...] = ()
    payload: Any = None

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


ActionTree = Mapping[ActionId, Action]


def freeze_actions(actions: Dict[ActionId, Action]) -> ActionTree:
    """Wrap a freshly built action dict in a read-only view."""
    return MappingProxyType(actions)


@dataclass(frozen=True)
class ActionBatch:
    """Ids created by one ``register_actions`` call, removed together."""

    ids: Tuple[ActionId, ...]

    @classmethod
    def of(cls, actions: Iterable[Action]) -> "ActionBatch":
        return cls(tuple(dict.fromkeys(action.id for action in actions)))

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self.ids


@dataclass(frozen=True)
class PaletteState:
    """Immutable snapshot of the whole palette state."""

    search_query: str = ""
    current_root_action_id: Optional[ActionId] = None
    visual_state: VisualState = VisualState.HIDDEN
    actions: ActionTree = field(default_factory=lambda: MappingProxyType({}))

    def __repr__(self) -> str:
        return (
            f"PaletteState(search_query={self.search_query!r}, "
            f"current_root_action_id={self.current_root_action_id!r}, "
            f"visual_state={self.visual_state!r}, "
            f"actions={sorted(self.actions)!r})"
        )
