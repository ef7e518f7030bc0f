"""
palettex - state core for command palettes

One immutable state snapshot, selector-scoped change notification, and a
registry that keeps a flat tree of named actions consistent as batches of
actions come and go.
"""

from .equality import deep_equal
from .options import AnimationOptions, ConfigurationError, PaletteOptions
from .publisher import NOT_COLLECTED, Publisher, Subscriber
from .registry import ActionNotFoundError, action_path
from .store import BatchContext, PaletteStore, Query, Registration
from .types import (
    Action,
    ActionBatch,
    ActionId,
    ActionTree,
    PaletteState,
    VisualState,
    VisualStateUpdate,
)

__all__ = [
    # State container
    "PaletteStore",
    "Query",
    "Registration",
    "BatchContext",
    # Values
    "Action",
    "ActionBatch",
    "ActionId",
    "ActionTree",
    "PaletteState",
    "VisualState",
    "VisualStateUpdate",
    # Configuration
    "PaletteOptions",
    "AnimationOptions",
    # Change notification
    "Publisher",
    "Subscriber",
    "NOT_COLLECTED",
    "deep_equal",
    # Registry helpers
    "action_path",
    # Exceptions
    "ActionNotFoundError",
    "ConfigurationError",
]
