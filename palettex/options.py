"""
Construction options for a palette store.

Options are merged once, when the store is built, and then frozen. The
store does not watch them afterwards; a host that wants different timings
builds a new store.
"""

from dataclasses import dataclass, field
from numbers import Real
from types import MappingProxyType
from typing import Any, Mapping, Optional


class ConfigurationError(ValueError):
    """Raised when a store is constructed with unusable configuration."""

    pass


DEFAULT_ENTER_MS = 200
DEFAULT_EXIT_MS = 100

# Hosts written against the camelCase option names keep working
_ANIMATION_ALIASES = {"enterMs": "enter_ms", "exitMs": "exit_ms"}


@dataclass(frozen=True)
class AnimationOptions:
    """
    Enter/exit animation durations in milliseconds, consumed by the host.

    Any other animation keys the host supplies are kept verbatim in ``extra``.
    """

    enter_ms: float = DEFAULT_ENTER_MS
    exit_ms: float = DEFAULT_EXIT_MS
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class PaletteOptions:
    """Merged, read-only palette configuration."""

    animations: AnimationOptions = field(default_factory=AnimationOptions)
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, key: str) -> Any:
        if key == "animations":
            return self.animations
        return self.extra[key]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "PaletteOptions":
        """Merge host ``overrides`` over the defaults."""
        if overrides is None:
            return cls()
        if isinstance(overrides, cls):
            return overrides
        if not isinstance(overrides, Mapping):
            raise ConfigurationError(
                f"options must be a mapping, got {type(overrides).__name__}"
            )

        extra = {key: value for key, value in overrides.items() if key != "animations"}
        return cls(
            animations=_merge_animations(overrides.get("animations")),
            extra=MappingProxyType(extra),
        )


def _merge_animations(overrides: Any) -> AnimationOptions:
    if overrides is None:
        return AnimationOptions()
    if isinstance(overrides, AnimationOptions):
        return overrides
    if not isinstance(overrides, Mapping):
        raise ConfigurationError(
            f"options['animations'] must be a mapping, got {type(overrides).__name__}"
        )

    values = {"enter_ms": DEFAULT_ENTER_MS, "exit_ms": DEFAULT_EXIT_MS}
    extra = {}
    for key, value in overrides.items():
        name = _ANIMATION_ALIASES.get(key, key)
        if name not in values:
            extra[key] = value
            continue
        if isinstance(value, bool) or not isinstance(value, Real) or value < 0:
            raise ConfigurationError(
                f"Animation option '{key}' must be a non-negative number, got {value!r}"
            )
        values[name] = value
    return AnimationOptions(extra=MappingProxyType(extra), **values)
