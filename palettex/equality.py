"""
Structural equality used for change detection.

Subscribers compare each freshly derived value with the one they saw last;
plain ``==`` is not enough for that because derived values are often
mappings built per snapshot, dataclasses holding such mappings, or numpy
arrays (whose ``==`` is elementwise).

Rules:
    - mappings compare by key/value, insertion order ignored
    - lists and tuples compare in order, and a list never equals a tuple
    - dataclass instances compare by type and then field by field
    - numpy arrays compare with ``np.array_equal``

Values are assumed to be acyclic.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any

import numpy as np


def deep_equal(a: Any, b: Any) -> bool:
    """Return True when ``a`` and ``b`` are structurally equal."""
    if a is b:
        return True

    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        if type(a) != type(b):
            return False
        return bool(np.array_equal(a, b))

    if isinstance(a, Mapping) or isinstance(b, Mapping):
        if not (isinstance(a, Mapping) and isinstance(b, Mapping)):
            return False
        if len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b:
                return False
            if not deep_equal(value, b[key]):
                return False
        return True

    if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
        # A list is never equal to a tuple with the same items
        if isinstance(a, list) != isinstance(b, list):
            return False
        if not (isinstance(a, (list, tuple)) and isinstance(b, (list, tuple))):
            return False
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    if dataclasses.is_dataclass(a) and not isinstance(a, type):
        if type(a) is not type(b):
            return False
        return all(
            deep_equal(getattr(a, field.name), getattr(b, field.name))
            for field in dataclasses.fields(a)
            if field.compare
        )

    try:
        return bool(a == b)
    except (ValueError, TypeError):
        return False
