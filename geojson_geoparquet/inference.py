from __future__ import annotations
import numbers
from collections.abc import Mapping
from enum import Enum

import numpy as np


class SemanticType(Enum):
    STRING = "string"
    INTEGER = "int64"
    FLOAT = "double"
    BOOLEAN = "boolean"
    NULL = "null"

    @property
    def type_name(self) -> str:
        """Canonical type name written to the property metadata."""
        return self.value

    def __str__(self) -> str:
        return self.value


def infer_type(value) -> SemanticType:
    """
    Classify one raw property value.

    Order matters: bool is checked before the integer test because `bool`
    subclasses `int`. Nested dicts/lists and unknown objects fall back to
    STRING (they are serialized to text at row-building time).
    """
    if value is None:
        return SemanticType.NULL
    if isinstance(value, (bool, np.bool_)):
        return SemanticType.BOOLEAN
    if isinstance(value, numbers.Integral):
        return SemanticType.INTEGER
    if isinstance(value, numbers.Real):
        return SemanticType.FLOAT
    if isinstance(value, str):
        return SemanticType.STRING
    if isinstance(value, (Mapping, list, tuple)):
        return SemanticType.STRING
    return SemanticType.STRING
