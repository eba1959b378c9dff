from __future__ import annotations
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence
import json
import logging
import math
import numbers

import numpy as np
import pyarrow as pa

from .analyzer import ColumnDescriptor
from .errors import GeometryEncodingError
from .geometry import encode_wkb
from .inference import SemanticType

logger = logging.getLogger(__name__)

GEOMETRY_COLUMN = "geometry"

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


# ------------------------- Schema ------------------------- #
def arrow_type(semantic_type: SemanticType, large_types: bool = False) -> pa.DataType:
    """
    Arrow type for a property slot. `large_types` selects 64-bit offset
    string storage to avoid offset overflow on very large tables.
    """
    if semantic_type == SemanticType.INTEGER:
        return pa.int64()
    if semantic_type == SemanticType.FLOAT:
        return pa.float64()
    if semantic_type == SemanticType.BOOLEAN:
        return pa.bool_()
    return pa.large_string() if large_types else pa.string()


def build_schema(descriptors: Sequence[ColumnDescriptor], large_types: bool = False) -> pa.Schema:
    """Geometry (WKB) first, then one nullable field per descriptor, in order."""
    geom_type = pa.large_binary() if large_types else pa.binary()
    fields = [pa.field(GEOMETRY_COLUMN, geom_type, nullable=True)]
    for d in descriptors:
        if d.name == GEOMETRY_COLUMN:
            raise ValueError(f"Property name '{d.name}' collides with the geometry column")
        fields.append(pa.field(d.name, arrow_type(d.type, large_types), nullable=d.nullable))
    return pa.schema(fields)


# ------------------------- Coercion ------------------------- #
def _is_bool(v: Any) -> bool:
    return isinstance(v, (bool, np.bool_))


def _is_int(v: Any) -> bool:
    return isinstance(v, numbers.Integral) and not _is_bool(v)


def _is_float(v: Any) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, numbers.Integral) and not _is_bool(v)


def _to_int64(value: Any) -> Optional[int]:
    if _is_int(value):
        iv = int(value)
    elif _is_float(value):
        fv = float(value)
        if not math.isfinite(fv):
            return None
        iv = int(fv)  # truncates toward zero
    else:
        return None
    if iv < _INT64_MIN or iv > _INT64_MAX:
        return None
    return iv


def _to_double(value: Any) -> Optional[float]:
    if _is_int(value) or _is_float(value):
        try:
            return float(value)
        except OverflowError:
            return None
    return None


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if _is_bool(value):
        return "true" if value else "false"
    if _is_int(value):
        return str(int(value))
    if _is_float(value):
        return json.dumps(float(value))
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def coerce_value(value: Any, semantic_type: SemanticType) -> Any:
    """
    Convert a raw property value to the Python value stored in a slot of
    `semantic_type`. Values that cannot be represented become None.
    """
    if value is None:
        return None
    if semantic_type == SemanticType.INTEGER:
        out = _to_int64(value)
    elif semantic_type == SemanticType.FLOAT:
        out = _to_double(value)
    elif semantic_type == SemanticType.BOOLEAN:
        out = bool(value) if _is_bool(value) else None
    else:
        return _to_text(value)

    if out is None:
        logger.debug("Cannot coerce %r to %s; storing null", value, semantic_type)
    return out


# ------------------------- Rows ------------------------- #
def feature_to_row(feature, descriptors: Sequence[ColumnDescriptor], index: Optional[int] = None) -> List[Any]:
    """
    One row of width 1 + len(descriptors): WKB geometry (or None), then the
    coerced value of every descriptor in order.
    """
    row: List[Any] = [None] * (1 + len(descriptors))

    if feature.geometry is not None:
        try:
            row[0] = encode_wkb(feature.geometry)
        except GeometryEncodingError as e:
            where = f"feature {index}" if index is not None else "feature"
            raise GeometryEncodingError(f"failed to encode geometry of {where}", e.cause, index) from e

    props = feature.properties
    if props:
        for i, d in enumerate(descriptors, start=1):
            row[i] = coerce_value(props.get(d.name), d.type)
    return row


def rows_to_table(rows: Sequence[Sequence[Any]], schema: pa.Schema) -> pa.Table:
    width = len(schema)
    columns: List[List[Any]] = [[] for _ in range(width)]
    for row in rows:
        if len(row) != width:
            raise ValueError(f"Row width {len(row)} does not match schema width {width}")
        for i, v in enumerate(row):
            columns[i].append(v)
    arrays = [pa.array(col, type=fld.type) for col, fld in zip(columns, schema)]
    return pa.Table.from_arrays(arrays, schema=schema)
