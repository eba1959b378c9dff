from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import os

from shapely.geometry import shape as shapely_shape

from .errors import InputError

logger = logging.getLogger(__name__)

_GEOMETRY_TYPES = {
    "Point", "MultiPoint", "LineString", "MultiLineString",
    "Polygon", "MultiPolygon", "GeometryCollection",
}


@dataclass
class Feature:
    geometry: Any = None                        # shapely geometry or None
    properties: Optional[Dict[str, Any]] = None


# ------------------------- Helpers ------------------------- #
def is_geojson_path(path: Union[str, Path]) -> bool:
    p = str(path).lower()
    return p.endswith(".geojson") or p.endswith(".json")


def default_output_path(input_path: Union[str, Path], output_dir: Optional[Union[str, Path]] = None) -> Path:
    """<input stem>.parquet, next to the input unless `output_dir` is given."""
    src = Path(input_path)
    name = src.stem + ".parquet"
    if output_dir is not None:
        return Path(output_dir) / name
    return src.with_name(name)


def validate_output_path(path: Union[str, Path]) -> Path:
    if not str(path).strip():
        raise InputError("output path is empty")
    out = Path(path)
    if out.is_dir():
        raise InputError(f"output path '{out}' is a directory")
    parent = out.parent
    if not parent.is_dir():
        raise InputError(f"output directory '{parent}' does not exist")
    if not os.access(parent, os.W_OK):
        raise InputError(f"output directory '{parent}' is not writable")
    return out


# ------------------------- GeoJSON parsing ------------------------- #
def _to_geometry(obj: Optional[Dict[str, Any]], index: int):
    if obj is None:
        return None
    try:
        return shapely_shape(obj)
    except Exception as e:
        raise InputError(f"invalid geometry in feature {index}", e) from e


def _to_feature(obj: Any, index: int) -> Feature:
    if not isinstance(obj, dict) or obj.get("type") != "Feature":
        raise InputError(f"item {index} is not a GeoJSON Feature")
    props = obj.get("properties")
    if props is not None and not isinstance(props, dict):
        raise InputError(f"feature {index} has non-object properties")
    return Feature(
        geometry=_to_geometry(obj.get("geometry"), index),
        properties=props,
    )


def parse_features(obj: Any) -> List[Feature]:
    """
    Turn a decoded GeoJSON document into Features.

    Accepts a FeatureCollection, a single Feature or a bare geometry
    (which becomes one feature without properties).
    """
    if not isinstance(obj, dict):
        raise InputError("GeoJSON document must be a JSON object")
    kind = obj.get("type")
    if kind == "FeatureCollection":
        items = obj.get("features")
        if not isinstance(items, list):
            raise InputError("FeatureCollection has no 'features' array")
        return [_to_feature(f, i) for i, f in enumerate(items)]
    if kind == "Feature":
        return [_to_feature(obj, 0)]
    if kind in _GEOMETRY_TYPES:
        return [Feature(geometry=_to_geometry(obj, 0))]
    raise InputError(f"unsupported GeoJSON type: {kind!r}")


def read_geojson(path: Union[str, Path]) -> List[Feature]:
    try:
        with open(path, "rt", encoding="utf-8") as f:
            doc = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InputError("failed to read GeoJSON file", e) from e

    features = parse_features(doc)
    logger.info("Read %d features from %s", len(features), path)
    return features
