from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Union
import json
import logging

import pyarrow.parquet as pq

from .analyzer import ColumnDescriptor
from .errors import GeometryEncodingError
from .geometry import Bound, geometry_bound, geometry_type
from .inference import SemanticType
from .schema import GEOMETRY_COLUMN

logger = logging.getLogger(__name__)

GEOPARQUET_VERSION = "1.1.0"
GEO_METADATA_KEY = b"geo"
PROPERTIES_METADATA_KEY = b"geojson_geoparquet:properties"
GEOMETRY_ENCODING = "WKB"
DEFAULT_CRS = "OGC:CRS84"
MIXED_GEOMETRY_TYPE = "Mixed"
UNKNOWN_GEOMETRY_TYPE = "Unknown"

# Spellings of the implicit GeoParquet default. EPSG:4326 is not one: its axis order is lat/lon
_DEFAULT_CRS_ALIASES = {"OGC:CRS84", "CRS84"}


def is_default_crs(crs: Optional[str]) -> bool:
    return crs is None or crs.strip().upper() in _DEFAULT_CRS_ALIASES


# ------------------------- Geometry summary ------------------------- #
class GeometrySummary:
    """Running set of geometry type tags and union of bounds."""

    def __init__(self) -> None:
        self._types: Set[str] = set()
        self._bound: Optional[Bound] = None
        self.count = 0

    def observe(self, geom, index: Optional[int] = None) -> None:
        if geom is None:
            return
        try:
            tag = geometry_type(geom)
            b = geometry_bound(geom)
        except GeometryEncodingError as e:
            where = f"feature {index}" if index is not None else "feature"
            raise GeometryEncodingError(f"failed to summarize geometry of {where}", e.cause, index) from e
        self.count += 1
        self._types.add(tag)
        self._add_bound(b)

    def _add_bound(self, b: Optional[Bound]) -> None:
        if b is None:
            return
        self._bound = b if self._bound is None else self._bound.union(b)

    def merge(self, other: "GeometrySummary") -> "GeometrySummary":
        self._types |= other._types
        self._add_bound(other._bound)
        self.count += other.count
        return self

    @property
    def geometry_types(self) -> List[str]:
        return sorted(self._types)

    @property
    def bound(self) -> Optional[Bound]:
        return self._bound

    @property
    def type_label(self) -> str:
        if not self._types:
            return UNKNOWN_GEOMETRY_TYPE
        if len(self._types) == 1:
            return next(iter(self._types))
        return MIXED_GEOMETRY_TYPE


def summarize_geometries(features: Iterable) -> GeometrySummary:
    summary = GeometrySummary()
    for i, feature in enumerate(features):
        summary.observe(feature.geometry, index=i)
    return summary


# ------------------------- GeoParquet 'geo' block ------------------------- #
@dataclass
class GeoColumnMetadata:
    encoding: str = GEOMETRY_ENCODING
    geometry_types: List[str] = field(default_factory=list)
    bbox: Optional[List[float]] = None
    crs: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "encoding": self.encoding,
            "geometry_types": list(self.geometry_types),
        }
        if self.bbox is not None:
            out["bbox"] = [float(v) for v in self.bbox]
        if self.crs is not None:
            out["crs"] = self.crs
        return out

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GeoColumnMetadata":
        bbox = d.get("bbox")
        return cls(
            encoding=d.get("encoding", GEOMETRY_ENCODING),
            geometry_types=list(d.get("geometry_types") or []),
            bbox=[float(v) for v in bbox] if isinstance(bbox, list) and len(bbox) == 4 else None,
            crs=d.get("crs"),
        )


@dataclass
class GeoMetadata:
    """
    GeoParquet file metadata, stored as JSON under the `geo` key:

      {"version": "1.1.0",
       "primary_column": "geometry",
       "columns": {"geometry": {"encoding": "WKB",
                                "geometry_types": [...],
                                "bbox": [minx, miny, maxx, maxy]}}}

    `bbox` is present only when at least one feature has a non-empty
    geometry; `crs` only when it differs from the default.
    """
    version: str = GEOPARQUET_VERSION
    primary_column: str = GEOMETRY_COLUMN
    columns: Dict[str, GeoColumnMetadata] = field(default_factory=dict)
    properties: List[ColumnDescriptor] = field(default_factory=list)

    @property
    def primary(self) -> GeoColumnMetadata:
        return self.columns[self.primary_column]

    @property
    def geometry_type_label(self) -> str:
        types = self.primary.geometry_types
        if not types:
            return UNKNOWN_GEOMETRY_TYPE
        if len(types) == 1:
            return types[0]
        return MIXED_GEOMETRY_TYPE

    @property
    def bound(self) -> Optional[Bound]:
        bbox = self.primary.bbox
        return Bound(*bbox) if bbox else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "primary_column": self.primary_column,
            "columns": {name: col.to_dict() for name, col in self.columns.items()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GeoMetadata":
        return cls(
            version=d.get("version", GEOPARQUET_VERSION),
            primary_column=d.get("primary_column", GEOMETRY_COLUMN),
            columns={name: GeoColumnMetadata.from_dict(c) for name, c in (d.get("columns") or {}).items()},
        )

    def schema_metadata(self) -> Dict[bytes, bytes]:
        md = {GEO_METADATA_KEY: self.to_json().encode("utf-8")}
        if self.properties:
            md[PROPERTIES_METADATA_KEY] = json.dumps(
                properties_metadata(self.properties), separators=(",", ":")
            ).encode("utf-8")
        return md


def properties_metadata(descriptors: Sequence[ColumnDescriptor]) -> List[Dict[str, Any]]:
    return [{"name": d.name, "type": d.type.type_name, "nullable": d.nullable} for d in descriptors]


def build_geo_metadata(
    features: Iterable,
    descriptors: Sequence[ColumnDescriptor] = (),
    crs: Optional[str] = None,
) -> GeoMetadata:
    summary = summarize_geometries(features)
    bound = summary.bound
    col = GeoColumnMetadata(
        encoding=GEOMETRY_ENCODING,
        geometry_types=summary.geometry_types,
        bbox=bound.as_list() if bound is not None else None,
        crs=None if is_default_crs(crs) else crs,
    )
    logger.info(
        "Geometry summary: %d geometries, type=%s, bbox=%s",
        summary.count, summary.type_label, col.bbox,
    )
    return GeoMetadata(
        version=GEOPARQUET_VERSION,
        primary_column=GEOMETRY_COLUMN,
        columns={GEOMETRY_COLUMN: col},
        properties=list(descriptors),
    )


def read_geo_metadata(path: Union[str, Path]) -> Optional[GeoMetadata]:
    """Decode the `geo` block of a Parquet file, or None if it has none."""
    meta = pq.read_metadata(str(path)).metadata or {}
    raw = meta.get(GEO_METADATA_KEY)
    if raw is None:
        return None
    try:
        geo = GeoMetadata.from_dict(json.loads(raw.decode("utf-8")))
    except (TypeError, AttributeError, ValueError) as e:
        raise ValueError(f"malformed geo metadata in {path}: {e!r}") from e
    props_raw = meta.get(PROPERTIES_METADATA_KEY)
    if props_raw is not None:
        try:
            geo.properties = [
                ColumnDescriptor(p["name"], SemanticType(p["type"]), bool(p.get("nullable", True)))
                for p in json.loads(props_raw.decode("utf-8"))
            ]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ValueError(f"malformed {PROPERTIES_METADATA_KEY.decode()} metadata in {path}: {e!r}") from e
    return geo
