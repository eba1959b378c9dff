from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple
import math

import shapely

from .errors import GeometryEncodingError


@dataclass(frozen=True)
class Bound:
    """Axis-aligned rectangle (minx, miny, maxx, maxy)."""
    minx: float
    miny: float
    maxx: float
    maxy: float

    @classmethod
    def from_tuple(cls, bounds: Tuple[float, float, float, float]) -> "Bound":
        return cls(float(bounds[0]), float(bounds[1]), float(bounds[2]), float(bounds[3]))

    def union(self, other: "Bound") -> "Bound":
        return Bound(
            min(self.minx, other.minx),
            min(self.miny, other.miny),
            max(self.maxx, other.maxx),
            max(self.maxy, other.maxy),
        )

    def as_list(self) -> List[float]:
        return [self.minx, self.miny, self.maxx, self.maxy]

    def almost_equals(self, other: "Bound", tol: float = 1e-9) -> bool:
        return all(abs(a - b) <= tol for a, b in zip(self.as_list(), other.as_list()))


# shapely reports LinearRing separately; GeoParquet only knows the GeoJSON tags
_TYPE_ALIASES = {"LinearRing": "LineString"}


def geometry_type(geom) -> str:
    """GeoJSON type tag, suffixed with " Z" for geometries with Z coordinates."""
    try:
        t = geom.geom_type
        has_z = shapely.has_z(geom)
    except Exception as e:
        raise GeometryEncodingError("failed to read geometry type", e) from e
    t = _TYPE_ALIASES.get(t, t)
    return f"{t} Z" if has_z else t


def geometry_bound(geom) -> Optional[Bound]:
    """Bounds of `geom`, or None when it is empty (shapely returns NaNs)."""
    if geom is None:
        return None
    try:
        if geom.is_empty:
            return None
        b = geom.bounds
    except Exception as e:
        raise GeometryEncodingError("failed to read geometry bounds", e) from e
    if any(math.isnan(v) for v in b):
        return None
    return Bound.from_tuple(b)


def encode_wkb(geom) -> bytes:
    try:
        return shapely.to_wkb(geom, flavor="iso")
    except Exception as e:
        raise GeometryEncodingError("failed to encode geometry as WKB", e) from e
