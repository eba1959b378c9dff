from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Union
import logging

import numpy as np
import pyarrow.parquet as pq
import shapely
from shapely import from_wkb

from .geometry import Bound, geometry_type
from .metadata import GeoMetadata, read_geo_metadata

logger = logging.getLogger(__name__)


@dataclass
class VerifyReport:
    path: Path
    geo: Optional[GeoMetadata] = None
    computed_bbox: Optional[Bound] = None
    computed_types: List[str] = field(default_factory=list)
    num_rows: int = 0
    problems: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


def _iter_geometries(pf: pq.ParquetFile, geom_col: str):
    """Decoded geometries of `geom_col`, one row group at a time."""
    for rg in range(pf.num_row_groups):
        tbl = pf.read_row_group(rg, columns=[geom_col]).combine_chunks()
        yield from_wkb(tbl[geom_col].to_numpy(zero_copy_only=False))


def compute_bbox(path: Union[str, Path], geom_col: str = "geometry") -> Optional[Bound]:
    pf = pq.ParquetFile(str(path))
    return _scan(pf, geom_col)[0]


def _scan(pf: pq.ParquetFile, geom_col: str):
    mins = np.array([np.inf, np.inf])
    maxs = np.array([-np.inf, -np.inf])
    types: Set[str] = set()
    for geoms in _iter_geometries(pf, geom_col):
        for g in geoms:
            if g is not None:
                types.add(geometry_type(g))
        b = shapely.bounds(geoms)  # NaN rows for missing/empty geometries
        if b.size == 0 or np.all(np.isnan(b)):
            continue
        mins = np.minimum(mins, np.nanmin(b[:, :2], axis=0))
        maxs = np.maximum(maxs, np.nanmax(b[:, 2:], axis=0))
    if not np.all(np.isfinite(mins)):
        return None, sorted(types)
    return Bound(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])), sorted(types)


def verify_geoparquet(path: Union[str, Path], tol: float = 1e-9) -> VerifyReport:
    """
    Compare the embedded 'geo' block against the geometries actually stored:
    primary column present, geometry_types and bbox consistent.
    """
    report = VerifyReport(path=Path(path))
    pf = pq.ParquetFile(str(path))
    report.num_rows = pf.metadata.num_rows
    report.geo = read_geo_metadata(path)

    if report.geo is None:
        report.problems.append("no 'geo' metadata block")
        return report

    geom_col = report.geo.primary_column
    if geom_col not in pf.schema_arrow.names:
        report.problems.append(f"primary column '{geom_col}' missing from schema")
        return report
    if geom_col not in report.geo.columns:
        report.problems.append(f"primary column '{geom_col}' has no column metadata")
        return report

    report.computed_bbox, report.computed_types = _scan(pf, geom_col)
    col = report.geo.columns[geom_col]

    if col.geometry_types and sorted(col.geometry_types) != report.computed_types:
        report.problems.append(
            f"geometry_types {col.geometry_types} != decoded {report.computed_types}"
        )

    meta_bbox = report.geo.bound
    if meta_bbox is None and report.computed_bbox is not None:
        report.problems.append("bbox missing from metadata")
    elif meta_bbox is not None and report.computed_bbox is None:
        report.problems.append("metadata has bbox but no geometries were decoded")
    elif meta_bbox is not None and not meta_bbox.almost_equals(report.computed_bbox, tol):
        report.problems.append(f"bbox {meta_bbox.as_list()} != computed {report.computed_bbox.as_list()}")

    logger.info("Verified %s: rows=%d problems=%d", path, report.num_rows, len(report.problems))
    return report
