from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union
import logging

from .analyzer import ColumnDescriptor, analyze_properties
from .config import Settings, load_settings
from .datasource import Feature, default_output_path, read_geojson, validate_output_path
from .errors import InputError
from .metadata import GeoMetadata, build_geo_metadata
from .schema import build_schema, feature_to_row
from .writer import GeoParquetWriter

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    output_path: Path
    feature_count: int
    descriptors: List[ColumnDescriptor]
    metadata: GeoMetadata


class GeoParquetConverter:
    """
    Converts an in-memory feature collection to one GeoParquet file:
      - analyze property types (one pass) -> column descriptors
      - aggregate geometry types/bounds (one pass) -> 'geo' metadata
      - build the schema once, convert every feature to a row
      - write rows + metadata in a single Parquet write
    """

    def __init__(
        self,
        features: Sequence[Feature],
        output_path: Union[str, Path],
        compression: str = "zstd",
        large_types: bool = False,
    ):
        self.features = features
        self.output_path = Path(output_path)
        self.compression = compression
        self.large_types = large_types

    def run(self) -> ConversionResult:
        if not self.features:
            raise InputError("no features found in input")

        descriptors = analyze_properties(self.features)
        geo = build_geo_metadata(self.features, descriptors)

        try:
            schema = build_schema(descriptors, large_types=self.large_types)
        except ValueError as e:
            raise InputError("cannot build schema from feature properties", e) from e

        rows = [feature_to_row(f, descriptors, index=i) for i, f in enumerate(self.features)]
        logger.info("Converted %d features to rows of width %d", len(rows), len(schema))

        writer = GeoParquetWriter(self.output_path, compression=self.compression)
        out = writer.write(schema, rows, geo)

        return ConversionResult(
            output_path=out,
            feature_count=len(rows),
            descriptors=descriptors,
            metadata=geo,
        )


def resolve_output_path(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]],
    settings: Settings,
) -> Path:
    if output_path:
        return Path(output_path)
    if settings.output_path:
        return Path(settings.output_path)
    return default_output_path(input_path)


def generate(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    compression: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ConversionResult:
    """Read a GeoJSON file and write it as GeoParquet with inferred column types."""
    settings = settings or load_settings()
    out = validate_output_path(resolve_output_path(input_path, output_path, settings))

    features = read_geojson(input_path)
    if not features:
        raise InputError("no features found in GeoJSON file")

    converter = GeoParquetConverter(
        features,
        out,
        compression=compression or settings.compression,
        large_types=settings.large_types,
    )
    result = converter.run()
    logger.info("Wrote %d features to %s", result.feature_count, result.output_path)
    return result
