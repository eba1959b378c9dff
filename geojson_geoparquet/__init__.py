from .version import __version__
from .errors import ConversionError, InputError, GeometryEncodingError, WriteError
from .inference import SemanticType, infer_type
from .analyzer import ColumnDescriptor, PropertyAnalyzer, analyze_properties, promote_type
from .datasource import Feature, parse_features, read_geojson
from .geometry import Bound
from .schema import build_schema, coerce_value, feature_to_row
from .metadata import GeoMetadata, GeometrySummary, build_geo_metadata, read_geo_metadata
from .writer import GeoParquetWriter
from .converter import GeoParquetConverter, ConversionResult, generate
from .verify import verify_geoparquet

__all__ = [
    "__version__",
    "ConversionError", "InputError", "GeometryEncodingError", "WriteError",
    "SemanticType", "infer_type",
    "ColumnDescriptor", "PropertyAnalyzer", "analyze_properties", "promote_type",
    "Feature", "parse_features", "read_geojson",
    "Bound",
    "build_schema", "coerce_value", "feature_to_row",
    "GeoMetadata", "GeometrySummary", "build_geo_metadata", "read_geo_metadata",
    "GeoParquetWriter",
    "GeoParquetConverter", "ConversionResult", "generate",
    "verify_geoparquet",
]
