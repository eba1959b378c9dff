from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .converter import generate, resolve_output_path
from .datasource import is_geojson_path
from .errors import ConversionError
from .verify import verify_geoparquet
from .version import __version__

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _cmd_generate(args, settings) -> int:
    src = Path(args.input)
    if not src.is_file():
        print(f"Error: GeoJSON file '{src}' does not exist.")
        return 1
    if not is_geojson_path(src):
        print(f"Error: File '{src}' does not appear to be a GeoJSON file.")
        return 1

    out = resolve_output_path(src, args.output, settings)
    if args.large_types:
        settings.large_types = True

    print(f"Generating GeoParquet file for '{src}'...")
    try:
        result = generate(src, out, compression=args.compression, settings=settings)
    except ConversionError as e:
        print(f"Error generating GeoParquet: {e}")
        return 1

    print(f"✓ GeoParquet file generated successfully and saved to: {result.output_path}")
    print(f"  features={result.feature_count} property_columns={len(result.descriptors)} "
          f"geometry_type={result.metadata.geometry_type_label}")
    return 0


def _cmd_verify(args, settings) -> int:
    path = Path(args.path)
    if not path.is_file():
        print(f"Error: Parquet file '{path}' does not exist.")
        return 1
    try:
        report = verify_geoparquet(path)
    except (OSError, ValueError) as e:
        print(f"Error: cannot read '{path}': {e}")
        return 1

    if report.geo is not None:
        print(json.dumps(report.geo.to_dict(), indent=2))
    for problem in report.problems:
        print(f"✗ {problem}")
    if report.ok:
        print(f"✓ {path} is consistent (rows={report.num_rows})")
        return 0
    return 1


def _cmd_version(args, settings) -> int:
    print(f"geojson-geoparquet version {__version__}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="geojson-geoparquet",
        description="GeoJSON → GeoParquet with automatic property type inference.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate GeoParquet from a GeoJSON file.")
    gen.add_argument("input", help="Path to input GeoJSON.")
    gen.add_argument("-o", "--output", default=None,
                     help="Output path (default: $GEOJSON_GEOPARQUET_OUTPUT_PATH or <input stem>.parquet).")
    gen.add_argument("--compression", default=None, help="Parquet compression codec (default: zstd).")
    gen.add_argument("--large-types", action="store_true",
                     help="Use large_string/large_binary columns (64-bit offsets).")
    gen.set_defaults(func=_cmd_generate)

    ver = sub.add_parser("verify", help="Check a GeoParquet file's 'geo' metadata against its geometries.")
    ver.add_argument("path", help="Path to a GeoParquet file.")
    ver.set_defaults(func=_cmd_verify)

    version = sub.add_parser("version", help="Print the version information.")
    version.set_defaults(func=_cmd_version)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    _configure_logging("DEBUG" if args.verbose else settings.log_level)
    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
