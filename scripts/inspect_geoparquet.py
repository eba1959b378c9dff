#!/usr/bin/env python3
"""
Print the schema, GeoParquet metadata and first rows of a GeoParquet file.

Usage:
  python inspect_geoparquet.py path/to/file.parquet [--rows N]
"""
import argparse
import json
import sys

import pyarrow.parquet as pq
from shapely import from_wkb

from geojson_geoparquet.metadata import read_geo_metadata


def main():
    ap = argparse.ArgumentParser(description="Inspect a GeoParquet file.")
    ap.add_argument("path", help="GeoParquet file.")
    ap.add_argument("--rows", type=int, default=5, help="Number of rows to print (default: 5).")
    args = ap.parse_args()

    pf = pq.ParquetFile(args.path)
    print("=== Schema ===")
    print(pf.schema_arrow)
    print(f"rows={pf.metadata.num_rows} row_groups={pf.num_row_groups}")

    geo = read_geo_metadata(args.path)
    print("\n=== GeoParquet Metadata ===")
    if geo is None:
        print("No GeoParquet metadata found.")
        sys.exit(1)
    print(json.dumps(geo.to_dict(), indent=2))
    print(f"geometry type: {geo.geometry_type_label}")

    if geo.properties:
        print("\n=== Property columns ===")
        for d in geo.properties:
            print(f"  {d.name}: {d.type.type_name}{' (nullable)' if d.nullable else ''}")

    if args.rows > 0 and pf.metadata.num_rows:
        print(f"\n=== First {args.rows} rows ===")
        head = pf.read_row_group(0).slice(0, args.rows)
        geoms = from_wkb(head[geo.primary_column].to_numpy(zero_copy_only=False))
        props = head.drop([geo.primary_column]).to_pylist()
        for g, row in zip(geoms, props):
            wkt = g.wkt if g is not None else None
            print(f"  {wkt} {row}")


if __name__ == "__main__":
    main()
