from __future__ import annotations
from pathlib import Path
from typing import Any, Iterable, Sequence, Union
import logging
import os

import pyarrow as pa
import pyarrow.parquet as pq

from .errors import WriteError
from .metadata import GeoMetadata
from .schema import rows_to_table

logger = logging.getLogger(__name__)


class GeoParquetWriter:
    """
    Single-file GeoParquet writer:
      - write(schema, rows, geo): build an Arrow table from typed rows and persist it
      - write_table(table, geo): persist an already-typed Arrow table
    The file is written to a temporary sibling and renamed into place, so a
    failed write never leaves a partial output behind.
    """

    def __init__(self, path: Union[str, Path], compression: str = "zstd"):
        self.path = Path(path)
        self.compression = compression

    # --------------------------- Public API ---------------------------

    def write(self, schema: pa.Schema, rows: Iterable[Sequence[Any]], geo: GeoMetadata) -> Path:
        try:
            table = rows_to_table(list(rows), schema)
        except (pa.ArrowException, ValueError, TypeError) as e:
            raise WriteError("failed to build Arrow table from rows", e) from e
        return self.write_table(table, geo)

    def write_table(self, table: pa.Table, geo: GeoMetadata) -> Path:
        table = self._with_geo_metadata(table, geo)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")

        logger.info("Writing %d rows to %s (compression=%s)", table.num_rows, self.path, self.compression)
        try:
            pq.write_table(table, str(tmp_path), compression=self.compression)
            os.replace(tmp_path, self.path)
        except (OSError, pa.ArrowException, ValueError) as e:
            self._discard(tmp_path)
            raise WriteError("failed to write GeoParquet file", e) from e

        logger.debug("Write complete: %s rows=%d columns=%d", self.path, table.num_rows, table.num_columns)
        return self.path

    # ------------------------- Internal helpers -----------------------

    @staticmethod
    def _with_geo_metadata(table: pa.Table, geo: GeoMetadata) -> pa.Table:
        meta = dict(table.schema.metadata or {})
        meta.update(geo.schema_metadata())
        return table.replace_schema_metadata(meta)

    @staticmethod
    def _discard(tmp_path: Path) -> None:
        if tmp_path.exists():
            logger.warning("Removing partial output %s", tmp_path)
            try:
                tmp_path.unlink()
            except OSError as e:
                logger.warning("Could not remove %s: %s", tmp_path, e)
