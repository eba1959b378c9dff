"""
Environment configuration for the converter.

Values come from the process environment, after loading a `.env` file from
the working directory if one exists. Command-line flags override them.

    GEOJSON_GEOPARQUET_OUTPUT_PATH   default output file for `generate`
    GEOJSON_GEOPARQUET_COMPRESSION   Parquet codec (default: zstd)
    GEOJSON_GEOPARQUET_LARGE_TYPES   1/true to use large_string/large_binary
    GEOJSON_GEOPARQUET_LOG_LEVEL     logging level (default: INFO)
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os

from dotenv import load_dotenv

ENV_PREFIX = "GEOJSON_GEOPARQUET_"
DEFAULT_COMPRESSION = "zstd"
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    output_path: Optional[str] = None
    compression: str = DEFAULT_COMPRESSION
    large_types: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


def load_environment(env_file: Optional[Path] = None) -> bool:
    """Load a .env file (default: ./.env). Returns True if one was loaded."""
    path = env_file or Path.cwd() / ".env"
    if path.exists():
        return load_dotenv(path, override=False)
    return False


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        load_environment()
        environ = os.environ

    def get(name: str) -> Optional[str]:
        val = environ.get(ENV_PREFIX + name)
        return val.strip() if val and val.strip() else None

    large = get("LARGE_TYPES")
    return Settings(
        output_path=get("OUTPUT_PATH"),
        compression=(get("COMPRESSION") or DEFAULT_COMPRESSION).lower(),
        large_types=large is not None and large.lower() in _TRUTHY,
        log_level=(get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
