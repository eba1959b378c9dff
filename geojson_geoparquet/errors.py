from __future__ import annotations
from typing import Optional


class Stage:
    INPUT = "input"
    GEOMETRY = "geometry"
    WRITE = "write"


class ConversionError(Exception):
    """
    User-facing error for a failed conversion.

    Carries a short message, the underlying cause (if any) and the pipeline
    stage that failed, so callers can branch on `stage` without depending on
    pyarrow/shapely/json exception types.
    """

    stage: str = Stage.INPUT

    def __init__(self, message: str, cause: Optional[BaseException] = None, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class InputError(ConversionError):
    """Unreadable/unparseable source, an empty collection or a bad output path."""
    stage = Stage.INPUT


class GeometryEncodingError(ConversionError):
    """A feature geometry could not be encoded to WKB."""
    stage = Stage.GEOMETRY

    def __init__(self, message: str, cause: Optional[BaseException] = None, feature_index: Optional[int] = None):
        super().__init__(message, cause)
        self.feature_index = feature_index


class WriteError(ConversionError):
    """The Parquet writer failed (I/O, permissions, Arrow encoding)."""
    stage = Stage.WRITE
