"""
Shared test fixtures.

Builds small GeoJSON feature collections (as decoded dicts, as Feature
objects and as files on disk) for exercising every pipeline stage.
"""

import json

import pytest
from shapely.geometry import LineString, Point, box

from geojson_geoparquet.datasource import Feature, parse_features


def _feature(geometry, properties):
    return {"type": "Feature", "geometry": geometry, "properties": properties}


@pytest.fixture
def sample_collection():
    """Mixed geometries with heterogeneous, partially-missing properties."""
    return {
        "type": "FeatureCollection",
        "features": [
            _feature({"type": "Point", "coordinates": [1.0, 2.0]},
                     {"name": "A", "count": 3, "ratio": 0.5, "active": True, "tags": ["x", "y"]}),
            _feature({"type": "Point", "coordinates": [3.0, 4.0]},
                     {"name": "B", "count": 7, "ratio": 2, "active": False, "note": None}),
            _feature({"type": "Polygon",
                      "coordinates": [[[-1.0, -1.0], [0.0, -1.0], [0.0, 0.0], [-1.0, 0.0], [-1.0, -1.0]]]},
                     {"name": "C", "meta": {"b": 1, "a": "z"}}),
            _feature(None, {"name": "D", "count": None}),
        ],
    }


@pytest.fixture
def sample_features(sample_collection):
    return parse_features(sample_collection)


@pytest.fixture
def point_features():
    return [
        Feature(geometry=Point(1, 2), properties={"name": "A", "count": 3}),
        Feature(geometry=Point(3, 4), properties={"name": "B", "count": "oops"}),
    ]


@pytest.fixture
def shaped_features():
    return [
        Feature(geometry=Point(5, 5), properties={}),
        Feature(geometry=box(0, 0, 2, 1), properties={}),
        Feature(geometry=LineString([(-3, 1), (1, 9)]), properties={}),
        Feature(geometry=box(10, -4, 11, -2), properties={}),
    ]


@pytest.fixture
def write_geojson(tmp_path):
    """Factory: write a GeoJSON document to tmp_path and return its path."""

    def _write(doc, name="input.geojson"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove converter settings from the environment for the test. Setting
    before deleting makes monkeypatch restore the original state afterwards,
    even for variables a .env file adds during the test.
    """
    for suffix in ("OUTPUT_PATH", "COMPRESSION", "LARGE_TYPES", "LOG_LEVEL"):
        name = f"GEOJSON_GEOPARQUET_{suffix}"
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
