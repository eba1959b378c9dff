"""Tests for the command-line interface and environment settings."""

import pyarrow.parquet as pq
import pytest

from geojson_geoparquet import __version__
from geojson_geoparquet.cli import main
from geojson_geoparquet.config import Settings, load_settings
from geojson_geoparquet.metadata import PROPERTIES_METADATA_KEY


class TestGenerateCommand:
    """`generate` subcommand."""

    def test_success(self, write_geojson, sample_collection, tmp_path, capsys, clean_env):
        src = write_geojson(sample_collection)
        out = tmp_path / "result.parquet"
        assert main(["generate", str(src), "-o", str(out)]) == 0
        assert pq.read_table(out).num_rows == 4
        assert "generated successfully" in capsys.readouterr().out

    def test_missing_input(self, tmp_path, capsys, clean_env):
        assert main(["generate", str(tmp_path / "nope.geojson")]) == 1
        assert "does not exist" in capsys.readouterr().out

    def test_wrong_extension(self, tmp_path, capsys, clean_env):
        src = tmp_path / "data.csv"
        src.write_text("a,b\n1,2\n")
        assert main(["generate", str(src)]) == 1
        assert "does not appear to be a GeoJSON file" in capsys.readouterr().out

    def test_zero_features(self, write_geojson, capsys, clean_env):
        src = write_geojson({"type": "FeatureCollection", "features": []})
        assert main(["generate", str(src)]) == 1
        assert "no features" in capsys.readouterr().out

    def test_output_from_environment(self, write_geojson, sample_collection, tmp_path, clean_env):
        src = write_geojson(sample_collection)
        target = tmp_path / "env.parquet"
        clean_env.setenv("GEOJSON_GEOPARQUET_OUTPUT_PATH", str(target))
        assert main(["generate", str(src)]) == 0
        assert target.exists()

    def test_large_types_flag(self, write_geojson, sample_collection, tmp_path, clean_env):
        src = write_geojson(sample_collection)
        out = tmp_path / "large.parquet"
        assert main(["generate", str(src), "-o", str(out), "--large-types"]) == 0
        assert str(pq.read_schema(out).field("name").type) == "large_string"


class TestVerifyCommand:
    """`verify` subcommand."""

    def test_verify_generated_file(self, write_geojson, sample_collection, tmp_path, capsys, clean_env):
        src = write_geojson(sample_collection)
        out = tmp_path / "result.parquet"
        main(["generate", str(src), "-o", str(out)])
        capsys.readouterr()
        assert main(["verify", str(out)]) == 0
        assert '"primary_column": "geometry"' in capsys.readouterr().out

    def test_verify_missing_file(self, tmp_path, clean_env):
        assert main(["verify", str(tmp_path / "none.parquet")]) == 1

    def test_verify_malformed_metadata(self, write_geojson, sample_collection, tmp_path, capsys, clean_env):
        src = write_geojson(sample_collection)
        out = tmp_path / "result.parquet"
        main(["generate", str(src), "-o", str(out)])
        table = pq.read_table(out)
        meta = dict(table.schema.metadata)
        meta[PROPERTIES_METADATA_KEY] = b'[{"type": "int64"}]'
        pq.write_table(table.replace_schema_metadata(meta), out)
        capsys.readouterr()
        assert main(["verify", str(out)]) == 1
        assert "malformed" in capsys.readouterr().out


class TestVersionCommand:
    def test_prints_version(self, capsys, clean_env):
        assert main(["version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_command_required(self, clean_env):
        with pytest.raises(SystemExit):
            main([])


class TestLoadSettings:
    """Environment variables to Settings."""

    def test_defaults(self):
        assert load_settings({}) == Settings()

    def test_values(self):
        settings = load_settings({
            "GEOJSON_GEOPARQUET_OUTPUT_PATH": "/tmp/x.parquet",
            "GEOJSON_GEOPARQUET_COMPRESSION": "SNAPPY",
            "GEOJSON_GEOPARQUET_LARGE_TYPES": "true",
            "GEOJSON_GEOPARQUET_LOG_LEVEL": "debug",
        })
        assert settings == Settings(
            output_path="/tmp/x.parquet", compression="snappy", large_types=True, log_level="DEBUG",
        )

    def test_blank_values_ignored(self):
        assert load_settings({"GEOJSON_GEOPARQUET_COMPRESSION": "  "}).compression == "zstd"

    def test_dotenv_file(self, tmp_path, clean_env):
        (tmp_path / ".env").write_text("GEOJSON_GEOPARQUET_COMPRESSION=gzip\n")
        clean_env.chdir(tmp_path)
        assert load_settings().compression == "gzip"
