"""Unit tests for FileSystemAdapter."""

import json
from pathlib import Path

import pytest
import yaml

from src.adapters.filesystem_adapter import ConfigurationError, FileSystemAdapter
from src.core.domain.day_count import DayCount
from src.core.domain.scenario_array import ScenarioSensitivityArray
from src.core.domain.surface_metadata import DefaultSurfaceMetadata
from src.core.domain.value_type import BLACK_VOLATILITY, STRIKE, YEAR_FRACTION
from tests.stubs.stub_sensitivity_adapter import (
    SURFACE_NAME,
    SURFACE_NODES,
    StubSensitivityAdapter,
)


class TestFileSystemAdapterYAML:
    """Test YAML loading and saving."""

    def test_load_yaml_valid(self, tmp_path: Path) -> None:
        """Valid YAML should load successfully."""
        yaml_content = """
        name: test
        values:
          - 1
          - 2
        nested:
          key: value
        """
        (tmp_path / "config.yaml").write_text(yaml_content)

        adapter = FileSystemAdapter(tmp_path)
        result = adapter.load_yaml("config.yaml")

        assert result["name"] == "test"
        assert result["values"] == [1, 2]
        assert result["nested"]["key"] == "value"

    def test_load_yaml_file_not_found(self, tmp_path: Path) -> None:
        """Missing file should raise FileNotFoundError."""
        adapter = FileSystemAdapter(tmp_path)

        with pytest.raises(FileNotFoundError, match="File not found"):
            adapter.load_yaml("nonexistent.yaml")

    def test_load_yaml_invalid(self, tmp_path: Path) -> None:
        """Invalid YAML should raise ConfigurationError."""
        (tmp_path / "invalid.yaml").write_text("{ invalid: yaml: content")

        adapter = FileSystemAdapter(tmp_path)

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            adapter.load_yaml("invalid.yaml")

    def test_load_yaml_non_dict_root(self, tmp_path: Path) -> None:
        """Non-dict root element should raise ConfigurationError."""
        (tmp_path / "list.yaml").write_text("- item1\n- item2")

        adapter = FileSystemAdapter(tmp_path)

        with pytest.raises(ConfigurationError, match="dictionary"):
            adapter.load_yaml("list.yaml")

    def test_load_yaml_empty_file(self, tmp_path: Path) -> None:
        """Empty YAML file should return empty dict."""
        (tmp_path / "empty.yaml").write_text("")

        assert FileSystemAdapter(tmp_path).load_yaml("empty.yaml") == {}

    def test_save_yaml_creates_dirs(self, tmp_path: Path) -> None:
        """save_yaml should create parent directories and keep key order."""
        adapter = FileSystemAdapter(tmp_path)
        data = {"b": 1, "a": [1, 2]}

        adapter.save_yaml("subdir/nested/config.yaml", data)

        text = (tmp_path / "subdir/nested/config.yaml").read_text()
        assert yaml.safe_load(text) == data
        assert text.index("b:") < text.index("a:")

    def test_save_yaml_rejects_non_dict(self, tmp_path: Path) -> None:
        """Only dictionaries can be saved."""
        with pytest.raises(ConfigurationError, match="dictionary"):
            FileSystemAdapter(tmp_path).save_yaml("x.yaml", [1, 2])  # type: ignore[arg-type]


class TestFileSystemAdapterJSON:
    """Test JSON loading and saving."""

    def test_load_json_valid(self, tmp_path: Path) -> None:
        """Valid JSON should load successfully."""
        (tmp_path / "config.json").write_text('{"name": "test", "count": 42}')

        result = FileSystemAdapter(tmp_path).load_json("config.json")

        assert result == {"name": "test", "count": 42}

    def test_load_json_invalid(self, tmp_path: Path) -> None:
        """Invalid JSON should raise ConfigurationError."""
        (tmp_path / "invalid.json").write_text("{invalid json}")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            FileSystemAdapter(tmp_path).load_json("invalid.json")

    def test_save_json(self, tmp_path: Path) -> None:
        """Data should be saved as valid JSON."""
        adapter = FileSystemAdapter(tmp_path)
        data = {"key": "value", "number": 123}

        adapter.save_json("output.json", data)

        with open(tmp_path / "output.json") as f:
            assert json.load(f) == data

    @pytest.mark.parametrize("filename", ["data.yaml", "data.yml", "data.json"])
    def test_load_and_save_by_suffix(self, tmp_path: Path, filename: str) -> None:
        """save()/load() should pick the format from the suffix."""
        adapter = FileSystemAdapter(tmp_path)

        adapter.save(filename, {"x": 1.5})

        assert adapter.load(filename) == {"x": 1.5}
        if filename.endswith(".json"):
            assert json.loads((tmp_path / filename).read_text()) == {"x": 1.5}


class TestFileSystemAdapterDomain:
    """Test saving and loading domain objects."""

    @pytest.fixture
    def surface_metadata(self) -> DefaultSurfaceMetadata:
        return DefaultSurfaceMetadata(
            surface_name=SURFACE_NAME,
            x_value_type=YEAR_FRACTION,
            y_value_type=STRIKE,
            z_value_type=BLACK_VOLATILITY,
            day_count=DayCount.ACT_365F,
            parameter_metadata=SURFACE_NODES,
        )

    @pytest.mark.parametrize("filename", ["surface.yaml", "surface.json"])
    def test_surface_metadata_round_trip(
        self, tmp_path: Path, surface_metadata: DefaultSurfaceMetadata, filename: str
    ) -> None:
        """Surface metadata should survive YAML and JSON storage."""
        adapter = FileSystemAdapter(tmp_path)

        adapter.save_surface_metadata(filename, surface_metadata)

        assert adapter.load_surface_metadata(filename) == surface_metadata

    def test_sensitivities_array_round_trip(self, tmp_path: Path) -> None:
        """A scenario array should survive YAML storage in scenario order."""
        adapter = FileSystemAdapter(tmp_path)
        array = ScenarioSensitivityArray.of_size(
            3, StubSensitivityAdapter().calculate_sensitivities
        )

        adapter.save_sensitivities_array("results/array.yaml", array)
        loaded = adapter.load_sensitivities_array("results/array.yaml")

        assert loaded == array

    def test_invalid_surface_metadata(self, tmp_path: Path) -> None:
        """Schema errors should become ConfigurationError."""
        (tmp_path / "bad.yaml").write_text("x_value_type: Strike\n")

        with pytest.raises(ConfigurationError, match="Invalid surface metadata"):
            FileSystemAdapter(tmp_path).load_surface_metadata("bad.yaml")

    def test_invalid_day_count(self, tmp_path: Path) -> None:
        """Unknown day counts should become ConfigurationError."""
        (tmp_path / "bad.yaml").write_text(
            "surface_name: EUR-Vol\nx_value_type: YearFraction\nday_count: Act/999\n"
        )

        with pytest.raises(ConfigurationError, match="Unknown day count"):
            FileSystemAdapter(tmp_path).load_surface_metadata("bad.yaml")

    def test_invalid_sensitivities_array(self, tmp_path: Path) -> None:
        """A missing key should become ConfigurationError."""
        (tmp_path / "bad.json").write_text('{"sensitivities": [{"sensitivities": [{}]}]}')

        with pytest.raises(ConfigurationError, match="Invalid sensitivity array"):
            FileSystemAdapter(tmp_path).load_sensitivities_array("bad.json")


class TestFileSystemAdapterUtilities:
    """Test utility methods."""

    def test_exists(self, tmp_path: Path) -> None:
        """exists should check file presence."""
        (tmp_path / "existing.txt").write_text("content")

        adapter = FileSystemAdapter(tmp_path)

        assert adapter.exists("existing.txt") is True
        assert adapter.exists("nonexistent.txt") is False

    def test_compute_and_validate_hash(self, tmp_path: Path) -> None:
        """compute_hash should return the SHA-256 digest."""
        (tmp_path / "test.txt").write_text("hello world")
        adapter = FileSystemAdapter(tmp_path)
        expected = "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"

        assert adapter.compute_hash("test.txt") == expected
        assert adapter.validate_hash("test.txt", expected.upper()) is True
        assert adapter.validate_hash("test.txt", "0" * 64) is False

    def test_absolute_path(self, tmp_path: Path) -> None:
        """Absolute paths should work correctly."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("key: value")

        result = FileSystemAdapter().load_yaml(str(yaml_file))

        assert result["key"] == "value"
