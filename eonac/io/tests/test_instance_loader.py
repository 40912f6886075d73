"""Unit tests for eonac.io.instance_loader module."""

import json
from pathlib import Path

import pytest
import yaml

from eonac.configs.errors import ConfigFileNotFoundError, ConfigParseError
from eonac.domain.errors import ConfigurationError
from eonac.io.instance_loader import (
    load_catalog,
    load_instance_data,
    load_reference_catalog,
    save_catalog,
)

INSTANCE = {
    "slot_ceiling": 12,
    "topology": {"nodes": ["A", "B"], "links": [["A", "B"]]},
    "request_types": {"m1": 2},
    "zones": [{"id": "z1", "accepted_type": "m1", "capacity": 6}],
    "requests": [{"id": "r1", "type": "m1", "paths": [["A", "B"]], "starts": [1, 3]}],
}


class TestLoadCatalog:
    """Tests for loading instance files."""

    @pytest.mark.parametrize("suffix", [".yaml", ".yml", ".json"])
    def test_supported_formats_load(self, tmp_path: Path, suffix: str) -> None:
        """Test YAML and JSON files produce the same catalog."""
        # Arrange
        instance_fp = tmp_path / f"instance{suffix}"
        if suffix == ".json":
            instance_fp.write_text(json.dumps(INSTANCE), encoding="utf-8")
        else:
            instance_fp.write_text(yaml.safe_dump(INSTANCE), encoding="utf-8")

        # Act
        catalog = load_catalog(instance_fp)

        # Assert
        assert len(catalog) == 1
        assert catalog.slot_ceiling == 12
        assert catalog.get_request("r1").candidate_starts == (1, 3)

    def test_missing_file_raises_not_found(self, tmp_path: Path) -> None:
        """Test a missing instance file is reported."""
        with pytest.raises(ConfigFileNotFoundError, match="not found"):
            load_catalog(tmp_path / "absent.yaml")

    def test_unsupported_suffix_raises_parse_error(self, tmp_path: Path) -> None:
        """Test unknown file types are rejected."""
        instance_fp = tmp_path / "instance.txt"
        instance_fp.write_text("slot_ceiling: 1", encoding="utf-8")

        with pytest.raises(ConfigParseError, match="Unsupported"):
            load_instance_data(instance_fp)

    def test_malformed_yaml_raises_parse_error(self, tmp_path: Path) -> None:
        """Test syntax errors surface as ConfigParseError."""
        instance_fp = tmp_path / "instance.yaml"
        instance_fp.write_text("zones: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigParseError, match="Failed to parse"):
            load_instance_data(instance_fp)

    def test_non_mapping_raises_parse_error(self, tmp_path: Path) -> None:
        """Test the top level must be a mapping."""
        instance_fp = tmp_path / "instance.json"
        instance_fp.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ConfigParseError, match="mapping"):
            load_instance_data(instance_fp)

    def test_parse_errors_are_configuration_errors(self, tmp_path: Path) -> None:
        """Test loader errors share the domain error base."""
        with pytest.raises(ConfigurationError):
            load_catalog(tmp_path / "absent.json")

    def test_policy_override_is_applied(self, tmp_path: Path) -> None:
        """Test the unknown-link policy can be overridden at load time."""
        data = json.loads(json.dumps(INSTANCE))
        data["requests"][0]["paths"].append(["B", "A"])
        instance_fp = tmp_path / "instance.json"
        instance_fp.write_text(json.dumps(data), encoding="utf-8")

        assert load_catalog(instance_fp).unknown_link_policy == "reject"
        with pytest.raises(ConfigurationError, match="absent from the topology"):
            load_catalog(instance_fp, unknown_link_policy="error")

    def test_save_then_load_preserves_catalog(self, tmp_path: Path) -> None:
        """Test save_catalog writes a loadable file."""
        instance_fp = tmp_path / "nested" / "instance.yaml"
        instance_fp.parent.mkdir()
        (tmp_path / "source.json").write_text(json.dumps(INSTANCE), encoding="utf-8")
        catalog = load_catalog(tmp_path / "source.json")

        save_catalog(catalog, instance_fp)

        assert load_catalog(instance_fp).to_dict() == catalog.to_dict()


class TestReferenceCatalogs:
    """Tests for the bundled reference instances."""

    @pytest.mark.parametrize(
        "name,ceiling,z1_capacity",
        [("b140", 140, 10), ("b360", 360, 20)],
    )
    def test_reference_instances_load(
        self, name: str, ceiling: int, z1_capacity: int
    ) -> None:
        """Test both reference instances are bundled and valid."""
        catalog = load_reference_catalog(name)

        assert catalog.slot_ceiling == ceiling
        assert [r.request_id for r in catalog] == ["r1", "r2", "r3", "r4", "r5"]
        assert {t.name: t.slot_demand for t in catalog.request_types} == {
            "m1": 2,
            "m2": 3,
            "m3": 4,
            "m4": 5,
        }
        assert catalog.get_zone("z1").capacity == z1_capacity
        assert catalog.dropped_starts == {}

    def test_unknown_reference_raises_key_error(self) -> None:
        """Test unknown reference names list the available ones."""
        with pytest.raises(KeyError, match="b140"):
            load_reference_catalog("b999")
