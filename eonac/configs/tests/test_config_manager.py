"""Unit tests for eonac.configs.config module."""

import json
from pathlib import Path

import pytest
import yaml

from eonac.configs.config import SOLVER_SECTION, ConfigManager
from eonac.configs.errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigTypeConversionError,
    InvalidConfigValueError,
)
from eonac.domain.config import SolverConfig


@pytest.fixture
def ini_config(tmp_path: Path) -> Path:
    """Provide an INI file with solver settings."""
    config_fp = tmp_path / "solver.ini"
    config_fp.write_text(
        "[solver_settings]\n"
        "strategy = greedy\n"
        "priority = catalog\n"
        "time_limit_s = None\n"
        "max_steps = 500\n"
        "seed_with_greedy = false\n"
        "workers = 3\n",
        encoding="utf-8",
    )
    return config_fp


class TestConfigManagerLoad:
    """Tests for loading solver settings from files."""

    def test_ini_values_are_converted(self, ini_config: Path) -> None:
        """Test INI strings become typed solver settings."""
        manager = ConfigManager(str(ini_config))

        config = manager.get_config()

        assert config == SolverConfig(
            strategy="greedy",
            priority="catalog",
            max_steps=500,
            seed_with_greedy=False,
            workers=3,
        )

    def test_json_and_yaml_are_supported(self, tmp_path: Path) -> None:
        """Test JSON and YAML files use the same section."""
        settings = {SOLVER_SECTION: {"strategy": "exact", "time_limit_s": 1.5}}
        json_fp = tmp_path / "solver.json"
        yaml_fp = tmp_path / "solver.yaml"
        json_fp.write_text(json.dumps(settings), encoding="utf-8")
        yaml_fp.write_text(yaml.safe_dump(settings), encoding="utf-8")

        from_json = ConfigManager().load_config(str(json_fp))
        from_yaml = ConfigManager().load_config(str(yaml_fp))

        assert from_json == from_yaml
        assert from_json.time_limit_s == 1.5

    def test_missing_section_gives_defaults(self, tmp_path: Path) -> None:
        """Test a file without solver settings yields defaults."""
        config_fp = tmp_path / "other.yaml"
        config_fp.write_text("other_settings: {x: 1}\n", encoding="utf-8")

        assert ConfigManager().load_config(str(config_fp)) == SolverConfig()

    def test_missing_file_raises_not_found(self, tmp_path: Path) -> None:
        """Test loading an absent file is reported."""
        with pytest.raises(ConfigFileNotFoundError):
            ConfigManager().load_config(str(tmp_path / "absent.ini"))

    def test_constructor_ignores_absent_path(self, tmp_path: Path) -> None:
        """Test an absent path at construction leaves the manager empty."""
        manager = ConfigManager(str(tmp_path / "absent.ini"))

        assert manager.get_config() is None

    def test_unsupported_format_raises_parse_error(self, tmp_path: Path) -> None:
        """Test unknown file types are rejected."""
        config_fp = tmp_path / "solver.toml"
        config_fp.write_text("x = 1", encoding="utf-8")

        with pytest.raises(ConfigParseError, match="Unsupported"):
            ConfigManager().load_config(str(config_fp))

    def test_malformed_json_raises_parse_error(self, tmp_path: Path) -> None:
        """Test syntax errors are wrapped."""
        config_fp = tmp_path / "solver.json"
        config_fp.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigParseError, match="Failed to parse"):
            ConfigManager().load_config(str(config_fp))

    def test_bad_values_raise_conversion_errors(self, tmp_path: Path) -> None:
        """Test conversion and range errors propagate."""
        config_fp = tmp_path / "solver.yaml"
        config_fp.write_text("solver_settings: {workers: lots}\n", encoding="utf-8")
        with pytest.raises(ConfigTypeConversionError):
            ConfigManager().load_config(str(config_fp))

        config_fp.write_text("solver_settings: {workers: 0}\n", encoding="utf-8")
        with pytest.raises(InvalidConfigValueError):
            ConfigManager().load_config(str(config_fp))


class TestConfigManagerOverridesAndSave:
    """Tests for overrides, updates and saving."""

    def test_get_solver_config_applies_overrides(self, ini_config: Path) -> None:
        """Test non-None overrides win over file values."""
        manager = ConfigManager(str(ini_config))

        config = manager.get_solver_config(workers=None, strategy="exact")

        assert config.strategy == "exact"
        assert config.workers == 3

    def test_get_solver_config_without_file_uses_defaults(self) -> None:
        """Test defaults are used when nothing was loaded."""
        assert ConfigManager().get_solver_config(max_steps=10).max_steps == 10

    def test_update_config_revalidates(self, ini_config: Path) -> None:
        """Test updates rebuild the solver config."""
        manager = ConfigManager(str(ini_config))

        manager.update_config("workers", "8")

        assert manager.get_config().workers == 8

    @pytest.mark.parametrize("format_type,suffix", [("ini", ".ini"), ("json", ".json"), ("yaml", ".yaml")])
    def test_save_round_trips(
        self, ini_config: Path, tmp_path: Path, format_type: str, suffix: str
    ) -> None:
        """Test saved files load back to the same config."""
        manager = ConfigManager(str(ini_config))
        output_fp = tmp_path / f"saved{suffix}"

        manager.save_config(str(output_fp), format_type)

        assert ConfigManager(str(output_fp)).get_config() == manager.get_config()

    def test_save_without_config_raises(self, tmp_path: Path) -> None:
        """Test there is nothing to save before loading."""
        with pytest.raises(ConfigError, match="No configuration"):
            ConfigManager().save_config(str(tmp_path / "out.ini"))
