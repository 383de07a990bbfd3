"""Tests for configuration manager functionality."""

import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from langfill.config.manager import ConfigManager
from langfill.config.schema import LangfillConfig
from tests.utils.test_helpers import create_temp_config_file


class TestConfigManager:
    """Test cases for ConfigManager functionality."""

    def test_load_config_success(self, base_config: LangfillConfig) -> None:
        """Test successful configuration loading."""
        config_data: dict[str, object] = {
            "translation": {
                "project_id": base_config.translation.project_id,
                "access_token": base_config.translation.access_token,
            },
            "encoding": {
                "mode": "explicit",
                "code": "iso-8859-2",
            },
        }

        with create_temp_config_file(config_data) as temp_config_file:
            config = ConfigManager.load_config(temp_config_file)

            assert isinstance(config, LangfillConfig)
            assert config.translation.project_id == base_config.translation.project_id
            assert config.translation.access_token == base_config.translation.access_token
            assert config.encoding.mode == "explicit"
            assert config.encoding.code == "iso-8859-2"

    def test_load_config_file_not_found(self) -> None:
        """Test loading config when file doesn't exist."""
        non_existent_path = Path("/non/existent/langfill.yml")

        with pytest.raises(FileNotFoundError):
            _ = ConfigManager.load_config(non_existent_path)

    def test_load_config_invalid_yaml(self) -> None:
        """Test loading config with invalid YAML syntax."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
            _ = f.write("invalid: yaml: content: [")
            invalid_yaml_path = Path(f.name)

        try:
            with pytest.raises(yaml.YAMLError):
                _ = ConfigManager.load_config(invalid_yaml_path)
        finally:
            invalid_yaml_path.unlink(missing_ok=True)

    def test_load_config_not_a_mapping(self, tmp_path: Path) -> None:
        """Test loading a YAML file that holds a list."""
        config_path = tmp_path / "langfill.yml"
        _ = config_path.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ValueError, match="YAML dictionary"):
            _ = ConfigManager.load_config(config_path)

    def test_load_config_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file gives the defaults."""
        config_path = tmp_path / "langfill.yml"
        _ = config_path.write_text("", encoding="utf-8")

        assert ConfigManager.load_config(config_path) == LangfillConfig()

    def test_load_config_validation_error(self) -> None:
        """Test loading config with validation errors."""
        invalid_config_data: dict[str, object] = {
            "encoding": {"mode": "explicit"},
        }

        with create_temp_config_file(invalid_config_data) as temp_config_file:
            with pytest.raises(ValidationError):
                _ = ConfigManager.load_config(temp_config_file)

    def test_load_or_default(self, tmp_path: Path) -> None:
        """Test falling back to defaults without a file."""
        assert ConfigManager.load_or_default(None) == LangfillConfig()
        assert ConfigManager.load_or_default(tmp_path / "missing.yml") == LangfillConfig()

    def test_get_default_config(self) -> None:
        """Test getting default configuration."""
        config = ConfigManager.get_default_config()

        assert isinstance(config, LangfillConfig)
        assert config.encoding.mode == "legacy-map"

    def test_config_manager_is_read_only(self) -> None:
        """Test that ConfigManager only reads configuration files."""
        assert not hasattr(ConfigManager, "save_config")
        assert not hasattr(ConfigManager, "validate_config")
