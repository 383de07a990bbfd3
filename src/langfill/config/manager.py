"""Configuration manager for langfill.

This module loads YAML configuration files and validates them with the
Pydantic models of the schema module.
"""

import logging
from pathlib import Path

import yaml

from .schema import LangfillConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for loading YAML config files with Pydantic validation.
    """

    @staticmethod
    def load_config(config_path: Path) -> LangfillConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            LangfillConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not hold a YAML mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        config = LangfillConfig.model_validate(config_data)
        logger.debug(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def load_or_default(config_path: Path | None) -> LangfillConfig:
        """
        Load the configuration file when it exists, defaults otherwise.

        Args:
            config_path: Optional path to the YAML configuration file

        Returns:
            LangfillConfig: Loaded or default configuration
        """
        if config_path is None or not config_path.exists():
            if config_path is not None:
                logger.info(f"No configuration at {config_path}, using defaults")
            return ConfigManager.get_default_config()
        return ConfigManager.load_config(config_path)

    @staticmethod
    def get_default_config() -> LangfillConfig:
        """
        Get a configuration object with default values.

        Returns:
            LangfillConfig: Configuration with default values
        """
        return LangfillConfig()
