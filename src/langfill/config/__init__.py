"""
Configuration loading and validation for langfill.
"""

from .manager import ConfigManager
from .schema import EncodingConfig, LangfillConfig, OutputConfig, TranslationServiceConfig

__all__ = [
    "ConfigManager",
    "EncodingConfig",
    "LangfillConfig",
    "OutputConfig",
    "TranslationServiceConfig",
]
