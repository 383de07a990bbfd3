"""
Global test configuration fixtures for langfill tests.

This module provides reusable pytest fixtures for configuration objects,
template mappings and fake translate calls.
"""

from __future__ import annotations

import pytest

from langfill.config.schema import (
    EncodingConfig,
    LangfillConfig,
    OutputConfig,
    TranslationServiceConfig,
)
from tests.utils.test_helpers import FakeTranslator


@pytest.fixture
def base_config() -> LangfillConfig:
    """
    Create a configuration usable without network access.

    Returns:
        LangfillConfig: Configuration with a static token and no rate limit
    """
    return LangfillConfig(
        translation=TranslationServiceConfig(
            project_id="test-project",
            access_token="test-token",
            min_request_interval=0.0,
        ),
        encoding=EncodingConfig(mode="legacy-map"),
        output=OutputConfig(format="text"),
    )


@pytest.fixture
def template() -> dict[str, str]:
    """A small source language mapping."""
    return {
        "index_title": "Module Index",
        "delete_confirm": "Delete $1 files from $2?",
        "edit_file": "File : $1",
        "empty": "",
    }


@pytest.fixture
def identity_translator() -> FakeTranslator:
    """Translator that returns its input unchanged."""
    return FakeTranslator()
