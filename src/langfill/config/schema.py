"""Configuration schema for langfill using nested Pydantic models."""

import codecs
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..encoding.resolver import EncodingMode, EncodingProfile
from ..text.types import TranslationFormat


def _check_codec(name: str) -> str:
    try:
        _ = codecs.lookup(name)
    except LookupError as e:
        raise ValueError(f"Unknown encoding: {name}") from e
    return name


class TranslationServiceConfig(BaseModel):
    """Translation service configuration."""

    api_url: str = Field(
        default="https://translation.googleapis.com/v3",
        description="Base URL of the Cloud Translation v3 REST API",
        pattern=r"^https?://.*",
    )
    project_id: str = Field(
        default="",
        description="Cloud project the translation requests are billed to",
    )
    access_token: str | None = Field(
        default=None,
        description="Static bearer token; when unset the token command is run",
    )
    token_command: list[str] = Field(
        default_factory=lambda: ["gcloud", "auth", "print-access-token"],
        description="Command printing a fresh bearer token",
    )
    token_refresh_seconds: Annotated[float, Field(gt=0)] = Field(
        default=1800.0,
        description="Seconds before the bearer token is fetched again",
    )
    min_request_interval: Annotated[float, Field(ge=0, le=60)] = Field(
        default=0.2,
        description="Minimum delay in seconds between two translation calls",
    )
    timeout: Annotated[float, Field(gt=0, le=300)] = Field(
        default=30.0,
        description="HTTP timeout in seconds",
    )
    source_language: str = Field(
        default="en",
        description="Language code of the template files",
        pattern=r"^[A-Za-z]{2,3}([_-][A-Za-z0-9]+)?$",
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Normalize the API URL."""
        return v.rstrip("/")


class EncodingConfig(BaseModel):
    """Legacy file encoding configuration."""

    mode: Literal["explicit", "auto-detect", "legacy-map", "utf8-default"] = Field(
        default="legacy-map",
        description="How the encoding of human-translated files is chosen",
    )
    code: str | None = Field(
        default=None,
        description="Encoding used in explicit mode",
    )
    min_confidence: Annotated[float, Field(ge=0, le=1)] = Field(
        default=0.0,
        description="Detection results below this confidence count as undetected",
    )
    legacy_table: dict[str, str] = Field(
        default_factory=dict,
        description="Extra language code to charset entries for legacy-map mode",
    )

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str | None) -> str | None:
        """Reject encodings Python does not know."""
        if v is None:
            return v
        return _check_codec(v)

    @field_validator("legacy_table")
    @classmethod
    def validate_legacy_table(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject table entries naming unknown encodings."""
        for encoding in v.values():
            _ = _check_codec(encoding)
        return v

    @model_validator(mode="after")
    def validate_explicit_code(self) -> "EncodingConfig":
        """Explicit mode needs a code."""
        if self.mode == "explicit" and not self.code:
            raise ValueError("Encoding mode 'explicit' requires 'code'")
        return self

    def to_profile(self) -> EncodingProfile:
        """Build the immutable encoding profile for a run."""
        return EncodingProfile(mode=EncodingMode(self.mode), code=self.code)


class OutputConfig(BaseModel):
    """Translation output configuration."""

    format: Literal["text", "markup"] = Field(
        default="text",
        description="Guard and restore rules applied to every string",
    )

    @property
    def translation_format(self) -> TranslationFormat:
        """The configured format as an enum."""
        return TranslationFormat(self.format)


class LangfillConfig(BaseModel):
    """
    Configuration model for langfill with nested structure.

    Every section has defaults, so an empty file is a valid configuration.
    """

    translation: TranslationServiceConfig = Field(
        default_factory=TranslationServiceConfig
    )
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config: ClassVar[ConfigDict] = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
        frozen=False,
    )
