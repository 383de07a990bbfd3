"""
Cloud Translation API client.

This module implements the external translate call used by the pipeline:
``(source_language, target_language, format, text) -> translated text``,
against the Cloud Translation v3 REST endpoint. It also owns the policies the
pipeline core stays out of: a minimum delay between calls to respect the
service rate limit, and periodic bearer token refresh.
"""

from __future__ import annotations

import html
import logging
import re
import subprocess
import time
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from ..config.schema import TranslationServiceConfig
from ..core.exceptions import ConfigurationError, TranslationServiceError
from ..text.types import NO_TRANSLATE_CLOSE, NO_TRANSLATE_OPEN, TranslationFormat

logger = logging.getLogger(__name__)


class TranslateFunction(Protocol):
    """The external translate call, as seen by the pipeline."""

    def __call__(
        self,
        source_language: str,
        target_language: str,
        fmt: TranslationFormat,
        text: str,
    ) -> str: ...


def mime_type_for(fmt: TranslationFormat, text: str) -> str:
    """
    Pick the request MIME type.

    The service only honors ``translate="no"`` in HTML, so text carrying a
    no-translate marker is sent as HTML too.
    """
    if fmt is TranslationFormat.MARKUP or NO_TRANSLATE_OPEN in text:
        return "text/html"
    return "text/plain"


GUARDED_TOKEN_RE = re.compile(
    f"({re.escape(NO_TRANSLATE_OPEN)}.*?{re.escape(NO_TRANSLATE_CLOSE)})", re.DOTALL
)


def escape_outside_markers(text: str) -> str:
    """
    HTML-escape plain text that is about to be sent as HTML.

    No-translate markers stay as markup. Unescaping the reply restores the
    literal text, entity-like sequences included.
    """
    return "".join(
        part if index % 2 else html.escape(part, quote=False)
        for index, part in enumerate(GUARDED_TOKEN_RE.split(text))
    )


class TranslationClient:
    """Client for the Cloud Translation v3 REST API."""

    def __init__(
        self,
        config: TranslationServiceConfig,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the translation client.

        Args:
            config: Translation service configuration
            transport: Optional httpx transport, used by tests
            clock: Monotonic clock for rate limiting and token age
            sleep: Sleep function used to wait out the rate limit

        Raises:
            ConfigurationError: If no project is configured
        """
        if not config.project_id:
            raise ConfigurationError("translation.project_id must be set")

        self.config: TranslationServiceConfig = config
        self.client: httpx.Client = httpx.Client(
            base_url=config.api_url,
            headers={
                "Content-Type": "application/json",
                "User-Agent": "langfill/1.0",
                "x-goog-user-project": config.project_id,
            },
            timeout=config.timeout,
            transport=transport,
        )
        self._clock: Callable[[], float] = clock
        self._sleep: Callable[[float], None] = sleep
        self._last_call: float | None = None
        self._token: str | None = None
        self._token_fetched_at: float = 0.0

    def __enter__(self) -> TranslationClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    def _fetch_token(self) -> str:
        if self.config.access_token:
            return self.config.access_token

        try:
            result = subprocess.run(
                self.config.token_command,
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            raise TranslationServiceError(f"Failed to obtain an access token: {e}") from e

        token = result.stdout.strip()
        if not token:
            raise TranslationServiceError("Token command printed no access token")
        return token

    def bearer_token(self) -> str:
        """Return the current bearer token, refreshing it when it is too old."""
        now = self._clock()
        if (
            self._token is None
            or now - self._token_fetched_at >= self.config.token_refresh_seconds
        ):
            self._token = self._fetch_token()
            self._token_fetched_at = now
            logger.debug("Refreshed translation access token")
        return self._token

    def _throttle(self) -> None:
        if self._last_call is not None:
            wait = self.config.min_request_interval - (self._clock() - self._last_call)
            if wait > 0:
                self._sleep(wait)
        self._last_call = self._clock()

    def translate(
        self,
        source_language: str,
        target_language: str,
        fmt: TranslationFormat,
        text: str,
    ) -> str:
        """
        Translate a single string.

        Args:
            source_language: Language code of the text
            target_language: Language code to translate into
            fmt: Translation format of the string
            text: Guarded text

        Returns:
            The raw translated text

        Raises:
            TranslationServiceError: If the request fails or the response is malformed
        """
        if not text.strip():
            return text

        mime_type = mime_type_for(fmt, text)
        escaped = fmt is TranslationFormat.TEXT and mime_type == "text/html"
        payload = {
            "contents": [escape_outside_markers(text) if escaped else text],
            "sourceLanguageCode": source_language,
            "targetLanguageCode": target_language,
            "mimeType": mime_type,
        }
        token = self.bearer_token()
        self._throttle()

        try:
            response = self.client.post(
                f"/projects/{self.config.project_id}:translateText",
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
            _ = response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_msg = f"HTTP {e.response.status_code}: {e.response.text}"
            raise TranslationServiceError(error_msg, e.response.status_code) from e
        except httpx.RequestError as e:
            raise TranslationServiceError(f"Request failed: {e}") from e

        try:
            data: dict[str, Any] = response.json()  # pyright: ignore[reportAny]
            translated: str = data["translations"][0]["translatedText"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TranslationServiceError(
                f"Malformed translation response: {response.text[:200]}"
            ) from e

        if escaped:
            translated = html.unescape(translated)

        logger.debug(f"Translated {text!r} ({source_language}->{target_language}) to {translated!r}")
        return translated

    __call__ = translate
