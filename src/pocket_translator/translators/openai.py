# SPDX-License-Identifier: Apache-2.0
"""OpenAI chat-completion translation backend."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, ClassVar

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    OpenAIError,
)

from pocket_translator.credentials import CredentialStore
from pocket_translator.translators.base import (
    APIError,
    HTTPStatusError,
    InvalidRequestError,
    NetworkError,
    NoResultError,
    TranslatorError,
    UnknownError,
    check_endpoint_url,
    map_language,
    require_api_key,
)

logger = logging.getLogger(__name__)


# Language code to full name mapping for prompts
LANGUAGE_NAMES = {
    "en": "english",
    "zh": "chinese",
    "ja": "japanese",
    "de": "german",
    "fr": "french",
    "es": "spanish",
    "auto": "the source language",
}


class OpenAITranslator:
    """OpenAI chat-completion translation backend.

    Sends one user-role message asking for the translation and returns the
    first choice's message content. Subclasses can target any
    OpenAI-compatible endpoint by overriding the class attributes and
    ``_build_messages``.

    Attributes:
        name: Provider identifier ("OpenAI").
    """

    PROVIDER: ClassVar[str] = "OpenAI"
    DEFAULT_MODEL: ClassVar[str] = "gpt-4o"
    DEFAULT_BASE_URL: ClassVar[str | None] = None
    DEFAULT_TIMEOUT: ClassVar[float] = 30.0
    MODEL_ENV_VAR: ClassVar[str] = "OPENAI_MODEL"
    ERROR_PREFIX: ClassVar[str] = "OpenAI Error"

    def __init__(
        self,
        credentials: CredentialStore,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            credentials: Store the API key is read from on every call.
            model: Model to use. Priority: argument > ``MODEL_ENV_VAR`` env > default.
            base_url: API base URL override.
            timeout: Request timeout in seconds.
        """
        self._credentials = credentials
        env_model = os.environ.get(self.MODEL_ENV_VAR)
        self._model = model or env_model or self.DEFAULT_MODEL
        self._base_url = base_url or self.DEFAULT_BASE_URL
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self._client: AsyncOpenAI | None = None
        self._client_key: str | None = None

    @property
    def name(self) -> str:
        """Return provider name."""
        return self.PROVIDER

    @property
    def model(self) -> str:
        return self._model

    def _ensure_client(self, api_key: str) -> AsyncOpenAI:
        """Return a client for ``api_key``, rebuilding it if the key changed.

        SDK retries are disabled; a failed call is reported as-is.
        """
        if self._client is None or self._client_key != api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
            self._client_key = api_key
        return self._client

    @staticmethod
    def language_name(language: str) -> str:
        """Convert a language identifier to the name used in the prompt."""
        return map_language(LANGUAGE_NAMES, language)

    def _build_messages(
        self,
        text: str,
        source_name: str,
        target_name: str,
    ) -> list[dict[str, str]]:
        return [
            {
                "role": "user",
                "content": (
                    f"Translate the following text from {source_name} "
                    f"to {target_name}: {text}"
                ),
            }
        ]

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> str:
        """Translate a single text.

        Args:
            text: Text to translate.
            source_lang: Source language identifier.
            target_lang: Target language identifier.

        Returns:
            Translated text, stripped of surrounding whitespace.

        Raises:
            TranslatorError: On any failure, classified by kind.
        """
        api_key = require_api_key(self._credentials, self.name)
        if self._base_url is not None:
            check_endpoint_url(self._base_url)
        messages = self._build_messages(
            text, self.language_name(source_lang), self.language_name(target_lang)
        )

        try:
            client = self._ensure_client(api_key)
            logger.debug("Sending %s request (model %s)", self.name, self._model)
            response = await client.chat.completions.create(
                model=self._model,
                messages=messages,  # type: ignore[arg-type]
            )
        except OpenAIError as e:
            raise self._translate_openai_error(e) from e
        except ValueError as e:
            raise InvalidRequestError(f"Invalid request: {e}") from e

        try:
            content = self._extract_content(response)
        except TranslatorError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise UnknownError(f"Unknown error: {e}") from e

        content = content.strip()
        if not content:
            raise NoResultError("Failed to parse response")
        return content

    def _extract_content(self, response: Any) -> str:
        choices = response.choices
        if not choices:
            raise NoResultError("Failed to parse response")
        content = choices[0].message.content
        if content is None:
            raise NoResultError("Failed to parse response")
        return str(content)

    def _translate_openai_error(self, error: OpenAIError) -> TranslatorError:
        """Map an OpenAI SDK exception to a TranslatorError.

        Args:
            error: The caught exception.

        Returns:
            The classified error.
        """
        # APITimeoutError is a subclass of APIConnectionError
        if isinstance(error, APITimeoutError):
            return NetworkError("Request timed out")
        if isinstance(error, APIConnectionError):
            return NetworkError(f"Network error: {error}")
        if isinstance(error, APIStatusError):
            message = _envelope_message(error.body)
            if message:
                return APIError(
                    f"{self.ERROR_PREFIX}: {message}", status=error.status_code
                )
            return HTTPStatusError(
                f"Server error: {error.status_code}", status=error.status_code
            )
        return UnknownError(f"Unknown error: {error}")

    async def close(self) -> None:
        """Close the OpenAI client."""
        if self._client:
            await self._client.close()
            self._client = None
            self._client_key = None


def _envelope_message(body: object) -> str | None:
    """Find the message in an error body.

    The SDK usually unwraps ``{"error": {...}}`` already; both shapes are
    accepted.
    """
    if not isinstance(body, Mapping):
        return None
    error = body.get("error", body)
    if isinstance(error, Mapping) and isinstance(error.get("message"), str):
        return str(error["message"])
    return None
