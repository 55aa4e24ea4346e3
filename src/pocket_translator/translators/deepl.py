# SPDX-License-Identifier: Apache-2.0
"""DeepL translation backend."""

from __future__ import annotations

import os

from pydantic import BaseModel

from pocket_translator.credentials import CredentialStore
from pocket_translator.translators.base import (
    APIError,
    HTTPStatusError,
    NoResultError,
    TranslatorError,
    map_language,
)
from pocket_translator.translators.http import HTTPRequest, HTTPTranslator, parse_json_object

# Language name -> DeepL language code
LANGUAGE_CODES = {
    "chinese": "ZH",
    "english": "EN",
    "german": "DE",
    "french": "FR",
    "italian": "IT",
    "japanese": "JA",
    "spanish": "ES",
    "dutch": "NL",
    "polish": "PL",
    "portuguese": "PT",
    "russian": "RU",
}


class DeepLRequest(BaseModel):
    text: list[str]
    target_lang: str
    source_lang: str | None = None


class DeepLTranslation(BaseModel):
    text: str
    detected_source_language: str | None = None


class DeepLResponse(BaseModel):
    translations: list[DeepLTranslation]


class DeepLTranslator(HTTPTranslator):
    """DeepL translation backend.

    Uses the DeepL v2 JSON API with header authentication. The free API
    endpoint is the default; Pro users set ``api_url`` or ``DEEPL_API_URL``
    to ``https://api.deepl.com/v2/translate``.

    Attributes:
        name: Provider identifier ("DeepL").
    """

    PROVIDER = "DeepL"
    DEFAULT_API_URL = "https://api-free.deepl.com/v2/translate"
    DEFAULT_TIMEOUT = 30.0

    # Status codes DeepL documents with a fixed meaning
    STATUS_MESSAGES = {
        401: "Invalid DeepL API key",
        403: "Invalid DeepL API key",
        429: "Too many requests. Please try again later",
        456: "DeepL quota exceeded. Please check your account",
    }

    def __init__(
        self,
        credentials: CredentialStore,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            credentials,
            api_url=api_url or os.environ.get("DEEPL_API_URL"),
            timeout=timeout,
        )

    @staticmethod
    def language_code(language: str) -> str:
        """Convert a language name to a DeepL code (unknown: uppercased)."""
        return map_language(LANGUAGE_CODES, language, uppercase=True)

    def _build_request(
        self,
        api_key: str,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> HTTPRequest:
        payload = DeepLRequest(
            text=[text],
            target_lang=self.language_code(target_lang),
            # DeepL detects the source language when it is omitted
            source_lang=(
                None
                if source_lang.strip().lower() == "auto"
                else self.language_code(source_lang)
            ),
        )
        return HTTPRequest(
            url=self._api_url,
            json=payload.model_dump(exclude_none=True),
            headers={"Authorization": f"DeepL-Auth-Key {api_key}"},
        )

    def _parse_response(self, body: bytes) -> str:
        response = DeepLResponse.model_validate_json(body)
        if not response.translations:
            raise NoResultError("No translation result")
        return response.translations[0].text

    def _error_for_status(self, status: int, body: bytes) -> TranslatorError:
        if status in self.STATUS_MESSAGES:
            return APIError(self.STATUS_MESSAGES[status], status=status)

        envelope = parse_json_object(body)
        if envelope is not None and isinstance(envelope.get("message"), str):
            return APIError(f"DeepL Error: {envelope['message']}", status=status)
        return HTTPStatusError(f"DeepL server error: {status}", status=status)
