# SPDX-License-Identifier: Apache-2.0
"""Google Cloud Translation (v2) backend."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from pocket_translator.credentials import CredentialStore
from pocket_translator.translators.base import NoResultError, map_language
from pocket_translator.translators.http import HTTPRequest, HTTPTranslator

# Language name -> Google language code
LANGUAGE_CODES = {
    "chinese": "zh-CN",
    "english": "en",
    "german": "de",
    "french": "fr",
    "italian": "it",
    "japanese": "ja",
    "spanish": "es",
    "dutch": "nl",
    "polish": "pl",
    "portuguese": "pt",
    "russian": "ru",
}


class GoogleRequest(BaseModel):
    q: str
    target: str
    source: str | None = None
    format: str = "text"


class GoogleTranslation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    translated_text: str = Field(alias="translatedText")


class GoogleData(BaseModel):
    translations: list[GoogleTranslation]


class GoogleResponse(BaseModel):
    data: GoogleData


class GoogleTranslator(HTTPTranslator):
    """Google Translate backend.

    Calls the Cloud Translation v2 REST API with the API key passed as the
    ``key`` query parameter.

    Attributes:
        name: Provider identifier ("Google").
    """

    PROVIDER = "Google"
    DEFAULT_API_URL = "https://translation.googleapis.com/language/translate/v2"
    DEFAULT_TIMEOUT = 15.0

    def __init__(
        self,
        credentials: CredentialStore,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            credentials,
            api_url=api_url or os.environ.get("GOOGLE_TRANSLATE_API_URL"),
            timeout=timeout,
        )

    @staticmethod
    def language_code(language: str) -> str:
        """Convert a language name to a Google code (unknown: lowercased)."""
        return map_language(LANGUAGE_CODES, language)

    def _build_request(
        self,
        api_key: str,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> HTTPRequest:
        payload = GoogleRequest(
            q=text,
            target=self.language_code(target_lang),
            # Google detects the source language when it is omitted
            source=(
                None
                if source_lang.strip().lower() == "auto"
                else self.language_code(source_lang)
            ),
        )
        return HTTPRequest(
            url=self._api_url,
            json=payload.model_dump(exclude_none=True),
            params={"key": api_key},
        )

    def _parse_response(self, body: bytes) -> str:
        response = GoogleResponse.model_validate_json(body)
        if not response.data.translations:
            raise NoResultError("No translation result")
        return response.data.translations[0].translated_text
