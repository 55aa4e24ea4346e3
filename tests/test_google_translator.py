# SPDX-License-Identifier: Apache-2.0
"""Tests for the Google Cloud Translation backend."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from pocket_translator.aggregator import translate_all
from pocket_translator.credentials import MemoryCredentialStore
from pocket_translator.translators import (
    APIError,
    ConfigurationError,
    GoogleTranslator,
    HTTPStatusError,
    NetworkError,
    NoResultError,
    UnknownError,
)


def _success_body(text: str) -> bytes:
    return json.dumps(
        {"data": {"translations": [{"translatedText": text}]}}
    ).encode("utf-8")


@pytest.fixture
def translator() -> GoogleTranslator:
    return GoogleTranslator(MemoryCredentialStore({"Google": "g-key"}))


class TestGoogleTranslatorConfig:
    """Tests for construction and language codes."""

    def test_defaults(self, translator: GoogleTranslator) -> None:
        assert translator._api_url == (
            "https://translation.googleapis.com/language/translate/v2"
        )
        assert translator._timeout == 15.0

    @pytest.mark.parametrize(
        ("language", "code"),
        [
            ("chinese", "zh-CN"),
            ("English", "en"),
            ("french", "fr"),
            ("KO", "ko"),
        ],
    )
    def test_language_code(self, language: str, code: str) -> None:
        """Known names map through the table; unknown ones are lowercased."""
        assert GoogleTranslator.language_code(language) == code


class TestGoogleTranslator:
    """Unit tests for GoogleTranslator (mocked)."""

    @pytest.mark.asyncio
    async def test_translate_success(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        translator._session = mock_session_factory(200, _success_body("你好"))

        result = await translator.translate("Hello", "english", "chinese")

        assert result == "你好"

    @pytest.mark.asyncio
    async def test_request_shape(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        """API key goes in the query string; format is fixed to text."""
        session = mock_session_factory(200, _success_body("你好"))
        translator._session = session

        await translator.translate("Hello", "english", "chinese")

        args, kwargs = session.post.call_args
        assert args[0] == "https://translation.googleapis.com/language/translate/v2"
        assert kwargs["params"] == {"key": "g-key"}
        assert kwargs["headers"] == {}
        assert kwargs["json"] == {
            "q": "Hello",
            "source": "en",
            "target": "zh-CN",
            "format": "text",
        }
        assert kwargs["timeout"].total == 15.0

    @pytest.mark.asyncio
    async def test_auto_source_is_omitted(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        session = mock_session_factory(200, _success_body("你好"))
        translator._session = session

        await translator.translate("Hello", "auto", "chinese")

        assert "source" not in session.post.call_args.kwargs["json"]

    @pytest.mark.asyncio
    async def test_missing_key_skips_request(self, mock_session_factory: Any) -> None:
        translator = GoogleTranslator(MemoryCredentialStore({"Google": ""}))
        session = mock_session_factory(200, _success_body("你好"))
        translator._session = session

        with pytest.raises(ConfigurationError):
            await translator.translate("Hello", "english", "chinese")

        session.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_envelope(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        """Nested error.message should become an API error."""
        body = json.dumps(
            {"error": {"code": 400, "message": "API key not valid."}}
        ).encode("utf-8")
        translator._session = mock_session_factory(400, body)

        with pytest.raises(APIError) as exc_info:
            await translator.translate("Hello", "english", "chinese")

        assert str(exc_info.value) == "API key not valid."
        assert exc_info.value.status == 400

    @pytest.mark.asyncio
    async def test_error_without_envelope(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        translator._session = mock_session_factory(500, b"")

        with pytest.raises(HTTPStatusError) as exc_info:
            await translator.translate("Hello", "english", "chinese")

        assert str(exc_info.value) == "Server error: 500"

    @pytest.mark.asyncio
    async def test_no_translations(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        translator._session = mock_session_factory(
            200, b'{"data": {"translations": []}}'
        )

        with pytest.raises(NoResultError):
            await translator.translate("Hello", "english", "chinese")

    @pytest.mark.asyncio
    async def test_empty_translated_text(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        """An empty translatedText should be NoResultError."""
        translator._session = mock_session_factory(200, _success_body(""))

        with pytest.raises(NoResultError):
            await translator.translate("Hello", "english", "chinese")

    @pytest.mark.asyncio
    async def test_unexpected_shape(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        translator._session = mock_session_factory(
            200, json.dumps({"result": "你好"}).encode("utf-8")
        )

        with pytest.raises(UnknownError):
            await translator.translate("Hello", "english", "chinese")

    @pytest.mark.asyncio
    async def test_timeout(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        translator._session = mock_session_factory(error=asyncio.TimeoutError())

        with pytest.raises(NetworkError):
            await translator.translate("Hello", "english", "chinese")


class TestGoogleOutcome:
    """End-to-end outcome through the aggregator."""

    @pytest.mark.asyncio
    async def test_outcome_record(
        self, translator: GoogleTranslator, mock_session_factory: Any
    ) -> None:
        """A successful response should surface as a plain success record."""
        translator._session = mock_session_factory(200, _success_body("你好"))

        outcomes = await translate_all("Hello", "english", "chinese", [translator])

        assert [o.to_dict() for o in outcomes] == [
            {"provider": "Google", "text": "你好", "is_error": False}
        ]
