# SPDX-License-Identifier: Apache-2.0
"""Shared aiohttp plumbing for JSON-over-HTTP translation backends."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar

import aiohttp
from pydantic import ValidationError

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
    require_api_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPRequest:
    """A single outbound POST.

    ``headers`` and ``params`` may carry the API key and must never be logged.
    """

    url: str
    json: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


def parse_json_object(body: bytes) -> dict[str, Any] | None:
    """Decode a JSON object body, or return None if it is not one."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


class HTTPTranslator:
    """Base class for backends that POST JSON with aiohttp.

    Subclasses set ``PROVIDER``, ``DEFAULT_API_URL`` and ``DEFAULT_TIMEOUT``
    and implement ``_build_request`` and ``_parse_response``. Error bodies go
    through ``_error_for_status``, which subclasses may override.
    """

    PROVIDER: ClassVar[str]
    DEFAULT_API_URL: ClassVar[str]
    DEFAULT_TIMEOUT: ClassVar[float] = 30.0

    def __init__(
        self,
        credentials: CredentialStore,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            credentials: Store the API key is read from on every call.
            api_url: Endpoint override (default: ``DEFAULT_API_URL``).
            timeout: Request timeout in seconds (default: ``DEFAULT_TIMEOUT``).
        """
        self._credentials = credentials
        self._api_url = api_url or self.DEFAULT_API_URL
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self._session: aiohttp.ClientSession | None = None

    @property
    def name(self) -> str:
        """Return provider name."""
        return self.PROVIDER

    async def __aenter__(self) -> HTTPTranslator:
        """Enter async context manager."""
        await self._ensure_session()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists.

        Returns:
            Active aiohttp session.
        """
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> str:
        """Translate a single text with one POST request.

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
        request = self._build_request(api_key, text, source_lang, target_lang)
        check_endpoint_url(request.url)

        session = await self._ensure_session()
        logger.debug("Sending %s request to %s", self.name, request.url)

        try:
            async with session.post(
                request.url,
                json=request.json,
                headers=request.headers,
                params=request.params,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as response:
                status = response.status
                body = await response.read()
        except asyncio.TimeoutError as e:
            raise NetworkError("Request timed out") from e
        except aiohttp.InvalidURL as e:
            raise InvalidRequestError(f"Invalid URL configuration: {e}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error: {e}") from e

        logger.debug("%s responded with status %d", self.name, status)

        if not 200 <= status < 300:
            raise self._error_for_status(status, body)

        try:
            translated = self._parse_response(body)
        except TranslatorError:
            raise
        except ValidationError as e:
            raise UnknownError(
                f"Decoding error: {e.error_count()} invalid field(s) in {self.name} response"
            ) from e
        except (ValueError, KeyError, TypeError) as e:
            raise UnknownError(f"Decoding error: {e}") from e

        translated = translated.strip()
        if not translated:
            raise NoResultError("No translation result")
        return translated

    def _build_request(
        self,
        api_key: str,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> HTTPRequest:
        raise NotImplementedError

    def _parse_response(self, body: bytes) -> str:
        raise NotImplementedError

    def _error_for_status(self, status: int, body: bytes) -> TranslatorError:
        """Map a non-2xx response to APIError or HTTPStatusError.

        A provider error message is passed through unchanged.
        """
        message = self._error_message(parse_json_object(body))
        if message:
            return APIError(message, status=status)
        return HTTPStatusError(f"Server error: {status}", status=status)

    def _error_message(self, envelope: dict[str, Any] | None) -> str | None:
        """Extract the message from ``{"error": {"message": ...}}``."""
        if envelope is None:
            return None
        error = envelope.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        return None

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
