# SPDX-License-Identifier: Apache-2.0
"""Base classes and protocols for translation backends."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from yarl import URL

from pocket_translator.credentials import CredentialNotFoundError, CredentialStoreError

if TYPE_CHECKING:
    from pocket_translator.credentials import CredentialStore


class ErrorKind(str, Enum):
    """Classification shared by every backend failure."""

    CONFIGURATION = "configuration"
    INVALID_REQUEST = "invalid_request"
    NETWORK = "network"
    HTTP = "http"
    API = "api"
    NO_RESULT = "no_result"
    UNKNOWN = "unknown"


class TranslatorError(Exception):
    """Base exception for translator module.

    ``str(error)`` is the message shown to the user in place of a translation.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(TranslatorError):
    """Missing or unusable API key for a provider.

    Fix the configuration first; no request was sent.
    """

    kind = ErrorKind.CONFIGURATION


class InvalidRequestError(TranslatorError):
    """The outbound request could not be built (bad endpoint URL, etc.)."""

    kind = ErrorKind.INVALID_REQUEST


class NetworkError(TranslatorError):
    """Transport failure: timeout, no connectivity, DNS, etc."""

    kind = ErrorKind.NETWORK


class HTTPStatusError(TranslatorError):
    """Non-2xx response without a parseable provider error body."""

    kind = ErrorKind.HTTP

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


class APIError(TranslatorError):
    """Error reported by the provider with its own message."""

    kind = ErrorKind.API

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NoResultError(TranslatorError):
    """Well-formed response that does not carry a translation."""

    kind = ErrorKind.NO_RESULT


class UnknownError(TranslatorError):
    """Any other decode or runtime failure, with the original message kept."""

    kind = ErrorKind.UNKNOWN


@runtime_checkable
class TranslatorBackend(Protocol):
    """Protocol definition for translation backends.

    All translator implementations must conform to this protocol.
    """

    @property
    def name(self) -> str:
        """Provider name ("OpenAI", "Qwen", "DeepL", "Google")."""
        ...

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> str:
        """Translate a single text.

        Args:
            text: Text to translate.
            source_lang: Source language ("english", "chinese", "auto", ...).
            target_lang: Target language.

        Returns:
            Translated text.

        Raises:
            TranslatorError: On any failure, as one of its subclasses.
        """
        ...


def require_api_key(credentials: CredentialStore, provider: str) -> str:
    """Read the provider's API key, failing with ConfigurationError.

    Args:
        credentials: Credential store to read from.
        provider: Provider name used as the store key.

    Returns:
        The stored, non-empty API key.

    Raises:
        ConfigurationError: If the key is absent, empty, or unreadable.
    """
    try:
        api_key = credentials.get(provider)
    except CredentialNotFoundError:
        api_key = ""
    except CredentialStoreError as e:
        raise ConfigurationError(
            f"Could not read {provider} API key: {e}"
        ) from e

    if not api_key or not api_key.strip():
        raise ConfigurationError(
            f"Please configure {provider} API key in settings"
        )
    return api_key.strip()


def map_language(
    table: Mapping[str, str],
    language: str,
    *,
    uppercase: bool = False,
) -> str:
    """Look up a language identifier in a provider table.

    Unknown identifiers pass through lowercased, or uppercased when
    ``uppercase`` is set.
    """
    key = language.strip().lower()
    if key in table:
        return table[key]
    return key.upper() if uppercase else key


def check_endpoint_url(url: str) -> None:
    """Reject an endpoint that is not an absolute http(s) URL.

    Raises:
        InvalidRequestError: If ``url`` cannot be used as an endpoint.
    """
    try:
        parsed = URL(url)
    except (ValueError, TypeError) as e:
        raise InvalidRequestError(f"Invalid URL configuration: {e}") from e
    if not parsed.is_absolute() or parsed.scheme not in ("http", "https"):
        raise InvalidRequestError("Invalid URL configuration")
