# SPDX-License-Identifier: Apache-2.0
"""Translation backend modules.

This module provides translation backends for OpenAI, Qwen (DashScope),
DeepL and Google Translate. Every backend reads its API key from a
credential store on each call.

Usage:
    from pocket_translator.credentials import MemoryCredentialStore
    from pocket_translator.translators import DeepLTranslator

    store = MemoryCredentialStore({"DeepL": "your-api-key"})
    translator = DeepLTranslator(store)
    result = await translator.translate("Hello", "english", "chinese")
"""

from pocket_translator.translators.base import (
    APIError,
    ConfigurationError,
    ErrorKind,
    HTTPStatusError,
    InvalidRequestError,
    NetworkError,
    NoResultError,
    TranslatorBackend,
    TranslatorError,
    UnknownError,
)
from pocket_translator.translators.deepl import DeepLTranslator
from pocket_translator.translators.google import GoogleTranslator
from pocket_translator.translators.openai import OpenAITranslator
from pocket_translator.translators.qwen import QwenTranslator

__all__ = [
    # Protocol and exceptions
    "TranslatorBackend",
    "ErrorKind",
    "TranslatorError",
    "ConfigurationError",
    "InvalidRequestError",
    "NetworkError",
    "HTTPStatusError",
    "APIError",
    "NoResultError",
    "UnknownError",
    # Backends
    "DeepLTranslator",
    "GoogleTranslator",
    "OpenAITranslator",
    "QwenTranslator",
    "TRANSLATOR_CLASSES",
    "get_translator_class",
]

# Provider name -> backend class
TRANSLATOR_CLASSES: dict[str, type] = {
    DeepLTranslator.PROVIDER: DeepLTranslator,
    QwenTranslator.PROVIDER: QwenTranslator,
    OpenAITranslator.PROVIDER: OpenAITranslator,
    GoogleTranslator.PROVIDER: GoogleTranslator,
}


def get_translator_class(provider: str) -> type:
    """Get the backend class for a provider name.

    Matching is case-insensitive ("deepl" and "DeepL" are the same provider).

    Raises:
        ValueError: If the provider is unknown.
    """
    for name, cls in TRANSLATOR_CLASSES.items():
        if name.lower() == provider.strip().lower():
            return cls
    known = ", ".join(TRANSLATOR_CLASSES)
    raise ValueError(f"Unknown provider '{provider}' (expected one of: {known})")
