# SPDX-License-Identifier: Apache-2.0
"""Application facade: the entry points a user interface talks to."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pocket_translator.aggregator import TranslationAggregator
from pocket_translator.config import AppConfig
from pocket_translator.credentials import (
    ChainedCredentialStore,
    CredentialNotFoundError,
    CredentialStore,
    EncryptedFileCredentialStore,
    EnvironmentCredentialStore,
)
from pocket_translator.models import TranslationOutcome
from pocket_translator.translators import (
    DeepLTranslator,
    GoogleTranslator,
    OpenAITranslator,
    QwenTranslator,
    get_translator_class,
)
from pocket_translator.translators.base import TranslatorBackend

logger = logging.getLogger(__name__)


def create_credential_store(config: AppConfig) -> CredentialStore:
    """Build the default credential store for ``config``.

    Keys saved through the application go to the encrypted file; environment
    variables are consulted as a fallback when enabled.
    """
    store: CredentialStore = EncryptedFileCredentialStore(config.credentials_path)
    if config.use_environment_keys:
        store = ChainedCredentialStore(store, EnvironmentCredentialStore())
    return store


def create_translators(
    config: AppConfig,
    credentials: CredentialStore,
) -> list[TranslatorBackend]:
    """Build one backend per configured provider, in declaration order.

    Raises:
        ValueError: If a provider name is unknown.
    """
    overrides: dict[str, dict[str, Any]] = {
        OpenAITranslator.PROVIDER: {"model": config.openai_model},
        QwenTranslator.PROVIDER: {"model": config.qwen_model},
        DeepLTranslator.PROVIDER: {"api_url": config.deepl_api_url},
        GoogleTranslator.PROVIDER: {"api_url": config.google_api_url},
    }
    translators: list[TranslatorBackend] = []
    for provider in config.providers:
        cls = get_translator_class(provider)
        translators.append(cls(credentials, **overrides.get(cls.PROVIDER, {})))
    return translators


class PocketTranslator:
    """Translate with every configured provider and manage their API keys."""

    def __init__(
        self,
        config: AppConfig | None = None,
        credentials: CredentialStore | None = None,
        translators: Sequence[TranslatorBackend] | None = None,
    ) -> None:
        self._config = config or AppConfig()
        if credentials is None:
            credentials = create_credential_store(self._config)
        self._credentials = credentials
        if translators is None:
            translators = create_translators(self._config, self._credentials)
        self._aggregator = TranslationAggregator(translators)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def providers(self) -> list[str]:
        return self._aggregator.providers

    async def submit(
        self,
        text: str,
        source_lang: str | None = None,
        target_lang: str | None = None,
    ) -> list[TranslationOutcome]:
        """Translate ``text`` with all providers.

        Languages default to the configured ones.
        """
        return await self._aggregator.translate(
            text,
            source_lang or self._config.source_lang,
            target_lang or self._config.target_lang,
        )

    def save_credentials(self, credentials: Mapping[str, str]) -> None:
        """Save API keys by provider name.

        Raises:
            CredentialStoreError: If a key cannot be persisted. Keys saved
                before the failure stay saved.
        """
        for provider, secret in credentials.items():
            self._credentials.save(provider, secret)
        logger.info("Saved API keys for %s", ", ".join(credentials))

    def load_credentials(self) -> dict[str, str]:
        """Return every provider's stored key, "" when not configured.

        Raises:
            CredentialStoreError: If the store cannot be read.
        """
        loaded: dict[str, str] = {}
        for provider in self.providers:
            try:
                loaded[provider] = self._credentials.get(provider)
            except CredentialNotFoundError:
                loaded[provider] = ""
        return loaded

    async def close(self) -> None:
        await self._aggregator.close()

    async def __aenter__(self) -> PocketTranslator:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
