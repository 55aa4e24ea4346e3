# SPDX-License-Identifier: Apache-2.0
"""Application configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_PATH = Path("~/.config/pocket-translator/credentials.json")


@dataclass
class AppConfig:
    """Configuration for the translator application.

    Attributes:
        providers: Provider names in declaration order. Results of equal
            status are presented in this order.
        source_lang: Default source language.
        target_lang: Default target language.
        credentials_path: Location of the encrypted credential file.
        openai_model: OpenAI model override (None: OPENAI_MODEL env or default).
        qwen_model: Qwen model override (None: QWEN_MODEL env or default).
        deepl_api_url: DeepL endpoint override (None: DEEPL_API_URL env or free API).
        google_api_url: Google endpoint override
            (None: GOOGLE_TRANSLATE_API_URL env or the v2 endpoint).
        use_environment_keys: Fall back to API keys in environment variables.
    """

    # Presentation order for results of equal status
    DEFAULT_PROVIDERS: ClassVar[tuple[str, ...]] = ("DeepL", "Qwen", "OpenAI", "Google")

    providers: tuple[str, ...] = DEFAULT_PROVIDERS
    source_lang: str = "english"
    target_lang: str = "chinese"
    credentials_path: Path = field(default_factory=lambda: DEFAULT_CREDENTIALS_PATH)
    openai_model: str | None = None
    qwen_model: str | None = None
    deepl_api_url: str | None = None
    google_api_url: str | None = None
    use_environment_keys: bool = True

    @classmethod
    def from_env(cls, dotenv_path: Path | str | None = None) -> AppConfig:
        """Build configuration from the environment.

        A ``.env`` file is loaded first; variables already set in the
        environment take precedence over it.

        Recognized variables:
            POCKET_TRANSLATOR_PROVIDERS: comma-separated provider names.
            POCKET_TRANSLATOR_CREDENTIALS: credential file path.
            POCKET_TRANSLATOR_SOURCE_LANG / POCKET_TRANSLATOR_TARGET_LANG.
        """
        if load_dotenv(dotenv_path or find_dotenv(usecwd=True)):
            logger.debug("Loaded environment from .env file")

        config = cls()

        providers = os.environ.get("POCKET_TRANSLATOR_PROVIDERS", "")
        names = tuple(name.strip() for name in providers.split(",") if name.strip())
        if names:
            config.providers = names

        credentials_path = os.environ.get("POCKET_TRANSLATOR_CREDENTIALS")
        if credentials_path:
            config.credentials_path = Path(credentials_path)

        config.source_lang = os.environ.get(
            "POCKET_TRANSLATOR_SOURCE_LANG", config.source_lang
        )
        config.target_lang = os.environ.get(
            "POCKET_TRANSLATOR_TARGET_LANG", config.target_lang
        )
        return config
