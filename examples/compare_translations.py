#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""Translation comparison example.

Shows the basic use of pocket-translator: one text, every provider, results
side by side. Change the settings below to try other options.

Usage:
    cd examples
    python compare_translations.py

Environment variables (loaded from .env automatically):
    OPENAI_API_KEY: needed for OpenAI
    DASHSCOPE_API_KEY: needed for Qwen
    DEEPL_API_KEY: needed for DeepL
    GOOGLE_API_KEY: needed for Google
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv

from pocket_translator import AppConfig, PocketTranslator

PROJECT_ROOT = Path(__file__).parent.parent

# Load .env file from project root (API keys, model overrides)
load_dotenv(PROJECT_ROOT / ".env")


# =============================================================================
# Settings
# =============================================================================

# Providers to ask, in presentation order for results of equal status
PROVIDERS = ("DeepL", "Qwen", "OpenAI", "Google")

# Languages
SOURCE_LANG = "english"
TARGET_LANG = "chinese"

TEXT = "The quick brown fox jumps over the lazy dog."


async def main() -> None:
    """Translate TEXT with every provider and print the results."""
    config = AppConfig(
        providers=PROVIDERS,
        source_lang=SOURCE_LANG,
        target_lang=TARGET_LANG,
    )

    print("=" * 60)
    print("Translation Comparison Example")
    print("=" * 60)
    print(f"Text:        {TEXT}")
    print(f"Providers:   {', '.join(PROVIDERS)}")
    print(f"Languages:   {SOURCE_LANG} -> {TARGET_LANG}")
    print("=" * 60)

    async with PocketTranslator(config) as translator:
        outcomes = await translator.submit(TEXT)

    for outcome in outcomes:
        status = "error" if outcome.is_error else "ok"
        print(f"\n[{outcome.provider}] ({status})")
        print(outcome.text)


if __name__ == "__main__":
    asyncio.run(main())
