# SPDX-License-Identifier: Apache-2.0
"""Pocket Translator: compare translations from several providers at once.

Usage:
    from pocket_translator import PocketTranslator

    async with PocketTranslator() as translator:
        for outcome in await translator.submit("Hello", "english", "chinese"):
            print(outcome.provider, outcome.text)
"""

from pocket_translator.aggregator import TranslationAggregator, order_outcomes, translate_all
from pocket_translator.app import PocketTranslator, create_credential_store, create_translators
from pocket_translator.config import AppConfig
from pocket_translator.models import TranslationOutcome, TranslationRequest

__all__ = [
    "AppConfig",
    "PocketTranslator",
    "TranslationAggregator",
    "TranslationOutcome",
    "TranslationRequest",
    "create_credential_store",
    "create_translators",
    "order_outcomes",
    "translate_all",
]
