# SPDX-License-Identifier: Apache-2.0
"""Concurrent fan-out of one text to every configured translation backend."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pocket_translator.models import TranslationOutcome, TranslationRequest
from pocket_translator.translators.base import (
    TranslatorBackend,
    TranslatorError,
    UnknownError,
)

logger = logging.getLogger(__name__)


def order_outcomes(outcomes: Iterable[TranslationOutcome]) -> list[TranslationOutcome]:
    """Apply the presentation order: successes first, then failures.

    Within each group the incoming (provider-declaration) order is kept.
    """
    return sorted(outcomes, key=lambda outcome: outcome.is_error)


async def _run_one(
    translator: TranslatorBackend,
    request: TranslationRequest,
) -> TranslationOutcome:
    """Run one backend; every failure becomes a failure outcome."""
    name = translator.name
    try:
        text = await translator.translate(
            request.text, request.source_lang, request.target_lang
        )
    except TranslatorError as e:
        logger.warning("%s failed (%s): %s", name, e.kind.value, e)
        return TranslationOutcome.failure(name, e)
    except Exception as e:
        logger.exception("%s raised an unclassified error", name)
        return TranslationOutcome.failure(name, UnknownError(f"Unknown error: {e}"))

    logger.debug("%s succeeded", name)
    return TranslationOutcome.success(name, text)


async def translate_all(
    text: str,
    source_lang: str,
    target_lang: str,
    translators: Sequence[TranslatorBackend],
) -> list[TranslationOutcome]:
    """Translate ``text`` with every backend concurrently.

    One task is started per backend and all of them are awaited; a failing
    or slow backend never affects the others and nothing is retried.

    Args:
        text: Text to translate (must not be empty).
        source_lang: Source language identifier.
        target_lang: Target language identifier.
        translators: Backends in declaration order; names must be unique.

    Returns:
        Exactly one outcome per backend, ordered by ``order_outcomes``.

    Raises:
        ValueError: If ``text`` is empty or two backends share a name.
    """
    request = TranslationRequest(text, source_lang, target_lang)

    names = [translator.name for translator in translators]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Duplicate provider names: {', '.join(duplicates)}")

    logger.info(
        "Translating %d character(s) %s -> %s with %d provider(s)",
        len(text),
        source_lang,
        target_lang,
        len(translators),
    )
    # gather keeps argument order, so outcomes line up with declaration order
    outcomes = await asyncio.gather(
        *(_run_one(translator, request) for translator in translators)
    )
    return order_outcomes(outcomes)


class TranslationAggregator:
    """A fixed set of backends exposed as one translate call.

    Usable as an async context manager that closes the backends' network
    sessions on exit.
    """

    def __init__(self, translators: Sequence[TranslatorBackend]) -> None:
        self._translators = list(translators)

    @property
    def providers(self) -> list[str]:
        return [translator.name for translator in self._translators]

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> list[TranslationOutcome]:
        return await translate_all(text, source_lang, target_lang, self._translators)

    async def __aenter__(self) -> TranslationAggregator:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close every backend that holds a session."""
        for translator in self._translators:
            close = getattr(translator, "close", None)
            if close is not None:
                await close()
