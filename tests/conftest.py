# SPDX-License-Identifier: Apache-2.0
"""Shared test helpers."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


def make_mock_session(
    status: int = 200,
    body: bytes = b"",
    error: BaseException | None = None,
) -> MagicMock:
    """Build a stand-in for ``aiohttp.ClientSession``.

    ``session.post(...)`` returns an async context manager yielding a
    response with ``status`` and ``read()``; with ``error`` set, the call
    raises it instead.
    """
    response = MagicMock()
    response.status = status
    response.read = AsyncMock(return_value=body)

    session = MagicMock()
    if error is not None:
        session.post = MagicMock(side_effect=error)
    else:
        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=None)
        session.post = MagicMock(return_value=context)
    session.close = AsyncMock()
    return session


class FakeTranslator:
    """Deterministic backend recording how often it was called."""

    def __init__(
        self,
        name: str,
        result: str = "",
        error: BaseException | None = None,
        wait_for: asyncio.Event | None = None,
        signal: asyncio.Event | None = None,
    ) -> None:
        self._name = name
        self._result = result
        self._error = error
        self._wait_for = wait_for
        self._signal = signal
        self.calls: list[tuple[str, str, str]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        if self._signal is not None:
            self._signal.set()
        if self._wait_for is not None:
            await self._wait_for.wait()
        if self._error is not None:
            raise self._error
        return self._result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mock_session_factory() -> Any:
    """Factory fixture for mocked aiohttp sessions."""
    return make_mock_session


@pytest.fixture(autouse=True)
def _isolate_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep provider overrides from the developer's environment out of tests."""
    for var in (
        "OPENAI_MODEL",
        "QWEN_MODEL",
        "DEEPL_API_URL",
        "GOOGLE_TRANSLATE_API_URL",
        "POCKET_TRANSLATOR_PROVIDERS",
        "POCKET_TRANSLATOR_CREDENTIALS",
        "POCKET_TRANSLATOR_SOURCE_LANG",
        "POCKET_TRANSLATOR_TARGET_LANG",
    ):
        monkeypatch.delenv(var, raising=False)
