# SPDX-License-Identifier: Apache-2.0
"""Request and outcome data classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pocket_translator.translators.base import ErrorKind, TranslatorError


@dataclass(frozen=True)
class TranslationRequest:
    """One text to translate, built per aggregation round."""

    text: str
    source_lang: str
    target_lang: str

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValueError("Text to translate must not be empty")


@dataclass(frozen=True)
class TranslationOutcome:
    """Result of one provider for one request.

    Exactly one of ``text`` (success) and ``error`` (failure) is meaningful.
    """

    provider: str
    text: str = ""
    error: TranslatorError | None = None

    @classmethod
    def success(cls, provider: str, text: str) -> TranslationOutcome:
        return cls(provider=provider, text=text)

    @classmethod
    def failure(cls, provider: str, error: TranslatorError) -> TranslationOutcome:
        return cls(provider=provider, text=str(error), error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def kind(self) -> ErrorKind | None:
        """Error kind, or None on success."""
        return self.error.kind if self.error is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Presentation record: provider, text (or error message), is_error."""
        return {
            "provider": self.provider,
            "text": self.text,
            "is_error": self.is_error,
        }
