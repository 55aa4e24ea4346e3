# SPDX-License-Identifier: Apache-2.0
"""Qwen translation backend (DashScope OpenAI-compatible mode)."""

from __future__ import annotations

from pocket_translator.translators.openai import OpenAITranslator

DEFAULT_SYSTEM_PROMPT = "You are a professional translator."


class QwenTranslator(OpenAITranslator):
    """Qwen backend.

    DashScope exposes an OpenAI-compatible chat-completion endpoint, so this
    reuses the OpenAI client with a different base URL, model and a system
    message declaring the translator persona.

    Attributes:
        name: Provider identifier ("Qwen").
    """

    PROVIDER = "Qwen"
    DEFAULT_MODEL = "qwen-plus"
    DEFAULT_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    DEFAULT_TIMEOUT = 30.0
    MODEL_ENV_VAR = "QWEN_MODEL"
    ERROR_PREFIX = "Qwen API Error"

    def _build_messages(
        self,
        text: str,
        source_name: str,
        target_name: str,
    ) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": DEFAULT_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Please translate the following text from {source_name} "
                    f"to {target_name}: {text}"
                ),
            },
        ]
