# SPDX-License-Identifier: Apache-2.0
"""Tests for AppConfig."""

from __future__ import annotations

from pathlib import Path

import pytest

from pocket_translator.config import AppConfig


class TestAppConfigDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        config = AppConfig()

        assert config.providers == ("DeepL", "Qwen", "OpenAI", "Google")
        assert config.source_lang == "english"
        assert config.target_lang == "chinese"
        assert config.credentials_path == Path("~/.config/pocket-translator/credentials.json")
        assert config.openai_model is None
        assert config.use_environment_keys is True


class TestAppConfigFromEnv:
    """Tests for AppConfig.from_env."""

    def test_without_variables(self, tmp_path: Path) -> None:
        config = AppConfig.from_env(tmp_path / "missing.env")

        assert config == AppConfig()

    def test_reads_variables(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("POCKET_TRANSLATOR_PROVIDERS", " deepl, google ,,")
        monkeypatch.setenv("POCKET_TRANSLATOR_CREDENTIALS", str(tmp_path / "keys.json"))
        monkeypatch.setenv("POCKET_TRANSLATOR_SOURCE_LANG", "chinese")
        monkeypatch.setenv("POCKET_TRANSLATOR_TARGET_LANG", "english")

        config = AppConfig.from_env(tmp_path / "missing.env")

        assert config.providers == ("deepl", "google")
        assert config.credentials_path == tmp_path / "keys.json"
        assert config.source_lang == "chinese"
        assert config.target_lang == "english"

    def test_reads_dotenv_file(self, tmp_path: Path) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text(
            "POCKET_TRANSLATOR_PROVIDERS=Qwen\nPOCKET_TRANSLATOR_TARGET_LANG=japanese\n",
            encoding="utf-8",
        )

        config = AppConfig.from_env(dotenv)

        assert config.providers == ("Qwen",)
        assert config.target_lang == "japanese"

    def test_environment_overrides_dotenv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Variables already set take precedence over the .env file."""
        monkeypatch.setenv("POCKET_TRANSLATOR_PROVIDERS", "Google")
        dotenv = tmp_path / ".env"
        dotenv.write_text("POCKET_TRANSLATOR_PROVIDERS=Qwen\n", encoding="utf-8")

        config = AppConfig.from_env(dotenv)

        assert config.providers == ("Google",)
