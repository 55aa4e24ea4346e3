# SPDX-License-Identifier: Apache-2.0
"""
Pocket Translator - CLI Tool

Translates a text with every configured provider at once and prints the
results side by side. Also manages the providers' API keys.

Usage:
    pocket-translate translate <text> [options]
    pocket-translate keys set <provider>
    pocket-translate keys list

Examples:
    pocket-translate translate "Hello, world"                # English -> Chinese
    pocket-translate translate "你好" -s chinese -t english
    pocket-translate translate "Hello" -p deepl -p google    # Subset of providers
    echo "Hello" | pocket-translate translate -              # Text from stdin
    pocket-translate keys set DeepL
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from typing import NoReturn

from pocket_translator.app import PocketTranslator, create_credential_store
from pocket_translator.config import AppConfig
from pocket_translator.credentials import CredentialNotFoundError, CredentialStoreError
from pocket_translator.models import TranslationOutcome
from pocket_translator.translators import TRANSLATOR_CLASSES, get_translator_class

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (default: ``sys.argv[1:]``).

    Returns:
        Parsed argument Namespace.
    """
    providers = ", ".join(TRANSLATOR_CLASSES)
    parser = argparse.ArgumentParser(
        prog="pocket-translate",
        description="Compare translations from several providers side by side",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Providers: {providers}

Environment Variables:
  OPENAI_API_KEY      OpenAI API key (fallback when none is saved)
  DASHSCOPE_API_KEY   Qwen (DashScope) API key
  DEEPL_API_KEY       DeepL API key
  GOOGLE_API_KEY      Google Cloud Translation API key
  OPENAI_MODEL        OpenAI model (default: gpt-4o)
  QWEN_MODEL          Qwen model (default: qwen-plus)
  DEEPL_API_URL       DeepL endpoint (for Pro users)
""",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # translate
    translate_parser = subparsers.add_parser(
        "translate",
        help="Translate a text with every configured provider",
    )
    translate_parser.add_argument(
        "text",
        nargs="?",
        default="-",
        help="Text to translate ('-' or omitted: read from stdin)",
    )
    translate_parser.add_argument(
        "-s",
        "--source",
        help="Source language (default: english)",
    )
    translate_parser.add_argument(
        "-t",
        "--target",
        help="Target language (default: chinese)",
    )
    translate_parser.add_argument(
        "--swap",
        action="store_true",
        help="Swap source and target languages",
    )
    translate_parser.add_argument(
        "-p",
        "--provider",
        dest="providers",
        action="append",
        metavar="PROVIDER",
        help="Provider to use (repeatable; default: all configured)",
    )
    translate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as a JSON array",
    )

    # keys
    keys_parser = subparsers.add_parser("keys", help="Manage provider API keys")
    keys_subparsers = keys_parser.add_subparsers(dest="keys_command", required=True)

    set_parser = keys_subparsers.add_parser("set", help="Save a provider API key")
    set_parser.add_argument("provider", help=f"Provider name ({providers})")
    set_parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the key from stdin instead of prompting",
    )

    keys_subparsers.add_parser("list", help="Show which providers have a key")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Apply command line overrides to the environment configuration.

    Raises:
        ValueError: If a provider name is unknown.
    """
    config = AppConfig.from_env()

    if getattr(args, "providers", None):
        names = tuple(get_translator_class(name).PROVIDER for name in args.providers)
        config = replace(config, providers=tuple(dict.fromkeys(names)))

    source = getattr(args, "source", None) or config.source_lang
    target = getattr(args, "target", None) or config.target_lang
    if getattr(args, "swap", False):
        source, target = target, source
    return replace(config, source_lang=source, target_lang=target)


def format_outcome(outcome: TranslationOutcome) -> str:
    """Render one outcome as a text block."""
    header = f"[{outcome.provider}]"
    if outcome.is_error:
        header += " (error)"
    return f"{header}\n{outcome.text}"


def mask_secret(secret: str) -> str:
    """Show at most the last four characters of a secret."""
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{'*' * 8}{secret[-4:]}"


def _read_text(text: str) -> str:
    if text == "-":
        return sys.stdin.read()
    return text


async def run_translate(args: argparse.Namespace) -> int:
    """Execute one translation round.

    Args:
        args: Command line arguments.

    Returns:
        Exit code (0: at least one provider succeeded, 1: otherwise).
    """
    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = _read_text(args.text).strip()
    if not text:
        print("Error: Nothing to translate", file=sys.stderr)
        return 1

    try:
        app = PocketTranslator(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    async with app as translator:
        outcomes = await translator.submit(text, config.source_lang, config.target_lang)

    if args.json:
        print(json.dumps([o.to_dict() for o in outcomes], ensure_ascii=False, indent=2))
    else:
        print(f"Translation: {config.source_lang} -> {config.target_lang}")
        for outcome in outcomes:
            print()
            print(format_outcome(outcome))

    return 0 if any(not o.is_error for o in outcomes) else 1


def run_keys_set(args: argparse.Namespace) -> int:
    """Save one provider's API key."""
    try:
        provider = get_translator_class(args.provider).PROVIDER
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.stdin:
        secret = sys.stdin.readline().strip()
    else:
        secret = getpass.getpass(f"{provider} API key: ").strip()

    store = create_credential_store(AppConfig.from_env())
    try:
        store.save(provider, secret)
    except CredentialStoreError as e:
        print(f"Error: Failed to save settings: {e}", file=sys.stderr)
        return 1

    print(f"Saved {provider} API key")
    return 0


def run_keys_list(args: argparse.Namespace) -> int:
    """Print every provider with its (masked) key status."""
    config = AppConfig.from_env()
    store = create_credential_store(config)
    exit_code = 0
    for provider in TRANSLATOR_CLASSES:
        try:
            status = mask_secret(store.get(provider))
        except CredentialNotFoundError:
            status = "not configured"
        except CredentialStoreError as e:
            status = f"unreadable ({e})"
            exit_code = 1
        print(f"{provider:<8} {status}")
    return exit_code


def main() -> NoReturn:
    """Main entry point."""
    args = parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if args.command == "translate":
        exit_code = asyncio.run(run_translate(args))
    elif args.keys_command == "set":
        exit_code = run_keys_set(args)
    else:
        exit_code = run_keys_list(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
