# SPDX-License-Identifier: Apache-2.0
"""API key storage.

One secret string is kept per provider name. The default store encrypts each
secret at rest with a key bound to the current machine; an in-memory store is
provided for tests and for hosts that manage secrets themselves.
"""

from __future__ import annotations

import base64
import json
import logging
import os
import platform
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1

# Provider name -> environment variable holding its key
DEFAULT_ENV_VARS: dict[str, str] = {
    "OpenAI": "OPENAI_API_KEY",
    "Qwen": "DASHSCOPE_API_KEY",
    "DeepL": "DEEPL_API_KEY",
    "Google": "GOOGLE_API_KEY",
}


class CredentialStoreError(Exception):
    """Credential persistence failure.

    Messages name the provider, never the secret.
    """


class CredentialNotFoundError(CredentialStoreError):
    """No secret is stored for the provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"No API key stored for {provider}")
        self.provider = provider


@runtime_checkable
class CredentialStore(Protocol):
    """Key-value store of one secret per provider name."""

    def get(self, provider: str) -> str:
        """Return the secret for ``provider``.

        Raises:
            CredentialNotFoundError: If nothing is stored.
            CredentialStoreError: On any other read failure.
        """
        ...

    def save(self, provider: str, secret: str) -> None:
        """Persist ``secret``, replacing any previous value.

        Raises:
            CredentialStoreError: If the secret cannot be persisted.
        """
        ...


class MemoryCredentialStore:
    """Credential store kept in process memory."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._secrets: dict[str, str] = dict(initial or {})

    def get(self, provider: str) -> str:
        try:
            return self._secrets[provider]
        except KeyError:
            raise CredentialNotFoundError(provider) from None

    def save(self, provider: str, secret: str) -> None:
        self._secrets[provider] = secret


class EnvironmentCredentialStore:
    """Read-only store backed by environment variables."""

    def __init__(
        self,
        env_vars: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._env_vars = dict(env_vars or DEFAULT_ENV_VARS)
        self._environ = environ if environ is not None else os.environ

    def get(self, provider: str) -> str:
        env_var = self._env_vars.get(provider, f"{provider.upper()}_API_KEY")
        value = self._environ.get(env_var)
        if not value:
            raise CredentialNotFoundError(provider)
        return value

    def save(self, provider: str, secret: str) -> None:
        raise CredentialStoreError(
            f"Environment credentials are read-only; cannot save {provider} API key"
        )


class ChainedCredentialStore:
    """Consult several stores in order; save to the first one.

    An empty secret counts as not configured, so a blank saved key does not
    hide a key further down the chain.
    """

    def __init__(self, primary: CredentialStore, *fallbacks: CredentialStore) -> None:
        self._stores: tuple[CredentialStore, ...] = (primary, *fallbacks)

    def get(self, provider: str) -> str:
        for store in self._stores:
            try:
                secret = store.get(provider)
            except CredentialNotFoundError:
                continue
            if secret.strip():
                return secret
        raise CredentialNotFoundError(provider)

    def save(self, provider: str, secret: str) -> None:
        self._stores[0].save(provider, secret)


def _get_machine_id() -> str:
    """Best-effort stable identifier of this machine."""
    for candidate in ("/etc/machine-id", "/var/lib/dbus/machine-id"):
        try:
            machine_id = Path(candidate).read_text(encoding="utf-8").strip()
        except OSError:
            continue
        if machine_id:
            return machine_id

    if platform.system() == "Windows":
        try:
            import winreg

            registry = winreg.ConnectRegistry(None, winreg.HKEY_LOCAL_MACHINE)
            key = winreg.OpenKey(registry, r"SOFTWARE\Microsoft\Cryptography")
            machine_guid = winreg.QueryValueEx(key, "MachineGuid")[0]
            winreg.CloseKey(key)
            return str(machine_guid)
        except OSError:
            pass

    return platform.node() + platform.machine()


def _derive_key(machine_id: str, salt: bytes) -> bytes:
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        info=b"pocket-translator-credentials",
    )
    return base64.urlsafe_b64encode(hkdf.derive(machine_id.encode("utf-8")))


class EncryptedFileCredentialStore:
    """Credential store encrypted at rest in a JSON file.

    File layout::

        {"version": 1, "salt": "<b64>", "credentials": {"DeepL": "<fernet token>"}}

    The Fernet key is derived from a machine identifier and the file's salt,
    so a copied file cannot be decrypted elsewhere.
    """

    def __init__(self, path: Path | str, machine_id: str | None = None) -> None:
        self._path = Path(path).expanduser()
        self._machine_id = machine_id if machine_id is not None else _get_machine_id()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, provider: str) -> str:
        data = self._read()
        token = data["credentials"].get(provider)
        if token is None:
            raise CredentialNotFoundError(provider)
        if not isinstance(token, str):
            raise CredentialStoreError(f"Malformed {provider} entry in {self._path}")

        fernet = self._fernet(data["salt"])
        try:
            return fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            raise CredentialStoreError(
                f"Stored {provider} API key could not be decrypted"
            ) from e

    def save(self, provider: str, secret: str) -> None:
        with self._lock:
            data = self._read()
            fernet = self._fernet(data["salt"])
            data["credentials"][provider] = fernet.encrypt(
                secret.encode("utf-8")
            ).decode("ascii")
            self._write(data)
        logger.info("Saved %s API key to %s", provider, self._path)

    def _fernet(self, salt_b64: str) -> Fernet:
        try:
            salt = base64.urlsafe_b64decode(salt_b64.encode("ascii"))
        except ValueError as e:
            raise CredentialStoreError(f"Malformed credential file {self._path}") from e
        return Fernet(_derive_key(self._machine_id, salt))

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {
                "version": STORE_FORMAT_VERSION,
                "salt": base64.urlsafe_b64encode(os.urandom(16)).decode("ascii"),
                "credentials": {},
            }

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CredentialStoreError(
                f"Failed to read credential file {self._path}: {e}"
            ) from e

        if (
            not isinstance(data, dict)
            or not isinstance(data.get("salt"), str)
            or not isinstance(data.get("credentials"), dict)
        ):
            raise CredentialStoreError(f"Malformed credential file {self._path}")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".credentials-", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CredentialStoreError(
                f"Failed to write credential file {self._path}: {e}"
            ) from e
