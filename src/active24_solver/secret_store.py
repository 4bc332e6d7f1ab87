"""Secret stores — read Active24 API credentials referenced by the solver config."""

from __future__ import annotations

import base64
import binascii
import logging
import re
import ssl
from abc import ABC, abstractmethod
from pathlib import Path

import httpx
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from active24_solver.config import AppConfig
from active24_solver.exceptions import SecretMissing

logger = logging.getLogger(__name__)

_SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
_INVALID_KEYVAULT_CHARS = re.compile(r"[^0-9A-Za-z-]")

_credential: DefaultAzureCredential | None = None


def _get_credential() -> DefaultAzureCredential:
    """Return a cached DefaultAzureCredential instance."""
    global _credential
    if _credential is None:
        _credential = DefaultAzureCredential()
    return _credential


class SecretStore(ABC):
    """Read-only access to named secrets holding one or more keys."""

    @abstractmethod
    def get(self, namespace: str, name: str, key: str) -> bytes:
        """Return the value of ``key`` in secret ``name``.

        Raises:
            SecretMissing: If the secret or the key does not exist or cannot be read.
        """

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""


class KubernetesSecretStore(SecretStore):
    """Secrets read from the Kubernetes API with the pod's service account."""

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        ca_file: str | None = None,
        _http_client: httpx.Client | None = None,
    ) -> None:
        if _http_client is None:
            token = token or (_SERVICE_ACCOUNT_DIR / "token").read_text().strip()
            ca_file = ca_file or str(_SERVICE_ACCOUNT_DIR / "ca.crt")
            _http_client = httpx.Client(
                base_url=api_url,
                headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
                verify=ssl.create_default_context(cafile=ca_file),
                timeout=30,
            )
        self._client = _http_client

    def get(self, namespace: str, name: str, key: str) -> bytes:
        logger.debug("Reading secret '%s:%s' in namespace '%s'", name, key, namespace)
        try:
            resp = self._client.get(f"/api/v1/namespaces/{namespace}/secrets/{name}")
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SecretMissing(namespace, name, key, f"HTTP {exc.response.status_code}") from exc
        except httpx.TransportError as exc:
            raise SecretMissing(namespace, name, key, str(exc)) from exc

        data = resp.json().get("data") or {}
        if key not in data:
            raise SecretMissing(namespace, name, key, "key not found in secret data")
        try:
            return base64.b64decode(data[key], validate=True)
        except binascii.Error as exc:
            raise SecretMissing(namespace, name, key, "value is not valid base64") from exc

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()


def keyvault_secret_name(name: str, key: str) -> str:
    """Map a (secret, key) reference to a Key Vault secret name, e.g. ("active24", "apiKey") -> "active24-apiKey"."""
    return _INVALID_KEYVAULT_CHARS.sub("-", f"{name}-{key}")


class KeyVaultSecretStore(SecretStore):
    """Secrets read from Azure Key Vault. The vault itself is the scope; ``namespace`` is only reported."""

    def __init__(
        self,
        vault_url: str,
        credential=None,
        _secret_client: SecretClient | None = None,
    ) -> None:
        self._client = _secret_client or SecretClient(vault_url, credential or _get_credential())

    def get(self, namespace: str, name: str, key: str) -> bytes:
        secret_name = keyvault_secret_name(name, key)
        logger.debug("Reading Key Vault secret '%s'", secret_name)
        try:
            secret = self._client.get_secret(secret_name)
        except ResourceNotFoundError as exc:
            raise SecretMissing(namespace, name, key, f"Key Vault secret '{secret_name}' not found") from exc
        except HttpResponseError as exc:
            raise SecretMissing(namespace, name, key, str(exc.message)) from exc
        if secret.value is None:
            raise SecretMissing(namespace, name, key, f"Key Vault secret '{secret_name}' has no value")
        return secret.value.encode()

    def close(self) -> None:
        self._client.close()


def get_secret_store(config: AppConfig) -> SecretStore:
    """Instantiate the secret store selected by ``SECRET_STORE``."""
    if config.secret_store == "kubernetes":
        return KubernetesSecretStore(api_url=config.kubernetes_api_url)

    if config.secret_store == "keyvault":
        if not config.keyvault_url:
            raise ValueError("AZURE_KEYVAULT_URL is required when SECRET_STORE=keyvault")
        return KeyVaultSecretStore(vault_url=config.keyvault_url)

    raise ValueError(f"Unknown secret store: '{config.secret_store}'")
