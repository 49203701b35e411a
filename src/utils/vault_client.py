"""
HashiCorp Vault client for fetching the store connection string

Reads secrets from the KV v2 secrets engine over its HTTP API.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_STORE_SECRET_PATH = "secret/database/mongodb"
_SAFE_PATH = re.compile(r"^[a-zA-Z0-9/_-]+$")


class VaultClient:
    """
    HashiCorp Vault client for secrets management

    Uses the KV v2 secrets engine.
    """

    def __init__(
        self,
        vault_addr: Optional[str] = None,
        vault_token: Optional[str] = None,
        namespace: Optional[str] = None,
        timeout: float = 10,
    ):
        """
        Initialize Vault client

        Args:
            vault_addr: Vault server address (default: VAULT_ADDR env var)
            vault_token: Vault token (default: VAULT_TOKEN env var)
            namespace: Vault Enterprise namespace (optional)
            timeout: HTTP timeout in seconds

        Raises:
            ValueError: If the address or token is missing
        """
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_token = vault_token or os.getenv("VAULT_TOKEN")
        self.namespace = namespace
        self.timeout = timeout

        if not self.vault_addr:
            raise ValueError(
                "Vault address not provided. Set VAULT_ADDR or pass vault_addr."
            )
        if not self.vault_token:
            raise ValueError(
                "Vault token not provided. Set VAULT_TOKEN or pass vault_token."
            )

        self.vault_addr = self.vault_addr.rstrip("/")
        self.headers = {
            "X-Vault-Token": self.vault_token,
            "Content-Type": "application/json",
        }
        if self.namespace:
            self.headers["X-Vault-Namespace"] = self.namespace

    @staticmethod
    def _kv2_path(secret_path: str) -> str:
        """
        Validate a secret path and insert the KV v2 ``data`` segment.

        Raises:
            ValueError: If the path is empty, traverses, or has unsafe characters
        """
        if not secret_path or ".." in secret_path or secret_path.startswith("/"):
            raise ValueError(f"Invalid secret_path: {secret_path!r}")
        if not _SAFE_PATH.match(secret_path):
            raise ValueError(
                f"Invalid secret_path: {secret_path!r}. Only alphanumeric characters, "
                "slashes, underscores and hyphens are allowed."
            )
        if "/data/" in secret_path:
            return secret_path
        mount, _, rest = secret_path.partition("/")
        return f"{mount}/data/{rest}" if rest else f"{mount}/data"

    def get_secret(self, secret_path: str) -> Dict[str, Any]:
        """
        Fetch a secret from the KV v2 engine

        Args:
            secret_path: Path to the secret (e.g. "secret/database/mongodb")

        Returns:
            The secret's key/value data

        Raises:
            ValueError: If the path is invalid or the secret is missing/empty
            requests.RequestException: If the Vault request fails
        """
        path = self._kv2_path(secret_path)
        url = f"{self.vault_addr}/v1/{path}"

        logger.debug(f"Fetching secret from {url}")
        response = requests.get(url, headers=self.headers, timeout=self.timeout)

        if response.status_code == 404:
            raise ValueError(f"Secret not found at path: {path}")
        response.raise_for_status()

        secret_data = response.json().get("data", {}).get("data", {})
        if not secret_data:
            raise ValueError(f"No data found in secret at path: {path}")

        return secret_data

    def get_store_connection_string(self, secret_path: str = DEFAULT_STORE_SECRET_PATH) -> str:
        """
        Fetch the MongoDB connection string

        The secret must hold a ``connection_string`` field.

        Raises:
            ValueError: If the field is missing
        """
        secret_data = self.get_secret(secret_path)
        connection_string = secret_data.get("connection_string")
        if not connection_string:
            raise ValueError(f"Secret {secret_path} has no connection_string field")

        logger.info("Fetched store connection string from Vault")
        return connection_string
