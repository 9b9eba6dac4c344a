"""Kubernetes secret access for the STACKIT API token."""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from kubernetes.client import ApiException

from stackit_webhook._logging import get_logger
from stackit_webhook.exceptions import CredentialResolutionError

if TYPE_CHECKING:
    from kubernetes.client import CoreV1Api

logger = get_logger(__name__)


class SecretFetcher(ABC):
    """Abstract interface for reading credentials out of secrets."""

    @abstractmethod
    def string_from_secret(self, namespace: str, secret_name: str, key: str) -> str:
        """Read a single string value from a secret.

        Args:
            namespace: Namespace of the secret.
            secret_name: Name of the secret.
            key: Data key inside the secret.

        Returns:
            The decoded value.

        Raises:
            CredentialResolutionError: If the secret or key is missing or unreadable.
        """
        ...


class KubeSecretFetcher(SecretFetcher):
    """Reads secret values through the Kubernetes core/v1 API.

    Args:
        core_v1: A configured CoreV1Api client.
    """

    def __init__(self, core_v1: CoreV1Api):
        self._core_v1 = core_v1

    def string_from_secret(self, namespace: str, secret_name: str, key: str) -> str:
        ref = f"{namespace}/{secret_name}"
        try:
            secret = self._core_v1.read_namespaced_secret(secret_name, namespace)
        except ApiException as e:
            if e.status == 404:
                raise CredentialResolutionError(f"secret {ref} not found") from e
            raise CredentialResolutionError(
                f"failed to read secret {ref}: {e.status} {e.reason}"
            ) from e

        data = secret.data or {}
        if key not in data:
            raise CredentialResolutionError(f"key {key!r} not found in secret {ref}")
        try:
            value = base64.b64decode(data[key], validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CredentialResolutionError(
                f"key {key!r} in secret {ref} is not valid base64 text"
            ) from e

        logger.debug("Secret value read", extra={"secret": ref, "key": key})
        return value.strip()
