"""Kubernetes client construction for solver initialization."""

import httpx
from kubernetes import client

from stackit_webhook._logging import get_logger
from stackit_webhook.exceptions import KubeConfigError
from stackit_webhook.models import KubeClientConfig

logger = get_logger(__name__)


def validate_kube_config(config: KubeClientConfig) -> None:
    """Check a KubeClientConfig for internally inconsistent parameters.

    Args:
        config: The client configuration supplied by the host.

    Raises:
        KubeConfigError: If the rate limit or host settings are unusable.
    """
    if config.rate_limiter is None and config.qps > 0 and config.burst <= 0:
        raise KubeConfigError(
            "burst is required to be greater than 0 when rate_limiter is not set "
            "and qps is set to greater than 0"
        )
    if config.qps < 0:
        raise KubeConfigError(f"qps must not be negative, got {config.qps}")

    try:
        url = httpx.URL(config.host)
    except httpx.InvalidURL as e:
        raise KubeConfigError(f"invalid host {config.host!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise KubeConfigError(f"host must be an http(s) URL, got {config.host!r}")


def new_core_v1_api(config: KubeClientConfig) -> client.CoreV1Api:
    """Build a CoreV1Api client from a validated configuration.

    No request is made; the client only talks to the cluster on first use.

    Args:
        config: The client configuration supplied by the host.

    Returns:
        A CoreV1Api bound to a fresh ApiClient.

    Raises:
        KubeConfigError: If the configuration is inconsistent.
    """
    validate_kube_config(config)

    configuration = client.Configuration()
    configuration.host = config.host.rstrip("/")
    configuration.verify_ssl = config.verify_ssl
    if config.ssl_ca_cert:
        configuration.ssl_ca_cert = config.ssl_ca_cert
    if config.bearer_token:
        configuration.api_key = {"authorization": config.bearer_token}
        configuration.api_key_prefix = {"authorization": "Bearer"}

    logger.debug("Kubernetes client configured", extra={"host": configuration.host})
    return client.CoreV1Api(client.ApiClient(configuration))
