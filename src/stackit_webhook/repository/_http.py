"""Shared HTTP helpers for the STACKIT DNS API repositories."""

import httpx

from stackit_webhook._logging import get_logger
from stackit_webhook.exceptions import DnsApiError
from stackit_webhook.models import DnsApiConfig

logger = get_logger(__name__)


def auth_headers(config: DnsApiConfig) -> dict[str, str]:
    """Build request headers for an authenticated API call."""
    return {
        "Authorization": f"Bearer {config.auth_token}",
        "Accept": "application/json",
    }


def project_url(config: DnsApiConfig, path: str) -> str:
    """Join a project-relative path onto the API base URL."""
    return f"{config.base_url.rstrip('/')}/v1/projects/{config.project_id}/{path.lstrip('/')}"


def handle_response(response: httpx.Response, resource: str) -> None:
    """Handle STACKIT DNS API response status codes.

    Args:
        response: The httpx Response object.
        resource: What was being accessed (for log records).

    Raises:
        DnsApiError: For any non-2xx status.
    """
    if response.is_success:
        logger.debug(
            "DNS API request successful",
            extra={"resource": resource, "status_code": response.status_code},
        )
        return

    error = DnsApiError.from_response(response)
    logger.error(
        "DNS API error",
        extra={"resource": resource, "status_code": error.status_code, "detail": error.detail},
    )
    raise error
