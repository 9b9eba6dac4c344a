"""Solver and STACKIT DNS API exceptions."""

from typing import Any

import httpx


class WebhookError(Exception):
    """Base exception for challenge solving errors.

    Subclasses set ``stage`` to the step of a present/clean-up call
    that failed, so callers can tell where a challenge broke off.
    """

    stage: str | None = None


class ConfigDecodeError(WebhookError):
    """The solver config blob could not be decoded."""

    stage = "decode_config"


class CredentialResolutionError(WebhookError):
    """The API token could not be read from its Kubernetes secret."""

    stage = "resolve_credential"


class ZoneLookupError(WebhookError):
    """The zone owning the challenge domain could not be resolved."""

    stage = "resolve_zone"


class ZoneNotFoundError(ZoneLookupError):
    """No zone registered in the project owns the domain."""

    pass


class RRSetLookupError(WebhookError):
    """The challenge RRSet could not be fetched."""

    stage = "check_rrset"


class RRSetNotFoundError(RRSetLookupError):
    """The challenge RRSet does not exist in the zone."""

    pass


class RRSetWriteError(WebhookError):
    """Creating, updating or deleting the challenge RRSet failed."""

    stage = "write_rrset"


class KubeConfigError(WebhookError):
    """The Kubernetes client configuration is unusable."""

    stage = "initialize"


class DnsApiError(WebhookError):
    """Error response returned by the STACKIT DNS API."""

    _status_messages = {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        409: "Conflict",
        500: "Server Error",
    }

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        label = self._status_messages.get(status_code, f"Unexpected error ({status_code})")
        super().__init__(f"{label}: {detail}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "DnsApiError":
        """Create a DnsApiError from an API error response.

        The STACKIT API reports failures as ``{"error": ..., "message": ...}``;
        the message is preferred, falling back to the raw body.

        Args:
            response: The failed httpx Response.

        Returns:
            DnsApiError instance.
        """
        try:
            data: Any = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            detail = data.get("message") or data.get("error") or response.text
        else:
            detail = response.text or "Unknown error"

        return cls(status_code=response.status_code, detail=str(detail))
