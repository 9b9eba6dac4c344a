"""Pydantic models for challenge requests, solver config and DNS resources."""

from typing import Any

from pydantic import BaseModel, Field

# =============================================================================
# Constants
# =============================================================================

ACME_CHALLENGE_PREFIX = "_acme-challenge"
DEFAULT_API_BASE_PATH = "https://dns.api.stackit.cloud"
DEFAULT_AUTH_TOKEN_SECRET_REF = "stackit-cert-manager-webhook"
DEFAULT_AUTH_TOKEN_SECRET_KEY = "auth-token"
DEFAULT_TXT_RECORD_TTL = 600


def normalize_name(name: str) -> str:
    """Return a DNS name in canonical form (lowercase, no trailing dot)."""
    return name.rstrip(".").lower()


# =============================================================================
# Host-facing models
# =============================================================================


class ChallengeRequest(BaseModel):
    """A DNS-01 challenge handed to the solver by cert-manager.

    Mirrors the fields of cert-manager's ``ChallengeRequest``. ``config``
    is the opaque solver configuration from the issuer, either raw JSON
    or an already parsed mapping.
    """

    uid: str = ""
    action: str = ""
    type: str = "dns-01"
    dns_name: str = Field(default="", alias="dnsName")
    key: str = ""
    resource_namespace: str = Field(default="", alias="resourceNamespace")
    resolved_fqdn: str = Field(default="", alias="resolvedFQDN")
    resolved_zone: str = Field(default="", alias="resolvedZone")
    allow_ambient_credentials: bool = Field(default=False, alias="allowAmbientCredentials")
    config: bytes | str | dict[str, Any] | None = None

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def record_name(self) -> str:
        """Fully qualified name of the challenge TXT record (with trailing dot)."""
        if self.resolved_fqdn:
            return self.resolved_fqdn.rstrip(".") + "."
        return f"{ACME_CHALLENGE_PREFIX}.{self.dns_name.rstrip('.')}."


class StackitDnsProviderConfig(BaseModel):
    """Decoded solver configuration for the STACKIT DNS provider."""

    project_id: str = Field(alias="projectId", min_length=1)
    api_base_path: str = Field(default=DEFAULT_API_BASE_PATH, alias="apiBasePath")
    auth_token_secret_ref: str = Field(
        default=DEFAULT_AUTH_TOKEN_SECRET_REF, alias="authTokenSecretRef", min_length=1
    )
    auth_token_secret_key: str = Field(
        default=DEFAULT_AUTH_TOKEN_SECRET_KEY, alias="authTokenSecretKey", min_length=1
    )
    auth_token_secret_namespace: str | None = Field(
        default=None, alias="authTokenSecretNamespace"
    )
    acme_txt_record_ttl: int = Field(default=DEFAULT_TXT_RECORD_TTL, alias="acmeTxtRecordTTL", gt=0)

    model_config = {"populate_by_name": True}


class KubeClientConfig(BaseModel):
    """Kubernetes client parameters passed to the solver on initialize.

    ``qps`` and ``burst`` describe the client-side rate limit; a custom
    ``rate_limiter`` replaces them entirely.
    """

    host: str = "http://localhost"
    bearer_token: str | None = None
    ssl_ca_cert: str | None = None
    verify_ssl: bool = True
    qps: float = 0
    burst: int = 0
    rate_limiter: Any = None


# =============================================================================
# STACKIT DNS resources
# =============================================================================


class DnsApiConfig(BaseModel):
    """Credential and endpoint for one solver call against the DNS API."""

    base_url: str
    project_id: str
    auth_token: str = Field(repr=False)


class Zone(BaseModel):
    """STACKIT DNS zone."""

    id: str
    dns_name: str = Field(alias="dnsName")
    name: str | None = None
    state: str | None = None
    active: bool | None = None

    model_config = {"populate_by_name": True}


class Record(BaseModel):
    """A single value inside an RRSet."""

    content: str
    id: str | None = None


class RRSet(BaseModel):
    """STACKIT DNS resource record set."""

    name: str
    type: str = "TXT"
    ttl: int = DEFAULT_TXT_RECORD_TTL
    records: list[Record] = Field(default_factory=list)
    id: str | None = None
    state: str | None = None

    def contents(self) -> list[str]:
        """Record values with TXT quoting removed."""
        return [unquote_txt(record.content) for record in self.records]


def unquote_txt(value: str) -> str:
    """Strip the double quotes DNS servers put around TXT values."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value
