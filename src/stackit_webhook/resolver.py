"""DNS-01 solver for STACKIT DNS."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from stackit_webhook._logging import Timer, challenge_context, get_challenge_extra, get_logger
from stackit_webhook.config import ConfigProvider, DefaultConfigProvider
from stackit_webhook.exceptions import (
    ConfigDecodeError,
    CredentialResolutionError,
    KubeConfigError,
    RRSetLookupError,
    RRSetNotFoundError,
    RRSetWriteError,
    WebhookError,
    ZoneLookupError,
)
from stackit_webhook.kube import new_core_v1_api
from stackit_webhook.models import (
    ChallengeRequest,
    DnsApiConfig,
    KubeClientConfig,
    Record,
    RRSet,
    StackitDnsProviderConfig,
    Zone,
    unquote_txt,
)
from stackit_webhook.repository import (
    RRSetRepository,
    RRSetRepositoryFactory,
    StackitRRSetRepositoryFactory,
    StackitZoneRepositoryFactory,
    ZoneRepositoryFactory,
)
from stackit_webhook.secrets import KubeSecretFetcher, SecretFetcher
from stackit_webhook.solver import Solver

logger = get_logger(__name__)

TXT = "TXT"


@contextmanager
def _stage(error_cls: type[WebhookError], message: str) -> Iterator[None]:
    """Re-raise any failure inside the block as ``error_cls``.

    Errors that already belong to the stage pass through untouched; anything
    else is wrapped, keeping the original message and cause.
    """
    try:
        yield
    except error_cls:
        raise
    except Exception as e:
        raise error_cls(f"{message}: {e}") from e


class Resolver(Solver):
    """Solves DNS-01 challenges by managing TXT RRSets in STACKIT DNS.

    Every call decodes its config, reads the API token and looks up the
    zone afresh; nothing is cached between calls.

    Args:
        http_client: httpx client for the DNS API. Created (and owned) when omitted
            and a default repository factory needs it.
        zone_repository_factory: Builds zone repositories per call.
        rrset_repository_factory: Builds RRSet repositories per call.
        secret_fetcher: Reads the API token. Bound to the cluster on
            initialize() when omitted.
        config_provider: Decodes the solver config blob.
    """

    SOLVER_NAME = "stackit"
    HTTP_TIMEOUT = 30  # seconds

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        zone_repository_factory: ZoneRepositoryFactory | None = None,
        rrset_repository_factory: RRSetRepositoryFactory | None = None,
        secret_fetcher: SecretFetcher | None = None,
        config_provider: ConfigProvider | None = None,
    ):
        needs_http = zone_repository_factory is None or rrset_repository_factory is None
        self._owns_http = http_client is None and needs_http
        if self._owns_http:
            http_client = httpx.Client(timeout=self.HTTP_TIMEOUT)
        self._http = http_client
        self._zone_repository_factory = zone_repository_factory or StackitZoneRepositoryFactory(
            http_client
        )
        self._rrset_repository_factory = rrset_repository_factory or StackitRRSetRepositoryFactory(
            http_client
        )
        self._secret_fetcher = secret_fetcher
        self._config_provider = config_provider or DefaultConfigProvider()

    def close(self) -> None:
        """Close the HTTP client if the resolver created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "Resolver":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # =========================================================================
    # Solver interface
    # =========================================================================

    def name(self) -> str:
        return self.SOLVER_NAME

    def initialize(
        self,
        kube_client_config: KubeClientConfig | None,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Build a Kubernetes client from the host's configuration.

        When no secret fetcher was injected, one is bound to the new client.
        ``stop_event`` is accepted for the host lifecycle; the solver runs
        nothing in the background.

        Raises:
            KubeConfigError: If the configuration is inconsistent.
        """
        config = kube_client_config if kube_client_config is not None else KubeClientConfig()
        with _stage(KubeConfigError, "failed to create kubernetes client"):
            core_v1 = new_core_v1_api(config)

        if self._secret_fetcher is None:
            self._secret_fetcher = KubeSecretFetcher(core_v1)
        logger.info("Solver initialized", extra={"solver": self.SOLVER_NAME, "host": config.host})

    def present(self, request: ChallengeRequest) -> None:
        """Ensure the challenge key is present in the TXT RRSet.

        Creates the RRSet when missing, otherwise adds the key to the
        existing records through an update.

        Raises:
            ConfigDecodeError: If the solver config is unusable.
            CredentialResolutionError: If the API token cannot be read.
            ZoneLookupError: If the owning zone cannot be resolved.
            RRSetLookupError: If the RRSet lookup fails.
            RRSetWriteError: If creating or updating the RRSet fails.
        """
        record_name = request.record_name
        with challenge_context(_challenge_domain(request), record_name):
            with Timer() as t:
                config, zone, repository = self._resolve(request)

                with _stage(RRSetLookupError, f"failed to fetch rrset {record_name}"):
                    try:
                        existing = repository.fetch_rrset_for_zone(record_name, zone.id, TXT)
                    except RRSetNotFoundError:
                        existing = None

                if existing is None:
                    rrset = RRSet(
                        name=record_name,
                        type=TXT,
                        ttl=config.acme_txt_record_ttl,
                        records=[Record(content=request.key)],
                    )
                    with _stage(RRSetWriteError, f"failed to create rrset {record_name}"):
                        repository.create_rrset(rrset)
                    action = "created"
                else:
                    records = list(existing.records)
                    if not _holds_key(records, request.key):
                        records.append(Record(content=request.key))
                    rrset = existing.model_copy(
                        update={"ttl": config.acme_txt_record_ttl, "records": records}
                    )
                    with _stage(RRSetWriteError, f"failed to update rrset {record_name}"):
                        repository.update_rrset(rrset)
                    action = "updated"

            logger.info(
                "Challenge presented",
                extra={
                    **get_challenge_extra(),
                    "zone": zone.dns_name,
                    "action": action,
                    "elapsed_ms": t.elapsed_ms,
                },
            )

    def clean_up(self, request: ChallengeRequest) -> None:
        """Remove the challenge key from the TXT RRSet.

        Deletes the RRSet when the key was its last value. A missing RRSet
        or key is not an error.

        Raises:
            ConfigDecodeError: If the solver config is unusable.
            CredentialResolutionError: If the API token cannot be read.
            ZoneLookupError: If the owning zone cannot be resolved.
            RRSetLookupError: If the RRSet lookup fails.
            RRSetWriteError: If updating or deleting the RRSet fails.
        """
        record_name = request.record_name
        with challenge_context(_challenge_domain(request), record_name):
            _, zone, repository = self._resolve(request)

            with _stage(RRSetLookupError, f"failed to fetch rrset {record_name}"):
                try:
                    existing = repository.fetch_rrset_for_zone(record_name, zone.id, TXT)
                except RRSetNotFoundError:
                    logger.info(
                        "RRSet already absent, nothing to clean up", extra=get_challenge_extra()
                    )
                    return

            if not _holds_key(existing.records, request.key):
                logger.info(
                    "Challenge value already absent, nothing to clean up",
                    extra=get_challenge_extra(),
                )
                return

            remaining = [
                record for record in existing.records if unquote_txt(record.content) != request.key
            ]
            if remaining:
                rrset = existing.model_copy(update={"records": remaining})
                with _stage(RRSetWriteError, f"failed to update rrset {record_name}"):
                    repository.update_rrset(rrset)
            else:
                with _stage(RRSetWriteError, f"failed to delete rrset {record_name}"):
                    if existing.id is None:
                        raise RRSetWriteError(f"cannot delete rrset {record_name} without an id")
                    try:
                        repository.delete_rrset(existing.id)
                    except RRSetNotFoundError:
                        logger.debug("RRSet vanished before delete", extra=get_challenge_extra())

            logger.info(
                "Challenge cleaned up",
                extra={
                    **get_challenge_extra(),
                    "zone": zone.dns_name,
                    "remaining_records": len(remaining),
                },
            )

    # =========================================================================
    # Shared resolution path
    # =========================================================================

    def _resolve(
        self, request: ChallengeRequest
    ) -> tuple[StackitDnsProviderConfig, Zone, RRSetRepository]:
        """Decode config, read the token, find the zone and bind a repository."""
        with _stage(ConfigDecodeError, "failed to decode solver config"):
            config = self._config_provider.load_config(request.config)

        namespace = config.auth_token_secret_namespace or request.resource_namespace
        with _stage(CredentialResolutionError, "failed to fetch auth token"):
            if self._secret_fetcher is None:
                raise CredentialResolutionError("solver is not initialized, no secret fetcher")
            auth_token = self._secret_fetcher.string_from_secret(
                namespace, config.auth_token_secret_ref, config.auth_token_secret_key
            )
        logger.debug(
            "Auth token resolved",
            extra={
                **get_challenge_extra(),
                "secret": f"{namespace}/{config.auth_token_secret_ref}",
            },
        )

        api_config = DnsApiConfig(
            base_url=config.api_base_path,
            project_id=config.project_id,
            auth_token=auth_token,
        )
        zone_repository = self._zone_repository_factory.new_zone_repository(api_config)

        lookup_name = _zone_lookup_name(request)
        with _stage(ZoneLookupError, f"failed to fetch zone for {lookup_name}"):
            zone = zone_repository.fetch_zone(lookup_name)
        logger.debug(
            "Zone resolved",
            extra={**get_challenge_extra(), "zone": zone.dns_name, "zone_id": zone.id},
        )

        repository = self._rrset_repository_factory.new_rrset_repository(api_config, zone.id)
        return config, zone, repository


def _challenge_domain(request: ChallengeRequest) -> str:
    return request.dns_name or request.resolved_zone


def _zone_lookup_name(request: ChallengeRequest) -> str:
    """Name whose owning zone holds the challenge record.

    cert-manager sets ``resolved_zone`` to the zone of ``resolved_fqdn``,
    which differs from the challenge domain once a CNAME was followed.
    Without it, the record name itself is walked up to its zone.
    """
    return request.resolved_zone or request.record_name


def _holds_key(records: list[Record], key: str) -> bool:
    return any(unquote_txt(record.content) == key for record in records)
