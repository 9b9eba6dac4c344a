"""STACKIT DNS zone repository."""

import httpx

from stackit_webhook._logging import get_logger
from stackit_webhook.exceptions import ZoneNotFoundError
from stackit_webhook.models import DnsApiConfig, Zone, normalize_name
from stackit_webhook.repository._http import auth_headers, handle_response, project_url
from stackit_webhook.repository.base import ZoneRepository, ZoneRepositoryFactory

logger = get_logger(__name__)


class StackitZoneRepository(ZoneRepository):
    """Zone lookups against the STACKIT DNS API.

    Args:
        http_client: Shared httpx client used for requests.
        config: Endpoint, project and token for this call.
    """

    def __init__(self, http_client: httpx.Client, config: DnsApiConfig):
        self._http = http_client
        self.config = config

    def fetch_zone(self, domain: str) -> Zone:
        """Find the apex zone containing the given domain.

        Iterates through domain parts from most specific to least and asks
        the API for an active zone with exactly that DNS name, so the
        longest registered suffix wins.

        Args:
            domain: The full domain name to find the zone for.

        Returns:
            The owning zone.

        Raises:
            ZoneNotFoundError: If no matching zone is found.
            DnsApiError: If the API rejects a lookup.
        """
        domain = normalize_name(domain)

        parts = domain.split(".")
        for i in range(len(parts)):
            candidate = ".".join(parts[i:])

            logger.debug(
                "Trying zone candidate",
                extra={"domain": domain, "candidate": candidate},
            )

            zone = self._find_active_zone(candidate)
            if zone is not None:
                logger.debug(
                    "Zone found",
                    extra={"domain": domain, "zone": zone.dns_name, "zone_id": zone.id},
                )
                return zone

        raise ZoneNotFoundError(
            f"no zone found for domain {domain} in project {self.config.project_id}"
        )

    def _find_active_zone(self, dns_name: str) -> Zone | None:
        response = self._http.get(
            project_url(self.config, "zones"),
            params={"dnsName[eq]": dns_name, "active[eq]": "true"},
            headers=auth_headers(self.config),
        )
        handle_response(response, f"zones?dnsName={dns_name}")

        for item in response.json().get("zones") or []:
            zone = Zone.model_validate(item)
            if normalize_name(zone.dns_name) == dns_name:
                return zone
        return None


class StackitZoneRepositoryFactory(ZoneRepositoryFactory):
    """Creates StackitZoneRepository instances sharing one httpx client."""

    def __init__(self, http_client: httpx.Client):
        self._http = http_client

    def new_zone_repository(self, config: DnsApiConfig) -> ZoneRepository:
        return StackitZoneRepository(self._http, config)
