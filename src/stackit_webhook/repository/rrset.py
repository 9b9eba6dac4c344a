"""STACKIT DNS RRSet repository."""

import httpx

from stackit_webhook._logging import get_logger
from stackit_webhook.exceptions import DnsApiError, RRSetNotFoundError
from stackit_webhook.models import DnsApiConfig, RRSet, normalize_name
from stackit_webhook.repository._http import auth_headers, handle_response, project_url
from stackit_webhook.repository.base import RRSetRepository, RRSetRepositoryFactory

logger = get_logger(__name__)


class StackitRRSetRepository(RRSetRepository):
    """RRSet CRUD within one zone of the STACKIT DNS API.

    Args:
        http_client: Shared httpx client used for requests.
        config: Endpoint, project and token for this call.
        zone_id: Identifier of the zone this repository writes to.
    """

    def __init__(self, http_client: httpx.Client, config: DnsApiConfig, zone_id: str):
        self._http = http_client
        self.config = config
        self.zone_id = zone_id

    def _url(self, path: str = "") -> str:
        base = f"zones/{self.zone_id}/rrsets"
        return project_url(self.config, f"{base}/{path}" if path else base)

    def fetch_rrset_for_zone(self, rrset_name: str, zone_id: str, rrset_type: str = "TXT") -> RRSet:
        response = self._http.get(
            project_url(self.config, f"zones/{zone_id}/rrsets"),
            params={"name[eq]": rrset_name, "type[eq]": rrset_type},
            headers=auth_headers(self.config),
        )
        handle_response(response, f"rrsets?name={rrset_name}")

        wanted = normalize_name(rrset_name)
        for item in response.json().get("rrSets") or []:
            rrset = RRSet.model_validate(item)
            if normalize_name(rrset.name) == wanted and rrset.type == rrset_type:
                return rrset

        raise RRSetNotFoundError(f"rrset {rrset_name} ({rrset_type}) not found in zone {zone_id}")

    def create_rrset(self, rrset: RRSet) -> None:
        payload = {
            "name": rrset.name,
            "type": rrset.type,
            "ttl": rrset.ttl,
            "records": [{"content": record.content} for record in rrset.records],
        }
        response = self._http.post(self._url(), json=payload, headers=auth_headers(self.config))
        handle_response(response, f"rrset {rrset.name}")
        logger.info(
            "RRSet created",
            extra={
                "zone_id": self.zone_id,
                "record_name": rrset.name,
                "records": len(rrset.records),
            },
        )

    def update_rrset(self, rrset: RRSet) -> None:
        if not rrset.id:
            raise ValueError(f"cannot update rrset {rrset.name} without an id")

        payload = {
            "ttl": rrset.ttl,
            "records": [{"content": record.content} for record in rrset.records],
        }
        response = self._http.patch(
            self._url(rrset.id), json=payload, headers=auth_headers(self.config)
        )
        handle_response(response, f"rrset {rrset.id}")
        logger.info(
            "RRSet updated",
            extra={
                "zone_id": self.zone_id,
                "record_name": rrset.name,
                "records": len(rrset.records),
            },
        )

    def delete_rrset(self, rrset_id: str) -> None:
        response = self._http.delete(self._url(rrset_id), headers=auth_headers(self.config))
        try:
            handle_response(response, f"rrset {rrset_id}")
        except DnsApiError as e:
            if e.status_code == 404:
                raise RRSetNotFoundError(
                    f"rrset {rrset_id} not found in zone {self.zone_id}"
                ) from e
            raise
        logger.info("RRSet deleted", extra={"zone_id": self.zone_id, "rrset_id": rrset_id})


class StackitRRSetRepositoryFactory(RRSetRepositoryFactory):
    """Creates StackitRRSetRepository instances sharing one httpx client."""

    def __init__(self, http_client: httpx.Client):
        self._http = http_client

    def new_rrset_repository(self, config: DnsApiConfig, zone_id: str) -> RRSetRepository:
        return StackitRRSetRepository(self._http, config, zone_id)
