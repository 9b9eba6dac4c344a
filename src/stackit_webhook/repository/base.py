"""Abstract repositories over the DNS provider's zones and RRSets."""

from abc import ABC, abstractmethod

from stackit_webhook.models import DnsApiConfig, RRSet, Zone


class ZoneRepository(ABC):
    """Read access to the zones of one project."""

    @abstractmethod
    def fetch_zone(self, domain: str) -> Zone:
        """Find the zone owning a domain.

        The zone whose DNS name is the longest suffix of ``domain`` wins.

        Args:
            domain: Fully qualified domain name, trailing dot optional.

        Returns:
            The owning zone.

        Raises:
            ZoneNotFoundError: If no zone in the project owns the domain.
        """
        ...


class ZoneRepositoryFactory(ABC):
    """Builds zone repositories bound to a credential."""

    @abstractmethod
    def new_zone_repository(self, config: DnsApiConfig) -> ZoneRepository:
        """Create a ZoneRepository; performs no I/O."""
        ...


class RRSetRepository(ABC):
    """Read and write access to the RRSets of one zone."""

    @abstractmethod
    def fetch_rrset_for_zone(self, rrset_name: str, zone_id: str, rrset_type: str = "TXT") -> RRSet:
        """Fetch an RRSet by name and type.

        Args:
            rrset_name: Fully qualified record name.
            zone_id: Identifier of the zone holding the RRSet.
            rrset_type: Record type, e.g. "TXT".

        Returns:
            The matching RRSet.

        Raises:
            RRSetNotFoundError: If the zone has no such RRSet.
        """
        ...

    @abstractmethod
    def create_rrset(self, rrset: RRSet) -> None:
        """Create a new RRSet in the zone."""
        ...

    @abstractmethod
    def update_rrset(self, rrset: RRSet) -> None:
        """Replace the records and TTL of an existing RRSet."""
        ...

    @abstractmethod
    def delete_rrset(self, rrset_id: str) -> None:
        """Delete an RRSet.

        Raises:
            RRSetNotFoundError: If the RRSet no longer exists.
        """
        ...


class RRSetRepositoryFactory(ABC):
    """Builds RRSet repositories bound to a credential and zone."""

    @abstractmethod
    def new_rrset_repository(self, config: DnsApiConfig, zone_id: str) -> RRSetRepository:
        """Create an RRSetRepository; performs no I/O."""
        ...
