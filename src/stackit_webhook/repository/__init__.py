"""Zone and RRSet repositories for the STACKIT DNS API."""

from stackit_webhook.repository.base import (
    RRSetRepository,
    RRSetRepositoryFactory,
    ZoneRepository,
    ZoneRepositoryFactory,
)
from stackit_webhook.repository.rrset import StackitRRSetRepository, StackitRRSetRepositoryFactory
from stackit_webhook.repository.zone import StackitZoneRepository, StackitZoneRepositoryFactory

__all__ = [
    "RRSetRepository",
    "RRSetRepositoryFactory",
    "StackitRRSetRepository",
    "StackitRRSetRepositoryFactory",
    "StackitZoneRepository",
    "StackitZoneRepositoryFactory",
    "ZoneRepository",
    "ZoneRepositoryFactory",
]
