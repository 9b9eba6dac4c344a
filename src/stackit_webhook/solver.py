"""Host-facing interface of a DNS-01 challenge solver."""

import threading
from abc import ABC, abstractmethod

from stackit_webhook.models import ChallengeRequest, KubeClientConfig


class Solver(ABC):
    """Abstract base class for cert-manager webhook solvers.

    The webhook host routes each challenge to the solver whose ``name()``
    matches the issuer's ``solverName``.
    """

    @abstractmethod
    def name(self) -> str:
        """Return the solver name used for request routing."""
        ...

    @abstractmethod
    def initialize(
        self, kube_client_config: KubeClientConfig, stop_event: threading.Event | None = None
    ) -> None:
        """Prepare the solver for use when the webhook starts.

        Args:
            kube_client_config: Configuration for reaching the Kubernetes API.
            stop_event: Set by the host on shutdown.

        Raises:
            KubeConfigError: If the configuration cannot produce a client.
        """
        ...

    @abstractmethod
    def present(self, request: ChallengeRequest) -> None:
        """Make the challenge TXT record resolvable.

        Must be idempotent: presenting the same challenge twice is not an error.

        Args:
            request: The challenge to present.
        """
        ...

    @abstractmethod
    def clean_up(self, request: ChallengeRequest) -> None:
        """Remove the value added by present().

        Values belonging to other challenges on the same record stay in place.

        Args:
            request: The challenge to clean up.
        """
        ...
