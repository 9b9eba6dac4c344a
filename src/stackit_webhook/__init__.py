"""STACKIT DNS solver for cert-manager ACME DNS-01 challenges."""

from stackit_webhook.models import ChallengeRequest, KubeClientConfig
from stackit_webhook.resolver import Resolver

__all__ = ["ChallengeRequest", "KubeClientConfig", "Resolver"]
__version__ = "0.1.0"
