"""Decoding of the solver configuration blob."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from stackit_webhook._logging import get_logger
from stackit_webhook.exceptions import ConfigDecodeError
from stackit_webhook.models import StackitDnsProviderConfig

logger = get_logger(__name__)


class ConfigProvider(ABC):
    """Abstract interface for solver config decoders."""

    @abstractmethod
    def load_config(self, raw: bytes | str | Mapping[str, Any] | None) -> StackitDnsProviderConfig:
        """Decode the issuer's solver config.

        Args:
            raw: The opaque config from the challenge request.

        Returns:
            The typed provider configuration.

        Raises:
            ConfigDecodeError: If the config is missing, malformed or incomplete.
        """
        ...


class DefaultConfigProvider(ConfigProvider):
    """Decodes the JSON solver config into a StackitDnsProviderConfig."""

    def load_config(self, raw: bytes | str | Mapping[str, Any] | None) -> StackitDnsProviderConfig:
        if raw is None or (isinstance(raw, (bytes, str)) and not raw.strip()):
            raise ConfigDecodeError("solver config is empty, projectId must be specified")

        try:
            if isinstance(raw, (bytes, str)):
                config = StackitDnsProviderConfig.model_validate_json(raw)
            else:
                config = StackitDnsProviderConfig.model_validate(dict(raw))
        except ValidationError as err:
            raise ConfigDecodeError(f"invalid solver config: {_summarize(err)}") from err

        logger.debug(
            "Solver config decoded",
            extra={"project_id": config.project_id, "api_base_path": config.api_base_path},
        )
        return config


def _summarize(err: ValidationError) -> str:
    """Render pydantic errors as 'field: message' pairs."""
    parts = []
    for error in err.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
