"""Configuration of remote instances whose endpoint statuses are retrieved."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .client_config import ClientConfig, get_default_config

logger = logging.getLogger(__name__)


@dataclass
class Instance:
    """A remote instance and the prefix given to its endpoints."""

    endpoint_prefix: str = ""
    url: str = ""


@dataclass
class RemoteConfig:
    """Remote instances to retrieve endpoint statuses from (an alpha feature)."""

    instances: list[Instance] = field(default_factory=list)
    client_config: ClientConfig | None = None

    def validate_and_set_defaults(self) -> None:
        """Validate the client configuration, filling in a default one if missing."""
        if self.client_config is None:
            self.client_config = get_default_config()
        else:
            self.client_config.validate_and_set_defaults()
        if self.instances:
            logger.warning(
                "Your configuration is using 'remote', which is in alpha and may be "
                "updated/removed in future versions."
            )
            logger.warning(
                "This feature is a candidate for removal in future versions."
            )