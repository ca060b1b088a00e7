"""Configuration of the web server that serves the status page."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 8080
_MAX_PORT = 65535


@dataclass
class WebConfig:
    """Address and port the web server listens on."""

    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT

    def validate_and_set_defaults(self) -> None:
        """Fill in defaults; raise ValueError if the port is out of range."""
        if not self.address:
            self.address = DEFAULT_ADDRESS
        if self.port == 0:
            self.port = DEFAULT_PORT
        elif not 0 <= self.port <= _MAX_PORT:
            raise ValueError(f"invalid port: value should be between 0 and {_MAX_PORT}")

    def socket_address(self) -> str:
        return f"{self.address}:{self.port}"


def get_default_config() -> WebConfig:
    """Return a configuration holding the default address and port."""
    return WebConfig()