"""Shared HTTP client access and low-level connectivity checks."""

from __future__ import annotations

import smtplib
import socket
import ssl

import requests

from .client_config import ClientConfig, get_default_config

_shared_config = get_default_config()
_injected_session: requests.Session | None = None


def get_http_client(config: ClientConfig | None = None) -> requests.Session:
    """Return the injected session, or the one matching config (the shared one if None)."""
    if _injected_session is not None:
        return _injected_session
    if config is None:
        return _shared_config.get_http_client()
    return config.get_http_client()


def inject_http_client(session: requests.Session | None) -> None:
    """Make get_http_client return session; pass None to stop."""
    global _injected_session
    _injected_session = session


def _port_number(port: str) -> int:
    if port.isascii() and port.isdigit():
        return int(port)
    return socket.getservbyname(port)


def _split_host_port(address: str) -> tuple[str, int]:
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"address {address}: missing ']' in address")
        host, rest = address[1:end], address[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError(f"address {address}: missing port in address")
        port = rest[1:]
    else:
        host, separator, port = address.rpartition(":")
        if not separator:
            raise ValueError(f"address {address}: missing port in address")
        if ":" in host:
            raise ValueError(f"address {address}: too many colons in address")
    return host, _port_number(port)


def can_create_tcp_connection(address: str, config: ClientConfig) -> bool:
    """Return whether a TCP connection to host:port can be established."""
    try:
        host, port = _split_host_port(address)
        with socket.create_connection((host, port), timeout=config.timeout):
            return True
    except (OSError, ValueError):
        return False


def can_create_udp_connection(address: str, config: ClientConfig) -> bool:
    """Return whether a UDP socket can be connected to host:port."""
    try:
        host, port = _split_host_port(address)
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_DGRAM
        )[0]
        with socket.socket(family, socktype, proto) as sock:
            sock.settimeout(config.timeout)
            sock.connect(sockaddr)
            return True
    except (OSError, ValueError):
        return False


def _tls_context(insecure: bool) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def can_perform_starttls(address: str, config: ClientConfig) -> bytes:
    """Upgrade an SMTP connection with STARTTLS; return the server certificate (DER).

    Raises ValueError for a malformed address and OSError or smtplib errors on failure.
    """
    parts = address.split(":")
    if len(parts) != 2:
        raise ValueError("invalid address for starttls, format must be host:port")
    host, port = parts
    smtp = smtplib.SMTP(host, _port_number(port), timeout=config.timeout)
    try:
        smtp.starttls(context=_tls_context(config.insecure))
        certificate = smtp.sock.getpeercert(binary_form=True)
    finally:
        smtp.close()
    if not certificate:
        raise ConnectionError("could not get TLS connection state")
    return certificate


def can_perform_tls(address: str, config: ClientConfig) -> bytes:
    """Open a verified TLS connection to host:port; return the server certificate (DER).

    Raises ValueError for a malformed address and OSError on connection or handshake failure.
    """
    host, port = _split_host_port(address)
    context = ssl.create_default_context()
    with socket.create_connection((host, port), timeout=config.timeout) as raw:
        with context.wrap_socket(raw, server_hostname=host) as tls:
            certificate = tls.getpeercert(binary_form=True)
    if not certificate:
        raise ConnectionError("could not get TLS connection state")
    return certificate