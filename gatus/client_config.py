"""Configuration of the HTTP clients used to reach endpoints and alert providers."""

from __future__ import annotations

import ipaddress
import logging
import random
import re
import socket
import struct
import threading
import time
from dataclasses import dataclass, field
from urllib.parse import quote_plus

import requests
from requests.adapters import HTTPAdapter
from requests.auth import AuthBase, HTTPBasicAuth

logger = logging.getLogger(__name__)

_DEFAULT_HTTP_TIMEOUT = 10.0
_MINIMUM_TIMEOUT = 0.001
_DNS_TIMEOUT = 5.0
_TOKEN_EXPIRY_MARGIN = 10.0

_DNS_RESOLVER_PATTERN = re.compile(
    r"^(?P<proto>(.*))://(?P<host>[A-Za-z0-9\-\.]+):(?P<port>[0-9]+)?(.*)\Z"
)


class InvalidDNSResolverError(ValueError):
    """The DNS resolver is not of the form {proto}://{ip}:{port}."""

    def __init__(
        self,
        message: str = "invalid DNS resolver specified. Required format is {proto}://{ip}:{port}",
    ) -> None:
        super().__init__(message)


class InvalidDNSResolverPortError(ValueError):
    """The DNS resolver's port is outside 1-65535."""

    def __init__(self, message: str = "invalid DNS resolver port") -> None:
        super().__init__(message)


class InvalidClientOAuth2ConfigError(ValueError):
    """The OAuth2 configuration is missing a required field."""

    def __init__(
        self, message: str = "invalid OAuth2 configuration, all fields are required"
    ) -> None:
        super().__init__(message)


@dataclass
class OAuth2Config:
    """Settings for the OAuth2 client credentials flow."""

    token_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    scopes: list[str] = field(default_factory=list)

    def is_valid(self) -> bool:
        return bool(self.token_url and self.client_id and self.client_secret and self.scopes)


@dataclass(frozen=True)
class DNSResolverConfig:
    """A parsed DNS resolver override."""

    protocol: str
    host: str
    port: int


@dataclass
class ClientConfig:
    """Settings of an HTTP client. The timeout is in seconds."""

    insecure: bool = False
    ignore_redirect: bool = False
    timeout: float = _DEFAULT_HTTP_TIMEOUT
    dns_resolver: str = ""
    oauth2_config: OAuth2Config | None = None
    _http_client: requests.Session | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def validate_and_set_defaults(self) -> None:
        """Validate the configuration, filling in defaults; raise ValueError if invalid."""
        if self.timeout < _MINIMUM_TIMEOUT:
            self.timeout = _DEFAULT_HTTP_TIMEOUT
        if self.has_custom_dns_resolver():
            self.parse_dns_resolver()
        if self.has_oauth2_config() and not self.oauth2_config.is_valid():
            raise InvalidClientOAuth2ConfigError()

    def has_custom_dns_resolver(self) -> bool:
        return bool(self.dns_resolver)

    def parse_dns_resolver(self) -> DNSResolverConfig:
        match = _DNS_RESOLVER_PATTERN.match(self.dns_resolver)
        if match is None:
            raise InvalidDNSResolverError()
        port_text = match["port"]
        if not port_text:
            raise ValueError(f"invalid DNS resolver port {port_text!r}: not a number")
        port = int(port_text)
        if not 1 <= port <= 65535:
            raise InvalidDNSResolverPortError()
        return DNSResolverConfig(protocol=match["proto"], host=match["host"], port=port)

    def has_oauth2_config(self) -> bool:
        return self.oauth2_config is not None

    def get_http_client(self) -> requests.Session:
        """Return the session matching this configuration, creating it on first use."""
        if self._http_client is None:
            session = _ClientSession(
                timeout=self.timeout, follow_redirects=not self.ignore_redirect
            )
            session.verify = not self.insecure
            adapter = HTTPAdapter(pool_connections=100, pool_maxsize=20)
            if self.has_custom_dns_resolver():
                try:
                    resolver = self.parse_dns_resolver()
                except ValueError as exc:
                    logger.error(
                        "[client][get_http_client] Ignoring invalid DNS resolver: %s", exc
                    )
                else:
                    adapter = _ResolvingAdapter(resolver, pool_connections=100, pool_maxsize=20)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            if self.has_oauth2_config():
                configure_oauth2(session, self.oauth2_config)
            self._http_client = session
        return self._http_client


def get_default_config() -> ClientConfig:
    """Return a fresh copy of the default client configuration."""
    return ClientConfig()


def configure_oauth2(session: requests.Session, oauth2_config: OAuth2Config) -> requests.Session:
    """Make the session obtain and refresh client credentials tokens; return it."""
    session.auth = _ClientCredentialsAuth(session, oauth2_config)
    return session


class _ClientSession(requests.Session):
    """A session with a default timeout and a redirect policy."""

    def __init__(self, timeout: float, follow_redirects: bool) -> None:
        super().__init__()
        self.timeout = timeout
        self.follow_redirects = follow_redirects

    def request(self, method, url, *args, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, *args, **kwargs)

    def get_redirect_target(self, resp):
        if not self.follow_redirects:
            return None
        return super().get_redirect_target(resp)


def _canonical_token_type(token_type: str) -> str:
    lowered = token_type.lower()
    if lowered in ("", "bearer"):
        return "Bearer"
    if lowered == "mac":
        return "MAC"
    if lowered == "basic":
        return "Basic"
    return token_type


def _pass_through(request):
    return request


class _ClientCredentialsAuth(AuthBase):
    """Adds a client credentials token to each request, fetching it when needed."""

    def __init__(self, session: requests.Session, oauth2_config: OAuth2Config) -> None:
        self._session = session
        self._config = oauth2_config
        self._lock = threading.Lock()
        self._access_token: str | None = None
        self._token_type = "Bearer"
        self._expiry: float | None = None

    def __call__(self, request):
        request.headers["Authorization"] = self._authorization()
        return request

    def _authorization(self) -> str:
        with self._lock:
            if self._needs_refresh():
                self._fetch()
            return f"{self._token_type} {self._access_token}"

    def _needs_refresh(self) -> bool:
        if self._access_token is None:
            return True
        return self._expiry is not None and time.monotonic() >= self._expiry - _TOKEN_EXPIRY_MARGIN

    def _fetch(self) -> None:
        data = {"grant_type": "client_credentials"}
        if self._config.scopes:
            data["scope"] = " ".join(self._config.scopes)
        credentials = HTTPBasicAuth(
            quote_plus(self._config.client_id), quote_plus(self._config.client_secret)
        )
        response = self._session.post(
            self._config.token_url,
            data=data,
            headers={"Authorization": credentials(requests.Request().prepare()).headers["Authorization"]},
            auth=_pass_through,
        )
        if not 200 <= response.status_code < 300:
            raise requests.HTTPError(
                f"cannot fetch token: {response.status_code}\nResponse: {response.text}",
                response=response,
            )
        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise requests.HTTPError("server response missing access_token", response=response)
        self._access_token = access_token
        self._token_type = _canonical_token_type(payload.get("token_type") or "")
        expires_in = payload.get("expires_in")
        try:
            seconds = float(expires_in) if expires_in is not None else 0.0
        except (TypeError, ValueError):
            seconds = 0.0
        self._expiry = time.monotonic() + seconds if seconds > 0 else None


class _ResolvingAdapter(HTTPAdapter):
    """An adapter whose connections resolve host names through a given DNS server."""

    __attrs__ = HTTPAdapter.__attrs__ + ["_resolver"]

    def __init__(self, resolver: DNSResolverConfig, **kwargs) -> None:
        self._resolver = resolver
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        _install_resolver(self.poolmanager, self._resolver)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        _install_resolver(manager, self._resolver)
        return manager


def _install_resolver(manager, resolver: DNSResolverConfig) -> None:
    if getattr(manager, "_custom_resolver_installed", False):
        return
    manager.pool_classes_by_scheme = {
        scheme: _resolving_pool_class(pool_class, resolver)
        for scheme, pool_class in manager.pool_classes_by_scheme.items()
    }
    manager._custom_resolver_installed = True


def _resolving_pool_class(pool_class, resolver: DNSResolverConfig):
    base_connection = pool_class.ConnectionCls

    class _ResolvingConnection(base_connection):
        def _new_conn(self):
            timeout = self.timeout if isinstance(self.timeout, (int, float)) else None
            address = _resolve_host(resolver, self.host, timeout)
            sock = socket.create_connection(
                (address, self.port), timeout=timeout, source_address=self.source_address
            )
            for option in getattr(self, "socket_options", None) or ():
                sock.setsockopt(*option)
            return sock

    class _ResolvingPool(pool_class):
        ConnectionCls = _ResolvingConnection

    return _ResolvingPool


def _resolve_host(resolver: DNSResolverConfig, hostname: str, timeout: float | None) -> str:
    """Return an IPv4 address for hostname, asking the configured DNS server."""
    hostname = hostname.strip("[]")
    try:
        return str(ipaddress.ip_address(hostname))
    except ValueError:
        pass
    query_id = random.getrandbits(16)
    query = _build_query(query_id, hostname)
    wait = timeout if timeout is not None else _DNS_TIMEOUT
    if resolver.protocol.startswith("tcp"):
        reply = _exchange_tcp(resolver, query, wait)
    else:
        reply = _exchange_udp(resolver, query, wait)
    return _first_a_record(reply, query_id, hostname)


def _build_query(query_id: int, hostname: str) -> bytes:
    try:
        labels = hostname.rstrip(".").encode("idna").split(b".")
    except UnicodeError as exc:
        raise OSError(f"invalid host name {hostname!r}") from exc
    header = struct.pack("!6H", query_id, 0x0100, 1, 0, 0, 0)
    name = b"".join(bytes([len(label)]) + label for label in labels) + b"\x00"
    return header + name + struct.pack("!HH", 1, 1)


def _exchange_udp(resolver: DNSResolverConfig, query: bytes, timeout: float) -> bytes:
    family, socktype, proto, _, sockaddr = socket.getaddrinfo(
        resolver.host, resolver.port, type=socket.SOCK_DGRAM
    )[0]
    with socket.socket(family, socktype, proto) as sock:
        sock.settimeout(timeout)
        sock.connect(sockaddr)
        sock.send(query)
        return sock.recv(4096)


def _exchange_tcp(resolver: DNSResolverConfig, query: bytes, timeout: float) -> bytes:
    with socket.create_connection((resolver.host, resolver.port), timeout=timeout) as sock:
        sock.sendall(struct.pack("!H", len(query)) + query)
        (length,) = struct.unpack("!H", _recv_exact(sock, 2))
        return _recv_exact(sock, length)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise OSError("DNS server closed the connection")
        data.extend(chunk)
    return bytes(data)


def _skip_name(data: bytes, offset: int) -> int:
    while True:
        length = data[offset]
        if length & 0xC0 == 0xC0:
            return offset + 2
        if length == 0:
            return offset + 1
        offset += length + 1


def _first_a_record(reply: bytes, query_id: int, hostname: str) -> str:
    try:
        reply_id, flags, question_count, answer_count, _, _ = struct.unpack_from("!6H", reply)
        if reply_id != query_id:
            raise OSError(f"mismatched DNS reply for {hostname}")
        if flags & 0x000F:
            raise OSError(f"DNS lookup of {hostname} failed with rcode {flags & 0x000F}")
        offset = 12
        for _ in range(question_count):
            offset = _skip_name(reply, offset) + 4
        for _ in range(answer_count):
            offset = _skip_name(reply, offset)
            record_type, record_class, _ttl, length = struct.unpack_from("!HHIH", reply, offset)
            offset += 10
            record = reply[offset : offset + length]
            offset += length
            if record_type == 1 and record_class == 1 and len(record) == 4:
                return socket.inet_ntoa(record)
    except (struct.error, IndexError) as exc:
        raise OSError(f"malformed DNS reply for {hostname}") from exc
    raise OSError(f"no A record found for {hostname}")