"""Configuration shared by the native client probes."""

from __future__ import annotations

import abc
import json
import logging
import re
import ssl
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_PORT = re.compile(r"[+-]?[0-9]+")


class DriverType(Enum):
    """The kind of server a native client probe talks to."""

    UNKNOWN = 0
    MYSQL = 1
    REDIS = 2
    MEMCACHE = 3
    KAFKA = 4
    MONGO = 5
    POSTGRESQL = 6
    ZOOKEEPER = 7

    def __str__(self) -> str:
        return _DRIVER_NAMES.get(self, _DRIVER_NAMES[DriverType.UNKNOWN])

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    @classmethod
    def from_name(cls, name: str) -> "DriverType":
        """Return the driver with the given name, or UNKNOWN."""
        return _DRIVER_TYPES.get(name, cls.UNKNOWN)

    def to_json(self) -> str:
        """Encode the driver as a JSON string."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: str) -> "DriverType":
        """Decode a driver from a JSON string; raise ValueError if it is not one."""
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Client Driver: {exc}") from exc
        if not isinstance(value, str) or value not in _DRIVER_TYPES:
            raise ValueError(f"Client Driver: invalid value {text}")
        return _DRIVER_TYPES[value]


_DRIVER_NAMES: Dict[DriverType, str] = {
    DriverType.MYSQL: "mysql",
    DriverType.REDIS: "redis",
    DriverType.MEMCACHE: "memcache",
    DriverType.KAFKA: "kafka",
    DriverType.MONGO: "mongo",
    DriverType.POSTGRESQL: "postgres",
    DriverType.ZOOKEEPER: "zookeeper",
    DriverType.UNKNOWN: "unknown",
}

_DRIVER_TYPES: Dict[str, DriverType] = {name: d for d, name in _DRIVER_NAMES.items()}


class Driver(abc.ABC):
    """A client able to health-check one kind of server."""

    @abc.abstractmethod
    def kind(self) -> str:
        """Return the name of the client."""

    @abc.abstractmethod
    def probe(self) -> Tuple[bool, str]:
        """Run the health check and return the status with a message."""


def _split_host_port(address: str) -> Tuple[str, str]:
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"address {address}: missing ']' in address")
        rest = address[end + 1 :]
        if not rest.startswith(":"):
            raise ValueError(f"address {address}: missing port in address")
        host, port = address[1:end], rest[1:]
        if ":" in port:
            raise ValueError(f"address {address}: too many colons in address")
        return host, port
    colons = address.count(":")
    if colons == 0:
        raise ValueError(f"address {address}: missing port in address")
    if colons > 1:
        raise ValueError(f"address {address}: too many colons in address")
    host, port = address.split(":")
    if "[" in host or "]" in host:
        raise ValueError(f"address {address}: unexpected bracket in address")
    return host, port


@dataclass
class Options:
    """Settings for a native client probe."""

    host: str = ""
    driver_type: DriverType = DriverType.UNKNOWN
    username: str = ""
    password: str = ""
    data: Dict[str, str] = field(default_factory=dict)
    name: str = ""
    kind: str = ""
    tag: str = ""
    timeout: float = DEFAULT_TIMEOUT
    ca: str = ""
    cert: str = ""
    key: str = ""

    def check(self) -> None:
        """Validate the host, port and driver; raise ValueError on failure."""
        try:
            _, port = _split_host_port(self.host)
        except ValueError as exc:
            raise ValueError(f"Invalid Host: {self.host}. {exc}") from exc
        if not _PORT.fullmatch(port) or not 1 <= int(port) <= 65535:
            raise ValueError(f"Invalid Port: {port}")
        if self.driver_type is DriverType.UNKNOWN:
            raise ValueError("Unknown driver")

    def tls_context(self) -> Optional[ssl.SSLContext]:
        """Build the TLS context from the configured files, or None without TLS."""
        if not (self.ca or self.cert or self.key):
            return None
        try:
            context = ssl.create_default_context(cafile=self.ca or None)
            if self.cert:
                context.load_cert_chain(self.cert, self.key or None)
        except OSError as exc:
            raise ValueError(str(exc)) from exc
        return context