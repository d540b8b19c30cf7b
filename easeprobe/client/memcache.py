"""Memcache health check, optionally verifying stored values."""

from __future__ import annotations

import logging
import socket
from types import TracebackType
from typing import Dict, List, Mapping, Optional, Tuple, Type

from easeprobe.client.conf import Driver, Options

log = logging.getLogger(__name__)

KIND = "Memcache"
DEFAULT_PORT = 11211

_MAX_KEY_LENGTH = 250


class MemcacheError(Exception):
    """A malformed key or an unexpected reply from the server."""


def _address(address: str, default_port: int) -> Tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        return address.strip("[]"), default_port
    return host.strip("[]"), int(port)


def _legal_key(key: str) -> bool:
    raw = key.encode("utf-8")
    if len(raw) > _MAX_KEY_LENGTH:
        return False
    return all(b > 0x20 and b != 0x7F for b in raw)


class _Connection:
    """One text-protocol connection to a memcache server."""

    def __init__(self, address: str, timeout: float) -> None:
        host, port = _address(address, DEFAULT_PORT)
        self._sock = socket.create_connection((host, port), timeout=timeout)
        self._reader = self._sock.makefile("rb")

    def __enter__(self) -> "_Connection":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        self._reader.close()
        self._sock.close()

    def _readline(self) -> bytes:
        line = self._reader.readline()
        if not line.endswith(b"\r\n"):
            raise MemcacheError("memcache: unexpected end of response")
        return line

    def get_multi(self, keys: List[str]) -> Dict[str, bytes]:
        for key in keys:
            if not _legal_key(key):
                raise MemcacheError(
                    "malformed: key is too long or contains invalid characters"
                )
        if not keys:
            return {}
        self._sock.sendall(("get " + " ".join(keys) + "\r\n").encode("utf-8"))
        items: Dict[str, bytes] = {}
        while True:
            line = self._readline()
            if line == b"END\r\n":
                return items
            parts = line.split()
            if len(parts) not in (4, 5) or parts[0] != b"VALUE" or not parts[3].isdigit():
                raise MemcacheError(f"memcache: unexpected line in get response: {line!r}")
            size = int(parts[3])
            data = self._reader.read(size + 2)
            if len(data) != size + 2 or not data.endswith(b"\r\n"):
                raise MemcacheError("memcache: corrupt get result read")
            items[parts[1].decode("utf-8", errors="replace")] = data[:-2]

    def ping(self) -> None:
        self._sock.sendall(b"version\r\n")
        line = self._readline()
        if not line.startswith(b"VERSION"):
            raise MemcacheError(f"memcache: unexpected response line from ping: {line!r}")


class Memcache(Driver):
    """Client probe for a memcache server."""

    def __init__(self, options: Options) -> None:
        self.options = options

    def kind(self) -> str:
        return KIND

    def probe(self) -> Tuple[bool, str]:
        opts = self.options
        try:
            with _Connection(opts.host, opts.timeout) as conn:
                if not opts.data:
                    log.debug(
                        "[%s / %s %s] Data empty, Pinging", opts.kind, opts.name, opts.tag
                    )
                    conn.ping()
                    return True, "Memcache key fetched Successfully!"
                items = conn.get_multi(self.data_keys())
        except (OSError, MemcacheError) as exc:
            return False, str(exc)

        if len(items) != len(opts.data):
            return False, f"Number of fetched keys {len(items)} expected {len(opts.data)}"
        return self.validate_key_values(items)

    def data_keys(self) -> List[str]:
        """Return the keys named in the configuration."""
        return list(self.options.data)

    def validate_key_values(self, items: Mapping[str, bytes]) -> Tuple[bool, str]:
        """Compare fetched values with the configured ones; blank ones are skipped."""
        opts = self.options
        for key, raw in items.items():
            value = raw.decode("utf-8", errors="replace")
            log.debug(
                "[%s / %s / %s] Got key: %s with value: %s",
                opts.kind, opts.name, opts.tag, key, value,
            )
            expected = opts.data.get(key, "")
            if not expected.strip():
                log.debug(
                    "[%s / %s / %s] Skipping value check for item %s",
                    opts.kind, opts.name, opts.tag, key,
                )
                continue
            if value != expected:
                return (
                    False,
                    f"Memcache value for key {key} returned {value}, expected {expected}",
                )
        return True, "Memcache key values match successfully"