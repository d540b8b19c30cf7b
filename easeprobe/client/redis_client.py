"""Redis health check, optionally verifying stored values."""

from __future__ import annotations

import logging
import ssl
from typing import Optional, Tuple

import redis

from easeprobe.client.conf import Driver, Options

log = logging.getLogger(__name__)

KIND = "Redis"
DEFAULT_PORT = 6379

_ERRORS = (redis.exceptions.RedisError, OSError)


def _address(address: str, default_port: int) -> Tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        return address.strip("[]"), default_port
    return host.strip("[]"), int(port)


class Redis(Driver):
    """Client probe for a Redis server."""

    def __init__(self, options: Options) -> None:
        try:
            tls: Optional[ssl.SSLContext] = options.tls_context()
        except ValueError as exc:
            log.error(
                "[%s / %s / %s] - TLS Config Error - %s",
                options.kind, options.name, options.tag, exc,
            )
            raise ValueError(f"TLS Config Error - {exc}") from exc
        self.options = options
        self.tls = tls

    def kind(self) -> str:
        return KIND

    def probe(self) -> Tuple[bool, str]:
        opts = self.options
        host, port = _address(opts.host, DEFAULT_PORT)
        kwargs = {
            "host": host,
            "port": port,
            "password": opts.password or None,
            "db": 0,
            "socket_connect_timeout": opts.timeout,
            "socket_timeout": opts.timeout,
            "decode_responses": True,
        }
        if self.tls is not None:
            kwargs.update(
                ssl=True,
                ssl_ca_certs=opts.ca or None,
                ssl_certfile=opts.cert or None,
                ssl_keyfile=opts.key or None,
            )
        client = redis.Redis(**kwargs)
        try:
            if opts.data:
                for key, expected in opts.data.items():
                    log.debug(
                        "[%s / %s / %s] Verifying Data - key = [%s], value = [%s]",
                        opts.kind, opts.name, opts.tag, key, expected,
                    )
                    try:
                        value = client.get(key)
                    except _ERRORS as exc:
                        return False, f"Get Key [{key}] Error - {exc}"
                    if value is None:
                        return False, f"Get Key [{key}] Error - redis: nil"
                    if value != expected:
                        return False, f"Key [{key}] expected [{expected}] got [{value}]"
                    log.debug(
                        "[%s / %s / %s] Data Verified Successfully! key= [%s], value = [%s]",
                        opts.kind, opts.name, opts.tag, key, expected,
                    )
            else:
                try:
                    client.ping()
                except _ERRORS as exc:
                    return False, str(exc)
        finally:
            client.close()
        return True, "Ping Redis Server Successfully!"