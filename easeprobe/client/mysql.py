"""MySQL health check, optionally verifying stored values."""

from __future__ import annotations

import logging
import re
import ssl
from typing import Any, Optional, Tuple

import pymysql

from easeprobe.client.conf import Driver, Options

log = logging.getLogger(__name__)

KIND = "MySQL"
TLS_NAME = "easeprobe"
DEFAULT_PORT = 3306

_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_ERRORS = (pymysql.MySQLError, OSError, ValueError)


def _go_duration(seconds: float) -> str:
    """Format a duration rounded to whole seconds, e.g. "30s" or "1m30s"."""
    total = int(seconds + 0.5) if seconds >= 0 else -int(-seconds + 0.5)
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def _address(address: str, default_port: int) -> Tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        return address.strip("[]"), default_port
    return host.strip("[]"), int(port)


def _quote(name: str) -> str:
    return name.replace("`", "``")


def get_sql(text: str) -> str:
    """Turn "database:table:column:key:value" into a SELECT statement."""
    if not text.strip():
        raise ValueError("Empty SQL data")
    fields = text.split(":")
    if len(fields) != 5:
        raise ValueError(
            f"Invalid SQL data - [{text}]. (syntax: database:table:field:key:value)"
        )
    db, table, column, key, value = (_quote(f) for f in fields)
    if not _INT.fullmatch(value) or not _INT64_MIN <= int(value) <= _INT64_MAX:
        raise ValueError(f"Invalid SQL data - [{text}], the value must be int")
    return f"SELECT `{column}` FROM `{db}`.`{table}` WHERE `{key}` = {value}"


def _as_text(value: Any) -> str:
    if value is None:
        raise ValueError("converting NULL to string is unsupported")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class MySQL(Driver):
    """Client probe for a MySQL server."""

    def __init__(self, options: Options) -> None:
        timeout = _go_duration(options.timeout)
        if options.password:
            conn = (
                f"{options.username}:{options.password}"
                f"@tcp({options.host})/?timeout={timeout}"
            )
        else:
            conn = f"{options.username}@tcp({options.host})/?timeout={timeout}"

        try:
            tls: Optional[ssl.SSLContext] = options.tls_context()
        except ValueError as exc:
            log.error(
                "[%s / %s / %s] - TLS Config Error - %s",
                options.kind, options.name, options.tag, exc,
            )
            raise ValueError(f"TLS Config Error - {exc}") from exc
        if tls is not None:
            conn += "&tls=" + TLS_NAME

        self.options = options
        self.tls = tls
        self.conn_str = conn

        for key in options.data:
            get_sql(key)

    def kind(self) -> str:
        return KIND

    def probe(self) -> Tuple[bool, str]:
        opts = self.options
        host, port = _address(opts.host, DEFAULT_PORT)
        kwargs = {
            "host": host,
            "port": port,
            "user": opts.username,
            "password": opts.password,
            "connect_timeout": opts.timeout,
            "read_timeout": opts.timeout,
            "write_timeout": opts.timeout,
        }
        if self.tls is not None:
            kwargs["ssl"] = self.tls
        try:
            conn = pymysql.connect(**kwargs)
        except _ERRORS as exc:
            return False, str(exc)
        try:
            if opts.data:
                self.probe_with_data_verification(conn)
            else:
                self.probe_with_ping(conn)
        except _ERRORS as exc:
            return False, str(exc)
        finally:
            conn.close()
        return True, "Check MySQL Server Successfully!"

    def probe_with_ping(self, conn: Any) -> None:
        """Ping the server and run a trivial statement."""
        conn.ping(reconnect=False)
        with conn.cursor() as cursor:
            cursor.execute('show status like "uptime"')

    def probe_with_data_verification(self, conn: Any) -> None:
        """Check that every configured row holds its expected value."""
        opts = self.options
        for key, expected in opts.data.items():
            log.debug(
                "[%s / %s / %s] - Verifying Data - [%s] : [%s]",
                opts.kind, opts.name, opts.tag, key, expected,
            )
            sql = get_sql(key)
            log.debug("[%s / %s / %s] - SQL - [%s]", opts.kind, opts.name, opts.tag, sql)
            with conn.cursor() as cursor:
                cursor.execute(sql)
                row = cursor.fetchone()
            if row is None:
                raise ValueError(f"No data found for [{key}]")
            value = _as_text(row[0])
            if value != expected:
                raise ValueError(
                    f"Value not match for [{key}] expected [{expected}] got [{value}] "
                )
            log.debug(
                "[%s / %s / %s] - Data Verified Successfully! - [%s] : [%s]",
                opts.kind, opts.name, opts.tag, key, expected,
            )