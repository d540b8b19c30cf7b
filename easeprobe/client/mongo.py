"""MongoDB health check, optionally verifying that documents exist."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import pymongo
from bson import json_util
from bson.errors import BSONError
from pymongo.errors import PyMongoError

from easeprobe.client.conf import Driver, Options

log = logging.getLogger(__name__)

KIND = "Mongo"


def get_db_collection(text: str) -> Tuple[str, str]:
    """Split "database:collection" into its two names."""
    if not text.strip():
        raise ValueError("Database Collection name is empty")
    fields = text.split(":")
    if len(fields) != 2:
        raise ValueError(f"Invalid Format - [{text}] (syntax: database.collection) ")
    return fields[0], fields[1]


def _parse_filter(text: str) -> Dict[str, Any]:
    try:
        value = json_util.loads(text)
    except (ValueError, TypeError, BSONError) as exc:
        raise ValueError(f"invalid JSON input - {exc}") from exc
    if not isinstance(value, dict):
        raise ValueError("invalid JSON input - the filter must be a document")
    return value


class Mongo(Driver):
    """Client probe for a MongoDB server."""

    def __init__(self, options: Options) -> None:
        timeout_ms = int(options.timeout * 1000)
        if options.password:
            conn = (
                f"mongodb://{options.username}:{options.password}@{options.host}"
                f"/?connectTimeoutMS={timeout_ms}"
            )
        else:
            conn = f"mongodb://{options.host}/?connectTimeoutMS={timeout_ms}"

        client_options: Dict[str, Any] = {
            "serverSelectionTimeoutMS": timeout_ms,
            "connectTimeoutMS": timeout_ms,
            "timeoutMS": timeout_ms,
            "maxConnecting": 1,
            "maxPoolSize": 1,
            "minPoolSize": 1,
        }

        try:
            tls = options.tls_context()
        except ValueError as exc:
            log.error(
                "[%s / %s / %s] - TLS Config Error - %s",
                options.kind, options.name, options.tag, exc,
            )
            raise ValueError(f"TLS Config Error - {exc}") from exc
        if tls is not None:
            client_options["tls"] = True
            client_options["authMechanism"] = "MONGODB-X509"
            if options.ca:
                client_options["tlsCAFile"] = options.ca
            if options.cert:
                client_options["tlsCertificateKeyFile"] = options.cert

        self.options = options
        self.conn_str = conn
        self.client_options = client_options

        for key, value in options.data.items():
            get_db_collection(key)
            _parse_filter(value)

    def kind(self) -> str:
        return KIND

    def probe(self) -> Tuple[bool, str]:
        opts = self.options
        try:
            client = pymongo.MongoClient(self.conn_str, **self.client_options)
        except PyMongoError as exc:
            return False, str(exc)
        try:
            if opts.data:
                return self._verify_data(client)
            try:
                client.admin.command("ping")
            except PyMongoError as exc:
                return False, str(exc)
        finally:
            client.close()
        return True, "Check MongoDB Server Successfully!"

    def _verify_data(self, client: Any) -> Tuple[bool, str]:
        opts = self.options
        for key, value in opts.data.items():
            log.debug(
                "[%s / %s / %s] - Verifying Data - [%s]: [%s]",
                opts.kind, opts.name, opts.tag, key, value,
            )
            try:
                db_name, collection_name = get_db_collection(key)
            except ValueError as exc:
                return False, f"[{key}] Error - {exc}"
            try:
                query = _parse_filter(value)
            except ValueError as exc:
                return False, f"[{value}] Error - {exc}"
            try:
                doc: Optional[Dict[str, Any]] = client[db_name][collection_name].find_one(query)
            except PyMongoError as exc:
                return False, f"Find [{value}] Error - {exc}"
            if doc is None:
                return False, f"Find [{value}] Error - mongo: no documents in result"
            log.debug(
                "[%s / %s / %s] - Find [%s] - %r", opts.kind, opts.name, opts.tag, value, doc
            )
        return True, "Check MongoDB Server Successfully!"