import socketserver
import threading
from unittest.mock import MagicMock, patch

import pytest

from easeprobe.client.client import Client
from easeprobe.client.conf import DriverType, Options


class _Server(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


class _VersionHandler(socketserver.StreamRequestHandler):
    def handle(self):
        for raw in self.rfile:
            if raw.strip() == b"version":
                self.wfile.write(b"VERSION 1.6.21\r\n")


@pytest.fixture
def memcache_server():
    srv = _Server(("127.0.0.1", 0), _VersionHandler)
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _client(driver, host="example.com:1234"):
    password = "password"
    return Client(
        options=Options(
            name=f"dummy_{driver}",
            host=host,
            driver_type=driver,
            username="user",
            password=password,
            data={},
            timeout=2.0,
        )
    )


@pytest.mark.parametrize(
    "driver",
    [DriverType.MYSQL, DriverType.REDIS, DriverType.MONGO, DriverType.MEMCACHE],
)
def test_config(driver):
    client = _client(driver)
    client.config()
    assert client.options.kind == "client"
    assert client.options.tag == str(driver)

    client.options.host = "wronghost"
    with pytest.raises(ValueError, match="Invalid Host"):
        client.config()


@patch("pymysql.connect")
def test_mysql_probe(connect):
    connect.return_value = MagicMock()
    client = _client(DriverType.MYSQL)
    client.config()
    ok, msg = client.do_probe()
    assert ok is True
    assert "Successfully" in msg
    assert connect.call_args.kwargs["host"] == "example.com"
    assert connect.call_args.kwargs["port"] == 1234


@patch("redis.Redis")
def test_redis_probe(redis_cls):
    redis_cls.return_value = MagicMock()
    client = _client(DriverType.REDIS)
    client.config()
    ok, msg = client.do_probe()
    assert ok is True
    assert "Successfully" in msg


@patch("pymongo.MongoClient")
def test_mongo_probe(client_cls):
    client_cls.return_value = MagicMock()
    client = _client(DriverType.MONGO)
    client.config()
    ok, msg = client.do_probe()
    assert ok is True
    assert "Successfully" in msg


def test_memcache_probe(memcache_server):
    client = _client(
        DriverType.MEMCACHE, host=f"127.0.0.1:{memcache_server.server_address[1]}"
    )
    client.config()
    ok, msg = client.do_probe()
    assert ok is True
    assert "Successfully" in msg


def test_unknown_driver():
    client = _client(DriverType.UNKNOWN)
    with pytest.raises(ValueError, match="Unknown driver"):
        client.config()
    ok, msg = client.do_probe()
    assert ok is False
    assert "Wrong Driver Type" in msg


def test_unavailable_driver():
    client = _client(DriverType.KAFKA)
    with pytest.raises(ValueError, match="Unknown Driver Type"):
        client.config()
    assert client.options.driver_type is DriverType.UNKNOWN
    ok, msg = client.do_probe()
    assert ok is False
    assert msg == "Wrong Driver Type"


def test_unconfigured_client():
    ok, msg = _client(DriverType.REDIS).do_probe()
    assert ok is False
    assert msg == "Client is not configured"