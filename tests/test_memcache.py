import socket
import socketserver
import threading

import pytest

from easeprobe.client.conf import DriverType, Options
from easeprobe.client.memcache import Memcache


class _Server(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


class _Handler(socketserver.StreamRequestHandler):
    def handle(self):
        for raw in self.rfile:
            parts = raw.decode().split()
            if not parts:
                continue
            if parts[0] == "get":
                for key in parts[1:]:
                    if key in self.server.store:
                        value = self.server.store[key]
                        self.wfile.write(
                            f"VALUE {key} 0 {len(value)}\r\n".encode() + value + b"\r\n"
                        )
                self.wfile.write(b"END\r\n")
            elif parts[0] == "version":
                self.wfile.write(self.server.version_reply)


@pytest.fixture
def server():
    srv = _Server(("127.0.0.1", 0), _Handler)
    srv.store = {}
    srv.version_reply = b"VERSION 1.6.21\r\n"
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _host(srv):
    return f"127.0.0.1:{srv.server_address[1]}"


def _options(host, data):
    return Options(host=host, driver_type=DriverType.MEMCACHE, data=data, timeout=2.0)


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_kind_and_keys():
    m = Memcache(_options("localhost:12345", {"sysconfig:event_active": "1"}))
    assert m.kind() == "Memcache"
    assert m.data_keys() == ["sysconfig:event_active"]


def test_connection_refused():
    m = Memcache(_options(f"127.0.0.1:{_free_port()}", {"sysconfig:event_active": "1"}))
    ok, msg = m.probe()
    assert ok is False
    assert "refused" in msg.lower()


def test_value_matches(server):
    server.store["sysconfig:event_active"] = b"1"
    m = Memcache(_options(_host(server), {"sysconfig:event_active": "1"}))
    ok, msg = m.probe()
    assert ok is True
    assert "successfully" in msg


def test_value_mismatch(server):
    server.store["sysconfig:event_active"] = b"2"
    m = Memcache(_options(_host(server), {"sysconfig:event_active": "1"}))
    ok, msg = m.probe()
    assert ok is False
    assert "expected" in msg
    assert "returned 2" in msg


def test_missing_key(server):
    m = Memcache(_options(_host(server), {"sysconfig:event_active": "1"}))
    ok, msg = m.probe()
    assert ok is False
    assert msg == "Number of fetched keys 0 expected 1"


def test_blank_expected_value_is_skipped(server):
    server.store["k"] = b"anything"
    m = Memcache(_options(_host(server), {"k": "  "}))
    ok, msg = m.probe()
    assert ok is True
    assert msg == "Memcache key values match successfully"


def test_validate_skips_unknown_item_key():
    m = Memcache(_options("localhost:12345", {"sysconfig:event_active": "1"}))
    ok, msg = m.validate_key_values({"": b"1"})
    assert ok is True
    assert "successfully" in msg


def test_validate_reports_mismatch():
    m = Memcache(_options("localhost:12345", {"a": "1"}))
    ok, msg = m.validate_key_values({"a": b"2"})
    assert ok is False
    assert msg == "Memcache value for key a returned 2, expected 1"


def test_malformed_key(server):
    m = Memcache(_options(_host(server), {"bad key": "1"}))
    ok, msg = m.probe()
    assert ok is False
    assert "malformed" in msg


def test_ping(server):
    m = Memcache(_options(_host(server), {}))
    ok, msg = m.probe()
    assert ok is True
    assert "Successfully" in msg


def test_ping_bad_reply(server):
    server.version_reply = b"ERROR\r\n"
    m = Memcache(_options(_host(server), {}))
    ok, msg = m.probe()
    assert ok is False
    assert "unexpected response line from ping" in msg


def test_ping_refused():
    m = Memcache(_options(f"127.0.0.1:{_free_port()}", {}))
    ok, msg = m.probe()
    assert ok is False
    assert "refused" in msg.lower()