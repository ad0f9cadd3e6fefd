"""Shared pytest fixtures."""

import socketserver
import threading

import pytest

import vendor.commands as C
from services.session import SESSION
from tests.fake_hub import (
    FakeHub,
    INPUTS_REPLY,
    OUTPUTS_REPLY,
    PREAMBLE_REPLY,
    ROUTING_REPLY,
)


@pytest.fixture
def fake_hub():
    """Factory starting fake hubs; all of them are shut down after the test."""
    servers = []

    def _start(**kwargs):
        hub = FakeHub(**kwargs)
        threading.Thread(target=hub.serve_forever, daemon=True).start()
        servers.append(hub)
        return hub

    yield _start
    for hub in servers:
        hub.shutdown()
        hub.server_close()


@pytest.fixture
def full_replies():
    return {
        C.CMD_PREAMBLE: PREAMBLE_REPLY,
        C.CMD_GET_INPUTS: INPUTS_REPLY,
        C.CMD_GET_OUTPUTS: OUTPUTS_REPLY,
        C.CMD_GET_ROUTING: ROUTING_REPLY,
    }


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    srv = socketserver.TCPServer(("127.0.0.1", 0), socketserver.BaseRequestHandler)
    port = srv.server_address[1]
    srv.server_close()
    return port


@pytest.fixture
def session(tmp_path):
    host, port, preset_dir = SESSION.host, SESSION.port, SESSION.preset_dir
    SESSION.reset()
    SESSION.preset_dir = str(tmp_path / "presets")
    yield SESSION
    SESSION.reset()
    SESSION.host, SESSION.port, SESSION.preset_dir = host, port, preset_dir
