"""
Tests for the MCP server entry point.
"""

from types import SimpleNamespace

import pytest

from chuk_mcp_chords import async_server, server


class FakeServer:
    """Records which transport was started."""

    def __init__(self) -> None:
        self.settings = SimpleNamespace(host=None, port=None)
        self.started: list[str] = []

    async def run_stdio_async(self) -> None:
        self.started.append("stdio")

    async def run_streamable_http_async(self) -> None:
        self.started.append("http")


@pytest.fixture
def fake_server(monkeypatch: pytest.MonkeyPatch) -> FakeServer:
    """Swap the registered MCP server for a recorder."""
    fake = FakeServer()
    monkeypatch.setattr(async_server, "mcp", fake)
    return fake


class TestServerParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """stdio on localhost:8000 by default."""
        args = server.build_parser().parse_args([])
        assert args.transport == "stdio"
        assert args.host == "127.0.0.1"
        assert args.port == 8000
        assert not args.debug

    def test_unknown_transport(self) -> None:
        """Only registered transports are accepted."""
        with pytest.raises(SystemExit):
            server.build_parser().parse_args(["--transport", "carrier-pigeon"])


class TestServerMain:
    """Tests for transport dispatch."""

    def test_stdio(self, fake_server: FakeServer) -> None:
        """stdio runs the stdio transport."""
        server.main([])
        assert fake_server.started == ["stdio"]
        assert fake_server.settings.port is None

    def test_http(self, fake_server: FakeServer) -> None:
        """http applies host and port before serving."""
        server.main(["--transport", "http", "--host", "0.0.0.0", "--port", "9001"])
        assert fake_server.started == ["http"]
        assert fake_server.settings.host == "0.0.0.0"
        assert fake_server.settings.port == 9001

    def test_tools_registered(self) -> None:
        """The real server exposes every tool function."""
        assert async_server.composition_export_midi is not None
        assert async_server.chords_list is not None
