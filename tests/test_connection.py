"""Tests for the HTTP listener lifecycle."""

from pathlib import Path

import httpx
import pytest

from pagewith.config import Settings
from pagewith.connection import _format_url, bind_socket
from pagewith.exceptions import BindError, NotRunningError
from pagewith.server import PreviewServer


class TestConnection:
    """Tests for listen and close."""

    @pytest.mark.asyncio
    async def test_listen_reports_address(self, listening_server: PreviewServer) -> None:
        """Test the bound address is reported and reachable.

        Args:
            listening_server: Listening preview server.
        """
        info = listening_server.connection_info

        assert info.host == "127.0.0.1"
        assert info.port > 0
        assert info.url == f"http://127.0.0.1:{info.port}"
        assert listening_server.is_running

        async with httpx.AsyncClient() as client:
            response = await client.get(f"{info.url}/preview/unknown")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_page_urls_are_absolute(self, listening_server: PreviewServer, example: Path) -> None:
        handle = listening_server.create_page(example)

        assert handle.url.startswith(listening_server.url + "/preview/")

        async with httpx.AsyncClient() as client:
            response = await client.get(handle.url)
        assert response.status_code == 200
        assert "/assets/main." in response.text

    @pytest.mark.asyncio
    async def test_close_clears_info(self, test_settings: Settings) -> None:
        server = PreviewServer(settings=test_settings)
        info = await server.listen()
        await server.close()

        assert server.connection_info is None
        assert not server.is_running
        with pytest.raises(httpx.ConnectError):
            async with httpx.AsyncClient() as client:
                await client.get(info.url)

    @pytest.mark.asyncio
    async def test_close_removes_temporary_output(self, test_settings: Settings, example: Path) -> None:
        """Test closing drops compiled assets and their temporary directory.

        Args:
            test_settings: Test settings.
            example: Example module.
        """
        server = PreviewServer(settings=test_settings, in_memory=False)
        await server.listen()
        await server.compile(example)
        root = server.store.root
        assert any(root.iterdir())

        await server.close()

        assert not root.exists()
        assert len(server.cache) == 0

    @pytest.mark.asyncio
    async def test_close_without_listen(self, server: PreviewServer) -> None:
        with pytest.raises(NotRunningError) as exc_info:
            await server.close()

        assert exc_info.value.message == "Failed to close a server: server is not running."

    @pytest.mark.asyncio
    async def test_double_close(self, test_settings: Settings) -> None:
        server = PreviewServer(settings=test_settings)
        await server.listen()
        await server.close()

        with pytest.raises(NotRunningError):
            await server.close()

    @pytest.mark.asyncio
    async def test_port_in_use(self, listening_server: PreviewServer, test_settings: Settings) -> None:
        """Test binding a taken port fails with BindError.

        Args:
            listening_server: Listening preview server.
            test_settings: Test settings.
        """
        other = PreviewServer(settings=test_settings)

        with pytest.raises(BindError):
            await other.listen(port=listening_server.connection_info.port, host="127.0.0.1")
        assert other.connection_info is None

    @pytest.mark.asyncio
    async def test_listen_twice(self, listening_server: PreviewServer) -> None:
        with pytest.raises(BindError):
            await listening_server.listen()

    @pytest.mark.asyncio
    async def test_context_manager(self, test_settings: Settings) -> None:
        async with PreviewServer(settings=test_settings) as server:
            assert server.is_running

        assert not server.is_running
        assert server.registry.base_url == ""


def test_unresolvable_host() -> None:
    with pytest.raises(BindError):
        bind_socket("host.invalid", 0)


def test_format_url() -> None:
    assert _format_url("127.0.0.1", 4000) == "http://127.0.0.1:4000"
    assert _format_url("::1", 4000) == "http://[::1]:4000"
