"""
Tests for the Minecraft server status client
"""

import httpx
import pytest

from serverlist.errors import ExternalServiceError, ServerOfflineError
from serverlist.status import ServerStatus, StatusClient

ONLINE_PAYLOAD = {
    "online": True,
    "version": "1.20.4",
    "players": {"online": 12, "max": 100},
    "motd": {"clean": ["Welcome", "to the server"]},
}


def make_client(handler) -> StatusClient:
    return StatusClient(
        "https://status.example/2/",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestGetServerStatus:
    @pytest.mark.asyncio
    async def test_online_server(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, json=ONLINE_PAYLOAD)

        async with make_client(handler) as client:
            status = await client.get_server_status("play.example.net:25565")

        assert seen["url"] == "https://status.example/2/play.example.net:25565"
        assert status == ServerStatus(
            online=True,
            version="1.20.4",
            max_players=100,
            online_players=12,
            motd="Welcome\nto the server",
        )

    @pytest.mark.asyncio
    async def test_offline_server(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"online": False})

        async with make_client(handler) as client:
            with pytest.raises(ServerOfflineError, match="Could not find server info."):
                await client.get_server_status("down.example.net")

    @pytest.mark.asyncio
    async def test_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with make_client(handler) as client:
            with pytest.raises(ExternalServiceError, match="Could not fetch server."):
                await client.get_server_status("play.example.net")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>")

        async with make_client(handler) as client:
            with pytest.raises(ExternalServiceError) as exc_info:
                await client.get_server_status("play.example.net")

        assert not isinstance(exc_info.value, ServerOfflineError)
