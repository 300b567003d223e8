"""
Client for the public Minecraft server status API (api.mcsrvstat.us).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from .config import settings
from .errors import ExternalServiceError, ServerOfflineError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ServerStatus:
    """Live status of a Minecraft server."""

    online: bool
    version: str | None
    max_players: int | None
    online_players: int | None = None
    motd: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> ServerStatus:
        players = data.get("players") or {}
        motd_lines = (data.get("motd") or {}).get("clean") or []
        return cls(
            online=bool(data.get("online")),
            version=data.get("version"),
            max_players=players.get("max"),
            online_players=players.get("online"),
            motd="\n".join(motd_lines) if motd_lines else None,
        )


class StatusClient:
    """Looks up a server by address and fails unless it is online."""

    def __init__(self, base_url: str, http_client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)

    async def get_server_status(self, ip: str) -> ServerStatus:
        """
        Fetch the live status for ``ip`` (host or host:port).

        Raises:
            ExternalServiceError: If the status API cannot be reached
            ServerOfflineError: If the server is not online
        """
        url = f"{self.base_url}/{quote(ip, safe=':')}"
        try:
            response = await self._http_client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Server status lookup failed", ip=ip, error=str(e))
            raise ExternalServiceError("Could not fetch server.") from e

        status = ServerStatus.from_payload(data if isinstance(data, dict) else {})
        if not status.online:
            logger.info("Server reported offline", ip=ip)
            raise ServerOfflineError("Could not find server info.")

        logger.debug("Server status fetched", ip=ip, version=status.version)
        return status

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def get_status_client() -> StatusClient:
    """Build a status client from the current settings."""
    return StatusClient(base_url=settings.status_api_url)
