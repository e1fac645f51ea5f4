"""Paso 1: IP pública del llamador.

Usa un servicio eco (por defecto ipify) que responde `{"ip": "..."}`.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import fetch_json
from core.config import AppSettings
from core.domain.models import IPAddress
from core.interfaces.lookups import IPResolver


def _parse_ip(payload: Any) -> IPAddress:
    ip = payload["ip"]
    if not isinstance(ip, str):
        raise TypeError("'ip' is not a string")
    return ip


class IpifyResolver(IPResolver):
    """Resuelve la IP pública con una única petición GET."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    async def resolve_my_ip(self) -> IPAddress:
        return await fetch_json(
            self._settings.ip_service_url,
            context="fetching IP",
            parse=_parse_ip,
            settings=self._settings,
            client=self._client,
        )
