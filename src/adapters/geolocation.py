"""Paso 2: IP → coordenadas.

La IP se inserta en la plantilla de URL sin validarla; si es inválida, el
error que devuelva el servicio es el que ve el llamador.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import fetch_json
from core.config import AppSettings
from core.domain.models import Coordinates, IPAddress
from core.interfaces.lookups import GeolocationResolver


def _parse_coordinates(payload: Any) -> Coordinates:
    return Coordinates(latitude=payload["latitude"], longitude=payload["longitude"])


class FreeGeoIPResolver(GeolocationResolver):
    """Geolocaliza una IPv4 con una única petición GET."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    async def resolve_coordinates(self, ip: IPAddress) -> Coordinates:
        url = self._settings.geolocation_url_template.replace("{ip}", ip)
        return await fetch_json(
            url,
            context="fetching coordinates for IP",
            parse=_parse_coordinates,
            settings=self._settings,
            client=self._client,
        )
