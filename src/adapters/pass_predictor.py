"""Paso 3: coordenadas → próximos pases de la ISS.

El servicio responde `{"response": [{"risetime": ..., "duration": ...}, ...]}`.
La lista se devuelve en el mismo orden; cada elemento conserva todos sus campos.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import fetch_json
from core.config import AppSettings
from core.domain.models import Coordinates, PassList, PassWindow
from core.interfaces.lookups import PassPredictor


def _parse_passes(payload: Any) -> PassList:
    items = payload["response"]
    if not isinstance(items, list):
        raise TypeError("'response' is not a list")
    return [PassWindow.model_validate(item) for item in items]


class IssPassPredictor(PassPredictor):
    """Consulta el servicio de pases con `lat`/`lon` tal cual llegan."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    def _params(self, coords: Coordinates) -> dict[str, Any]:
        params: dict[str, Any] = {"lat": coords.latitude, "lon": coords.longitude}
        if self._settings.pass_count is not None:
            params["n"] = self._settings.pass_count
        return params

    async def predict_passes(self, coords: Coordinates) -> PassList:
        return await fetch_json(
            self._settings.pass_service_url,
            context="fetching Flyover Times for coordinates",
            parse=_parse_passes,
            params=self._params(coords),
            settings=self._settings,
            client=self._client,
        )
