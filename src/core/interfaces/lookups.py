"""Contratos de las tres consultas encadenadas.

Por qué Protocol:
- El pipeline depende de la forma (duck typing), no de los adaptadores httpx.
- Los tests sustituyen cada paso por un fake en memoria.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Coordinates, IPAddress, PassList


@runtime_checkable
class IPResolver(Protocol):
    """Resuelve la IP pública del llamador."""

    async def resolve_my_ip(self) -> IPAddress:
        ...


@runtime_checkable
class GeolocationResolver(Protocol):
    """Traduce una IPv4 a coordenadas."""

    async def resolve_coordinates(self, ip: IPAddress) -> Coordinates:
        ...


@runtime_checkable
class PassPredictor(Protocol):
    """Predice los próximos pases de la ISS para unas coordenadas.

    Devuelve la lista en el orden del servicio, sin filtrar ni reordenar.
    """

    async def predict_passes(self, coords: Coordinates) -> PassList:
        ...
