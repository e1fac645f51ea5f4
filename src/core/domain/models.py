"""Modelos del dominio (Pydantic v2).

Estos modelos describen *qué* devuelve cada servicio, no *cómo* se obtiene.
Todos son inmutables (`frozen=True`) y viven solo durante una ejecución.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

IPAddress = str
"""IPv4 en notación decimal con puntos, tal cual la devuelve el servicio eco."""


class Coordinates(BaseModel):
    """Latitud/longitud tal como las entrega el servicio de geolocalización.

    No se convierten a número: si el servicio manda `"49.27670"` se reenvía
    `"49.27670"` al predictor de pases.
    """

    model_config = ConfigDict(frozen=True)

    latitude: str | int | float = Field(
        ...,
        description="Latitud literal devuelta por el servicio.",
    )
    longitude: str | int | float = Field(
        ...,
        description="Longitud literal devuelta por el servicio.",
    )


class PassWindow(BaseModel):
    """Un pase previsto de la ISS sobre la ubicación consultada.

    `extra="allow"`: cualquier campo adicional que mande el servicio se
    conserva y vuelve a aparecer en `model_dump()`. `strict=True`: los enteros
    no se convierten; un `"134564234"` se rechaza en lugar de reinterpretarse.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    risetime: int = Field(
        ...,
        strict=True,
        description="Momento de salida sobre el horizonte (Unix epoch, segundos).",
    )
    duration: int = Field(
        ...,
        strict=True,
        description="Duración del pase (segundos).",
    )

    @property
    def rise_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.risetime, tz=timezone.utc)

    @property
    def set_datetime(self) -> datetime:
        return self.rise_datetime + timedelta(seconds=self.duration)


PassList = list[PassWindow]


class FlyoverReport(BaseModel):
    """Resultado completo de una ejecución, con los valores intermedios.

    Solo lo usan la CLI y el exportador JSON; el contrato del pipeline sigue
    siendo devolver `PassList`.
    """

    model_config = ConfigDict(frozen=True)

    ip: IPAddress = Field(
        ...,
        min_length=1,
        description="IP pública detectada.",
    )
    coordinates: Coordinates = Field(
        ...,
        description="Coordenadas resueltas para esa IP.",
    )
    passes: list[PassWindow] = Field(
        default_factory=list,
        description="Pases en el orden devuelto por el servicio.",
    )
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Momento de generación del reporte (UTC).",
    )
