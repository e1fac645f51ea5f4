"""Errores del Core.

Solo existen dos tipos visibles para el llamador:
- `TransportError`: la llamada de red falló (DNS, conexión, timeout).
- `UpstreamError`: el servicio respondió, pero no con lo esperado.

Ambos heredan de `FlyoverError` para que la CLI pueda capturarlos juntos.
"""

from __future__ import annotations


class FlyoverError(Exception):
    """Base de los errores del pipeline de pases."""


class TransportError(FlyoverError):
    """La petición HTTP no llegó a completarse."""

    def __init__(self, message: str, *, cause: BaseException) -> None:
        super().__init__(message)
        self.cause = cause


class UpstreamError(FlyoverError):
    """El servicio respondió con un status distinto de 200 o un cuerpo inválido."""

    def __init__(self, message: str, *, status_code: int, body: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
