"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y User-Agent para los tres servicios.
- Es el único punto donde las excepciones de httpx se traducen a
  `TransportError` / `UpstreamError`.
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` con `MockTransport`.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import httpx

from core.config import AppSettings
from core.errors import TransportError, UpstreamError
from core.logging_setup import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    El timeout de transporte es el único timeout del sistema.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
    )


async def fetch_json(
    url: str,
    *,
    context: str,
    parse: Callable[[Any], T],
    params: dict[str, Any] | None = None,
    settings: AppSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> T:
    """GET `url`, decodifica el JSON y lo pasa por `parse`.

    `context` completa los mensajes de error, p.ej. "fetching IP" produce
    `Status Code 500 when fetching IP. Response: ...`.

    Un `client` inyectado no se cierra aquí; uno creado internamente sí.

    Raises:
        TransportError: la petición no llegó a completarse (incluida una URL
            inválida, p.ej. una IP con caracteres de control).
        UpstreamError: status distinto de 200, cuerpo no-JSON o que `parse`
            rechaza (`KeyError`, `TypeError` o `ValueError`, incluido
            `pydantic.ValidationError`).
    """

    owns_client = client is None
    client = client or build_async_client(settings)
    logger.debug("http_request", url=url, params=params, context=context)
    try:
        response = await client.get(url, params=params)
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        logger.warning("http_transport_failed", url=url, context=context, error=str(exc))
        raise TransportError(f"Request failed when {context}: {exc}", cause=exc) from exc
    finally:
        if owns_client:
            await client.aclose()

    body = response.text
    if response.status_code != 200:
        logger.warning("http_upstream_status", url=url, context=context, status_code=response.status_code)
        raise UpstreamError(
            f"Status Code {response.status_code} when {context}. Response: {body}",
            status_code=response.status_code,
            body=body,
        )

    try:
        return parse(response.json())
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("http_unexpected_payload", url=url, context=context)
        raise UpstreamError(
            f"Unexpected payload when {context}. Response: {body}",
            status_code=response.status_code,
            body=body,
        ) from exc
