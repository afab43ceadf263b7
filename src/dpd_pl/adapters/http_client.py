"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y autenticación para SOAP (zeep) y REST (PUDO).
- Facilita testeo: se puede sustituir por un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from dpd_pl import __version__
from dpd_pl.core.interfaces.transport import ConnectionOptions

USER_AGENT = f"dpd-pl/{__version__}"


def _headers(accept: str, extra_headers: dict[str, str] | None) -> dict[str, str]:
    headers: dict[str, str] = {
        "User-Agent": USER_AGENT,
        "Accept": accept,
    }
    if extra_headers:
        headers.update(extra_headers)
    return headers


def build_async_client(
    options: ConnectionOptions | None = None,
    *,
    base_url: str = "",
    accept: str = "application/json",
    basic_auth: bool = False,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los transportes se comporten igual.
    - `transport` permite inyectar `httpx.MockTransport` en tests.
    """

    options = options or ConnectionOptions()
    auth: httpx.Auth | None = None
    if basic_auth and options.credentials is not None:
        auth = httpx.BasicAuth(options.credentials.login, options.credentials.password)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(options.timeout),
        follow_redirects=True,
        headers=_headers(accept, extra_headers),
        auth=auth,
        transport=transport,
    )


def build_sync_client(
    options: ConnectionOptions | None = None,
    *,
    accept: str = "text/xml, application/xml",
) -> httpx.Client:
    """Cliente síncrono para descargar WSDL/XSD (zeep los carga de forma bloqueante)."""

    options = options or ConnectionOptions()
    return httpx.Client(
        timeout=httpx.Timeout(options.timeout),
        follow_redirects=True,
        headers=_headers(accept, None),
    )
