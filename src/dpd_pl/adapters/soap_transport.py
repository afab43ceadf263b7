"""Transporte SOAP (zeep sobre httpx).

Responsabilidad:
- Handshake: descargar y parsear el WSDL, listar las operaciones expuestas.
- Invocar una operación y devolver la respuesta como dicts/listas planos.
- Traducir excepciones de zeep/httpx a la jerarquía `DPDError`.

Nota: zeep carga el WSDL de forma bloqueante; el handshake corre en un hilo
para no bloquear el event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import httpx
from zeep import AsyncClient, Settings
from zeep.exceptions import Error as ZeepError
from zeep.exceptions import Fault, TransportError
from zeep.exceptions import ValidationError as ZeepValidationError
from zeep.helpers import serialize_object
from zeep.transports import AsyncTransport

from dpd_pl.adapters.http_client import build_async_client, build_sync_client
from dpd_pl.core.errors import NetworkError, ServiceError, ValidationError
from dpd_pl.core.interfaces.transport import ConnectionHandle, ConnectionOptions

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({408, 429, 502, 503, 504})


def _operation_names(client: AsyncClient) -> frozenset[str]:
    names: set[str] = set()
    for service in client.wsdl.services.values():
        for port in service.ports.values():
            names.update(port.binding.all().keys())
    return frozenset(names)


def _map_error(procedure: str, exc: Exception) -> Exception:
    """zeep/httpx -> `DPDError` (el invocador decide si reintentar)."""

    if isinstance(exc, Fault):
        return ServiceError(
            f"SOAP fault in {procedure}: {exc.message}",
            "SOAP_FAULT",
            cause=exc,
            details={"faultcode": exc.code, "faultstring": exc.message, "actor": exc.actor},
            procedure=procedure,
        )
    if isinstance(exc, TransportError):
        status = exc.status_code or 0
        if status >= 500 or status in _RETRYABLE_STATUS:
            return NetworkError(f"{procedure}: HTTP {status}", cause=exc)
        return ServiceError(
            f"{procedure}: HTTP {status}",
            f"HTTP_{status}",
            cause=exc,
            procedure=procedure,
        )
    if isinstance(exc, ZeepValidationError):
        return ValidationError(
            f"Request for {procedure} does not match the service description: {exc.message}",
            code="REQUEST_SCHEMA",
            cause=exc,
        )
    if isinstance(exc, httpx.TransportError):
        return NetworkError(f"{procedure}: {type(exc).__name__}: {exc}", cause=exc)
    if isinstance(exc, ZeepError):
        return ServiceError(
            f"{procedure}: {exc}",
            "REMOTE_FAILURE",
            cause=exc,
            procedure=procedure,
        )
    return exc


class SoapConnection(ConnectionHandle):
    """Handle sobre un `zeep.AsyncClient` ya inicializado."""

    def __init__(
        self,
        client: AsyncClient,
        *,
        wsdl_http: httpx.Client | None = None,
        url: str = "",
    ) -> None:
        self._client = client
        self._wsdl_http = wsdl_http
        self._procedures = _operation_names(client)
        self.url = url

    @property
    def procedures(self) -> frozenset[str]:
        return self._procedures

    async def invoke(self, procedure: str, args: Mapping[str, Any]) -> Any:
        try:
            operation = self._client.service[procedure]
            result = await operation(**dict(args))
        except Exception as exc:
            mapped = _map_error(procedure, exc)
            if mapped is exc:
                raise
            raise mapped from exc
        return serialize_object(result, target_cls=dict)

    async def aclose(self) -> None:
        await self._client.transport.aclose()
        if self._wsdl_http is not None:
            self._wsdl_http.close()


async def create_soap_connection(url: str, options: ConnectionOptions) -> SoapConnection:
    """Handshake SOAP: WSDL + proxy. Cualquier fallo -> `NetworkError`."""

    http = build_async_client(options, accept="text/xml, application/soap+xml")
    wsdl_http = build_sync_client(options)
    transport = AsyncTransport(client=http, wsdl_client=wsdl_http)

    def _load() -> AsyncClient:
        return AsyncClient(wsdl=url, transport=transport, settings=Settings(strict=False))

    try:
        client = await asyncio.wait_for(asyncio.to_thread(_load), timeout=options.timeout)
        connection = SoapConnection(client, wsdl_http=wsdl_http, url=url)
    except Exception as exc:
        await http.aclose()
        wsdl_http.close()
        raise NetworkError(f"Failed to create SOAP client: {url}", cause=exc) from exc

    logger.debug("SOAP session ready: %s (%d operations)", url, len(connection.procedures))
    return connection
