"""Transporte REST para la API myPUDO (httpx).

Expone la API REST como un `ConnectionHandle` más: el invocador, el
validador y el manejo de errores son los mismos que para SOAP.

Procedimientos:
- `findParcelShops`: GET /parcelshops?<query>
- `getParcelShop`:   GET /parcelshops/{pudoId} (404 -> None)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Mapping
from urllib.parse import quote

import httpx

from dpd_pl.adapters.http_client import build_async_client
from dpd_pl.core.errors import NetworkError, ProcedureNotFoundError, ServiceError
from dpd_pl.core.interfaces.transport import ConnectionHandle, ConnectionOptions

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({408, 429})


def _query_params(args: Mapping[str, Any]) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in args.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            params[key] = ",".join(str(v) for v in value)
        else:
            params[key] = str(value)
    return params


class PudoConnection(ConnectionHandle):
    """Handle REST sobre un `httpx.AsyncClient` con `base_url`."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._routes: dict[str, Callable[[Mapping[str, Any]], Awaitable[Any]]] = {
            "findParcelShops": self._find_parcel_shops,
            "getParcelShop": self._get_parcel_shop,
        }

    @property
    def procedures(self) -> frozenset[str]:
        return frozenset(self._routes)

    async def invoke(self, procedure: str, args: Mapping[str, Any]) -> Any:
        route = self._routes.get(procedure)
        if route is None:
            raise ProcedureNotFoundError(procedure, available=self._routes.keys())
        try:
            return await route(args)
        except httpx.TransportError as exc:
            raise NetworkError(f"{procedure}: {type(exc).__name__}: {exc}", cause=exc) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _find_parcel_shops(self, args: Mapping[str, Any]) -> Any:
        response = await self._client.get("/parcelshops", params=_query_params(args))
        return self._decode("findParcelShops", response)

    async def _get_parcel_shop(self, args: Mapping[str, Any]) -> Any:
        pudo_id = quote(str(args["pudoId"]), safe="")
        response = await self._client.get(f"/parcelshops/{pudo_id}")
        if response.status_code == 404:
            return None
        return self._decode("getParcelShop", response)

    @staticmethod
    def _decode(procedure: str, response: httpx.Response) -> Any:
        status = response.status_code
        if status >= 500 or status in _RETRYABLE_STATUS:
            raise NetworkError(f"{procedure}: HTTP {status}")
        if status >= 400:
            raise ServiceError(
                f"PUDO API error: {status} {response.reason_phrase}",
                f"HTTP_{status}",
                details=response.text[:2000],
                procedure=procedure,
            )
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            raise ServiceError(
                f"{procedure}: response is not valid JSON",
                "INVALID_RESPONSE",
                cause=exc,
                procedure=procedure,
            ) from exc


async def create_pudo_connection(
    url: str,
    options: ConnectionOptions,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PudoConnection:
    """REST no tiene handshake: solo se construye el cliente con Basic auth."""

    client = build_async_client(options, base_url=url, basic_auth=True, transport=transport)
    logger.debug("PUDO session ready: %s", url)
    return PudoConnection(client)
