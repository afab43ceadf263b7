"""Gestor de sesión: endpoints -> handles de conexión.

Invariantes:
    - `handle(kind)` antes de `initialize()` (o tras `aclose()`) lanza
      `NotInitializedError` de forma síncrona, sin tocar la red.
    - Cualquier fallo de handshake se entrega como `NetworkError`.
    - Un handle no se recrea solo tras un fallo; el llamador re-inicializa.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from dpd_pl.core.endpoints import Environment, ServiceKind, resolve_endpoint
from dpd_pl.core.errors import DPDError, NetworkError, NotInitializedError
from dpd_pl.core.interfaces.transport import (
    ConnectionFactory,
    ConnectionHandle,
    ConnectionOptions,
)

_log = logging.getLogger(__name__)

DEFAULT_KINDS: tuple[ServiceKind, ...] = (ServiceKind.PACKAGE_SERVICES, ServiceKind.PUDO)


async def open_session(
    url: str,
    options: ConnectionOptions,
    factory: ConnectionFactory,
) -> ConnectionHandle:
    """Handshake contra `url`. No cachea: una llamada por sesión."""

    try:
        return await factory(url, options)
    except DPDError:
        raise
    except Exception as exc:
        raise NetworkError(f"Failed to open session: {url}", cause=exc) from exc


def default_factories() -> dict[ServiceKind, ConnectionFactory]:
    # Import diferido: el core no depende de zeep/httpx salvo al abrir sesión.
    from dpd_pl.adapters.rest_transport import create_pudo_connection
    from dpd_pl.adapters.soap_transport import create_soap_connection

    return {
        ServiceKind.PACKAGE_SERVICES: create_soap_connection,
        ServiceKind.XML_SERVICES: create_soap_connection,
        ServiceKind.PUDO: create_pudo_connection,
    }


class SessionManager:
    """Dueño exclusivo de los handles de una sesión."""

    def __init__(
        self,
        environment: Environment | str,
        options: ConnectionOptions,
        *,
        factories: Mapping[ServiceKind, ConnectionFactory] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._environment = Environment(environment)
        self._options = options
        self._factories = dict(factories) if factories is not None else default_factories()
        self._handles: dict[ServiceKind, ConnectionHandle] = {}
        self._log = logger or _log

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def initialized(self) -> bool:
        return bool(self._handles)

    def endpoint(self, kind: ServiceKind) -> str:
        return resolve_endpoint(self._environment, kind)

    async def initialize(self, kinds: Iterable[ServiceKind] = DEFAULT_KINDS) -> None:
        """Abre un handle por familia; si uno falla, cierra los ya abiertos.

        Re-inicializar cierra los handles que quedan reemplazados.
        """

        opened: dict[ServiceKind, ConnectionHandle] = {}
        try:
            for kind in kinds:
                url = self.endpoint(kind)
                factory = self._factories.get(kind)
                if factory is None:
                    raise NetworkError(f"No transport registered for {kind.value}")
                self._log.info("Opening %s session: %s", kind.value, url)
                opened[kind] = await open_session(url, self._options, factory)
        except BaseException:
            for handle in opened.values():
                await handle.aclose()
            raise
        for kind, handle in opened.items():
            previous = self._handles.get(kind)
            if previous is not None and previous is not handle:
                await previous.aclose()
        self._handles.update(opened)

    def handle(self, kind: ServiceKind = ServiceKind.PACKAGE_SERVICES) -> ConnectionHandle:
        handle = self._handles.get(kind)
        if handle is None:
            raise NotInitializedError(
                f"DPD client not initialized for {kind.value}. Call initialize() first."
            )
        return handle

    async def aclose(self) -> None:
        handles, self._handles = self._handles, {}
        for handle in handles.values():
            await handle.aclose()
