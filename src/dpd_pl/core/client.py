"""Cliente DPD: raíz de composición.

Por qué una clase aparte de los servicios:
- Resuelve configuración, credenciales y política de reintento una sola vez.
- Es el dueño del `SessionManager`; los servicios solo leen handles.

Uso:
    async with DPDClient(load_settings(environment="demo")) as client:
        result = await client.domestic.generate_package_numbers([...])
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from dpd_pl.core.config import DPDSettings, load_settings
from dpd_pl.core.endpoints import Environment, ServiceKind
from dpd_pl.core.interfaces.transport import ConnectionFactory, ConnectionOptions
from dpd_pl.core.invoker import RetryPolicy
from dpd_pl.core.services.base import ServiceContext
from dpd_pl.core.services.domestic import DomesticService
from dpd_pl.core.services.international import InternationalService
from dpd_pl.core.services.pudo import PudoService
from dpd_pl.core.services.returns import ReturnService
from dpd_pl.core.services.tracking import TrackingService
from dpd_pl.core.session import DEFAULT_KINDS, SessionManager

_log = logging.getLogger(__name__)


class DPDClient:
    """Agrupa los servicios de dominio sobre una sesión compartida."""

    def __init__(
        self,
        settings: DPDSettings | None = None,
        *,
        factories: Mapping[ServiceKind, ConnectionFactory] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._log = logger or _log

        credentials = self.settings.credentials()
        self.retry_policy = RetryPolicy.from_settings(self.settings)
        options = ConnectionOptions(
            timeout=self.settings.timeout_seconds,
            max_retries=self.settings.max_retries,
            credentials=credentials,
        )
        self.session = SessionManager(
            self.settings.environment,
            options,
            factories=factories,
            logger=self._log,
        )

        context = ServiceContext(
            session=self.session,
            credentials=credentials,
            policy=self.retry_policy,
            logger=self._log,
        )
        self.domestic = DomesticService(context)
        self.international = InternationalService(context)
        self.returns = ReturnService(context)
        self.tracking = TrackingService(context)
        self.pudo = PudoService(context)

    @property
    def environment(self) -> Environment:
        return self.session.environment

    @property
    def initialized(self) -> bool:
        return self.session.initialized

    async def initialize(self, kinds: Iterable[ServiceKind] = DEFAULT_KINDS) -> None:
        """Handshake con cada familia de servicios (WSDL / cliente REST)."""

        await self.session.initialize(kinds)
        self._log.info("DPD client ready (%s)", self.environment.value)

    async def aclose(self) -> None:
        await self.session.aclose()

    async def __aenter__(self) -> DPDClient:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
