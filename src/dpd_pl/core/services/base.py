"""Piezas comunes de los servicios de dominio.

Flujo de cada operación:
    input -> contrato de request -> árbol de argumentos -> invocador
          -> estado API -> contrato de response -> resultado público

Invariantes:
    - Un input inválido lanza `ValidationError` antes de pedir el handle.
    - `Status` distinto de OK -> `ServiceError(API_ERROR)` con la respuesta
      cruda en `details`.
    - Respuesta que no cumple el contrato -> `ServiceError(INVALID_RESPONSE)`
      con todas las violaciones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from dpd_pl.core.catalog import Procedure, spec_for
from dpd_pl.core.domain.contracts import StatusEnvelope
from dpd_pl.core.domain.models import Credentials
from dpd_pl.core.errors import ServiceError
from dpd_pl.core.invoker import RetryPolicy, invoke
from dpd_pl.core.session import SessionManager
from dpd_pl.core.validation import validate, validate_input

_log = logging.getLogger(__name__)

_RETURN_KEY = "return"
_STATUS_OK = "OK"


@dataclass(frozen=True)
class ServiceContext:
    """Dependencias compartidas (solo lectura) por todos los servicios."""

    session: SessionManager
    credentials: Credentials
    policy: RetryPolicy
    logger: logging.Logger = _log


def unwrap_return(raw: Any) -> Any:
    """`{"return": x}` -> `x`; cualquier otra forma se deja intacta."""

    if isinstance(raw, Mapping) and len(raw) == 1 and _RETURN_KEY in raw:
        return raw[_RETURN_KEY]
    return raw


def check_api_status(procedure: str, payload: Any) -> None:
    """Falla si la respuesta trae `Status` distinto de OK."""

    if not isinstance(payload, Mapping):
        return
    envelope = validate(StatusEnvelope, payload)
    if not envelope.ok:
        raise ServiceError(
            f"Invalid status fields in {procedure} response",
            "INVALID_RESPONSE",
            violations=envelope.violations,
            details=payload,
            procedure=procedure,
        )
    status = envelope.value.status if envelope.value else None
    if status is not None and status.upper() != _STATUS_OK:
        info = envelope.value.status_info or status  # type: ignore[union-attr]
        raise ServiceError(
            f"DPD API error in {procedure}: {info}",
            "API_ERROR",
            details=payload,
            procedure=procedure,
        )


class BaseService:
    """Base de los servicios: validación de input + llamada tipada."""

    def __init__(self, context: ServiceContext) -> None:
        self._ctx = context

    @property
    def _auth(self) -> dict[str, object]:
        return self._ctx.credentials.to_wire()

    def _parse(self, procedure: Procedure, data: Any) -> Any:
        return validate_input(spec_for(procedure).request, data)

    async def _call(self, procedure: Procedure, args: Mapping[str, Any]) -> Any:
        spec = spec_for(procedure)
        handle = self._ctx.session.handle(spec.kind)
        raw = await invoke(
            handle,
            spec.name,
            args,
            self._ctx.policy,
            logger=self._ctx.logger,
        )

        payload = unwrap_return(raw)
        check_api_status(spec.name, payload)

        result = validate(spec.response, payload)
        if not result.ok:
            self._ctx.logger.warning(
                "%s returned an invalid response (%d violations)",
                spec.name,
                len(result.violations),
            )
            raise ServiceError(
                f"Invalid response from {spec.name}",
                "INVALID_RESPONSE",
                violations=result.violations,
                details=payload,
                procedure=spec.name,
            )
        return result.value
